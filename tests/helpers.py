from minio.error import MinioException, S3Error

from oss_filesystem.infrastructure.storage.object_storage.oss_client import ObjectListing


class FakeS3Error(S3Error):
    """S3Error carrying only an error code"""

    def __init__(self, code: str):
        MinioException.__init__(self, f"S3 operation failed; code: {code}")
        self._fake_code = code

    @property
    def code(self):
        return self._fake_code


def paged_listing(tree):
    """
    Build a list_objects_page side effect from {prefix: [page, ...]}

    Each page is (objects, prefixes); the marker is the next page index.
    """
    def list_objects_page(bucket, prefix="", marker="", max_keys=100, delimiter="/"):
        pages = tree.get(prefix, [([], [])])
        index = int(marker) if marker else 0
        objects, prefixes = pages[index]
        next_marker = str(index + 1) if index + 1 < len(pages) else ""
        return ObjectListing(
            objects=list(objects),
            prefixes=list(prefixes),
            next_marker=next_marker,
            is_truncated=bool(next_marker),
        )

    return list_objects_page
