"""
Aliyun OSS Client

Extends the MinIO client, which already speaks the S3-compatible API of
OSS, with the calls the filesystem adapter needs but the stock client does
not expose: marker based listing pages, object ACLs and appendable objects.
"""

import logging
from dataclasses import dataclass, field
from typing import List
from xml.etree import ElementTree

from minio import Minio

logger = logging.getLogger(__name__)

ACL_PRIVATE = "private"
ACL_PUBLIC_READ = "public-read"
ACL_PUBLIC_READ_WRITE = "public-read-write"

ALL_USERS_URI = "http://acs.amazonaws.com/groups/global/AllUsers"


@dataclass
class ObjectListing:
    """One page of a marker based listing"""
    objects: List[str] = field(default_factory=list)
    prefixes: List[str] = field(default_factory=list)
    next_marker: str = ""
    is_truncated: bool = False


def _text(element, tag: str) -> str:
    child = element.find("{*}" + tag)
    if child is None or child.text is None:
        return ""
    return child.text


def parse_object_listing(data: bytes) -> ObjectListing:
    """Parse a ListBucketResult document"""
    root = ElementTree.fromstring(data)

    listing = ObjectListing(
        objects=[_text(item, "Key") for item in root.findall("{*}Contents")],
        prefixes=[_text(item, "Prefix") for item in root.findall("{*}CommonPrefixes")],
        is_truncated=_text(root, "IsTruncated").lower() == "true",
    )

    # NextMarker is only sent back when a delimiter is used
    listing.next_marker = _text(root, "NextMarker")
    if listing.is_truncated and not listing.next_marker:
        keys = listing.objects + listing.prefixes
        listing.next_marker = max(keys) if keys else ""
    if not listing.is_truncated:
        listing.next_marker = ""

    return listing


def parse_canned_acl(data: bytes) -> str:
    """Fold an AccessControlPolicy document into a canned ACL name"""
    root = ElementTree.fromstring(data)

    permissions = set()
    for grant in root.iterfind(".//{*}Grant"):
        grantee = grant.find("{*}Grantee")
        if grantee is None or _text(grantee, "URI") != ALL_USERS_URI:
            continue
        permissions.add(_text(grant, "Permission"))

    if "FULL_CONTROL" in permissions or {"READ", "WRITE"} <= permissions:
        return ACL_PUBLIC_READ_WRITE
    if "READ" in permissions:
        return ACL_PUBLIC_READ
    return ACL_PRIVATE


class AliyunOssClient(Minio):
    """
    MinIO client with Aliyun OSS extensions

    Requests go through the client's own signing and transport, so errors
    surface as the SDK's ``S3Error``.
    """

    def list_objects_page(
        self,
        bucket_name: str,
        prefix: str = "",
        marker: str = "",
        max_keys: int = 100,
        delimiter: str = "/"
    ) -> ObjectListing:
        """
        List one page of objects and common prefixes

        Args:
            bucket_name: Source bucket name
            prefix: Key prefix to list under
            marker: Key to start after, empty for the first page
            max_keys: Page size
            delimiter: Grouping delimiter for common prefixes

        Returns:
            The page, with the marker of the next one
        """
        query_params = {
            "prefix": prefix,
            "marker": marker,
            "max-keys": str(max_keys),
        }
        if delimiter:
            query_params["delimiter"] = delimiter

        logger.debug(f"列举对象: {bucket_name}/{prefix} (marker: {marker or '-'})")
        response = self._execute("GET", bucket_name, query_params=query_params)
        return parse_object_listing(response.data)

    def get_object_acl(self, bucket_name: str, object_name: str) -> str:
        """Get the canned ACL of an object"""
        response = self._execute(
            "GET", bucket_name, object_name, query_params={"acl": ""}
        )
        return parse_canned_acl(response.data)

    def put_object_acl(self, bucket_name: str, object_name: str, acl: str) -> None:
        """Set the canned ACL of an object"""
        self._execute(
            "PUT",
            bucket_name,
            object_name,
            headers={"x-amz-acl": acl},
            query_params={"acl": ""},
        )

    def append_object(
        self,
        bucket_name: str,
        object_name: str,
        data: bytes,
        position: int
    ) -> int:
        """
        Append data to an appendable object, creating it at position 0

        Returns:
            Position for the next append
        """
        response = self._execute(
            "POST",
            bucket_name,
            object_name,
            body=data,
            query_params={"append": "", "position": str(position)},
        )
        next_position = response.headers.get("x-oss-next-append-position")
        return int(next_position) if next_position else position + len(data)
