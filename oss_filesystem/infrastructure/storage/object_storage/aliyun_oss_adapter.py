"""
Aliyun OSS Filesystem Adapter

Implements CloudFilesystem on top of the OSS client.
Every operation delegates to one client call; SDK errors are either
recorded and reported as a falsy result, or raised as FileNotFoundException
for read operations.
"""

import io
import logging
import mimetypes
import tempfile
from datetime import timedelta
from typing import Any, BinaryIO, Dict, Iterable, Iterator, List, Optional, Union

from minio.commonconfig import CopySource
from minio.deleteobjects import DeleteObject
from minio.error import MinioException, S3Error
from urllib3.exceptions import HTTPError

from ...exceptions import FileNotFoundException, InvalidArgumentError
from .base import CloudFilesystem, FileMetadata, StorageConfig
from .oss_client import ACL_PUBLIC_READ, ACL_PUBLIC_READ_WRITE, ObjectListing

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = ("NoSuchKey", "NoSuchObject", "ResourceNotFound")

# Failures raised by client calls: service errors, transport errors and
# rejected arguments (empty key, invalid bucket name)
SDK_ERRORS = (MinioException, HTTPError, ValueError)

# Multipart part size for streams of unknown length
STREAM_PART_SIZE = 10 * 1024 * 1024
READ_CHUNK_SIZE = 32 * 1024
SPOOL_MAX_SIZE = 8 * 1024 * 1024


class AliyunOssAdapter(CloudFilesystem):
    """
    Aliyun OSS implementation of CloudFilesystem

    Unknown attributes are forwarded to the wrapped client, so SDK calls
    not covered by the filesystem contract stay reachable.
    """

    # Inherit bucket visibility settings
    VISIBILITY_DEFAULT = "default"
    VISIBILITY_PUBLIC_READ = ACL_PUBLIC_READ
    VISIBILITY_PUBLIC_READ_WRITE = ACL_PUBLIC_READ_WRITE

    def __init__(self, client, bucket: str, config: Optional[StorageConfig] = None):
        if config is None:
            config = StorageConfig(access_key_id="", access_key_secret="", bucket=bucket)
        self.config = config
        self.bucket = bucket
        self.client = client
        self._errors: List[Exception] = []

    def _record(self, error: Exception, message: str) -> None:
        logger.error(f"❌ {message}: {error}")
        self._errors.append(error)

    def url(self, path: str) -> Optional[str]:
        """Get a signed URL valid for ``access_timeout`` seconds"""
        try:
            return self.client.presigned_get_object(
                self.bucket,
                path,
                expires=timedelta(seconds=self.config.access_timeout)
            )
        except SDK_ERRORS as e:
            self._record(e, f"生成URL失败 {self.bucket}/{path}")
            return None

    def exists(self, path: str) -> bool:
        try:
            self.client.stat_object(self.bucket, path)
            return True
        except S3Error as e:
            if e.code in NOT_FOUND_CODES:
                return False
            self._record(e, f"检查文件存在性失败 {self.bucket}/{path}")
            return False
        except SDK_ERRORS as e:
            self._record(e, f"检查文件存在性失败 {self.bucket}/{path}")
            return False

    def get(self, path: str) -> bytes:
        response = None
        try:
            response = self.client.get_object(self.bucket, path)
            return response.read()
        except SDK_ERRORS as e:
            raise FileNotFoundException(str(e)) from e
        finally:
            if response is not None:
                response.close()
                response.release_conn()

    def read_stream(self, path: str) -> BinaryIO:
        """
        Download the object into a temporary file

        Small objects stay in memory; the file is rewound before returning.
        """
        stream = tempfile.SpooledTemporaryFile(max_size=SPOOL_MAX_SIZE)
        response = None
        completed = False
        try:
            response = self.client.get_object(self.bucket, path)
            for chunk in response.stream(READ_CHUNK_SIZE):
                stream.write(chunk)
            stream.seek(0)
            completed = True
            return stream
        except SDK_ERRORS as e:
            raise FileNotFoundException(str(e)) from e
        finally:
            if not completed:
                stream.close()
            if response is not None:
                response.close()
                response.release_conn()

    def _write_kwargs(self, path: str, options: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        options = dict(options or {})

        content_type = options.get("content_type")
        if content_type is None and '.' in path:
            content_type = mimetypes.guess_type(path)[0]

        metadata = dict(options.get("metadata") or {})
        visibility = options.get("visibility")
        if visibility:
            if visibility == self.VISIBILITY_PUBLIC:
                visibility = self.VISIBILITY_PUBLIC_READ_WRITE
            metadata["x-amz-acl"] = visibility

        kwargs: Dict[str, Any] = {"content_type": content_type or "application/octet-stream"}
        if metadata:
            kwargs["metadata"] = metadata
        return kwargs

    def put(
        self,
        path: str,
        contents: Union[str, bytes, BinaryIO],
        options: Optional[Dict[str, Any]] = None
    ) -> bool:
        """
        Write the contents of a file

        Options:
            content_type: MIME type, guessed from the key when omitted
            metadata: user metadata / extra headers
            visibility: ``public``, ``private`` or an OSS canned ACL
        """
        if isinstance(contents, str):
            contents = contents.encode("utf-8")

        # Handle different input types
        if isinstance(contents, bytes):
            data_stream = io.BytesIO(contents)
            file_size = len(contents)
        else:
            data_stream = contents
            try:
                current_pos = data_stream.tell()
                data_stream.seek(0, 2)
                file_size = data_stream.tell() - current_pos
                data_stream.seek(current_pos)
            except (OSError, io.UnsupportedOperation):
                # Not seekable, read the remaining content
                content = data_stream.read()
                if isinstance(content, str):
                    content = content.encode("utf-8")
                data_stream = io.BytesIO(content)
                file_size = len(content)

        try:
            logger.debug(f"正在上传对象: {self.bucket}/{path} (大小: {file_size}字节)")
            self.client.put_object(
                self.bucket,
                path,
                data_stream,
                file_size,
                **self._write_kwargs(path, options)
            )
            logger.info(f"✅ 文件对象上传成功: {self.bucket}/{path}")
            return True
        except SDK_ERRORS as e:
            self._record(e, f"文件上传失败 {self.bucket}/{path}")
            return False

    def write_stream(
        self,
        path: str,
        resource: BinaryIO,
        options: Optional[Dict[str, Any]] = None
    ) -> bool:
        if not callable(getattr(resource, "read", None)):
            raise InvalidArgumentError("resource is not a file handle")

        try:
            logger.debug(f"正在上传文件流: {self.bucket}/{path}")
            self.client.put_object(
                self.bucket,
                path,
                resource,
                -1,
                part_size=STREAM_PART_SIZE,
                **self._write_kwargs(path, options)
            )
            logger.info(f"✅ 文件流上传成功: {self.bucket}/{path}")
            return True
        except SDK_ERRORS as e:
            self._record(e, f"文件流上传失败 {self.bucket}/{path}")
            return False

    def get_visibility(self, path: str) -> str:
        try:
            visibility = self.client.get_object_acl(self.bucket, path)
            if visibility == self.VISIBILITY_PUBLIC_READ_WRITE:
                visibility = self.VISIBILITY_PUBLIC
            return visibility
        except SDK_ERRORS as e:
            self._record(e, f"获取文件权限失败 {self.bucket}/{path}")
            return self.VISIBILITY_DEFAULT

    def set_visibility(self, path: str, visibility: str) -> bool:
        if visibility == self.VISIBILITY_PUBLIC:
            visibility = self.VISIBILITY_PUBLIC_READ_WRITE

        try:
            self.client.put_object_acl(self.bucket, path, visibility)
            return True
        except SDK_ERRORS as e:
            self._record(e, f"设置文件权限失败 {self.bucket}/{path}")
            return False

    def prepend(self, path: str, data: Union[str, bytes]) -> bool:
        if isinstance(data, str):
            data = data.encode("utf-8")

        if self.exists(path):
            return self.put(path, data + self.get(path))

        return self.put(path, data)

    def append(self, path: str, data: Union[str, bytes]) -> bool:
        """Append to an appendable object, creating it when missing"""
        if isinstance(data, str):
            data = data.encode("utf-8")

        try:
            self.client.append_object(self.bucket, path, data, self.size(path))
            return True
        except SDK_ERRORS as e:
            self._record(e, f"追加写入失败 {self.bucket}/{path}")
            return False

    def delete(self, paths: Union[str, Iterable[str]], *more: str) -> bool:
        if isinstance(paths, str):
            paths = [paths, *more]

        success = True
        for path in paths:
            try:
                self.client.remove_object(self.bucket, path)
                logger.info(f"✅ 文件删除成功: {self.bucket}/{path}")
            except SDK_ERRORS as e:
                self._record(e, f"删除文件失败 {self.bucket}/{path}")
                success = False

        return success

    def copy(self, source: str, target: str) -> bool:
        try:
            self.client.copy_object(
                self.bucket, target, CopySource(self.bucket, source)
            )
            return True
        except SDK_ERRORS as e:
            self._record(e, f"复制文件失败 {source} → {target}")
            return False

    def move(self, source: str, target: str) -> bool:
        if not self.copy(source, target):
            return False

        return self.delete(source)

    def size(self, path: str) -> int:
        meta = self.get_metadata(path)
        return meta.size if meta and meta.size else 0

    def last_modified(self, path: str) -> int:
        meta = self.get_metadata(path)
        if meta is None or meta.last_modified is None:
            return 0
        return int(meta.last_modified.timestamp())

    def files(self, directory: Optional[str] = None, recursive: bool = False) -> List[str]:
        return list(self.cursor(directory, recursive))

    def all_files(self, directory: Optional[str] = None) -> List[str]:
        return self.files(directory, True)

    def directories(self, directory: Optional[str] = None, recursive: bool = False) -> List[str]:
        directories = []
        for page in self._pages(directory):
            for prefix in page.prefixes:
                directories.append(prefix)

                if recursive:
                    directories.extend(self.directories(prefix, True))

        return directories

    def all_directories(self, directory: Optional[str] = None) -> List[str]:
        return self.directories(directory, True)

    def make_directory(self, path: str) -> bool:
        key = path.rstrip("/") + "/"

        try:
            self.client.put_object(self.bucket, key, io.BytesIO(b""), 0)
            logger.info(f"✅ 创建目录成功: {self.bucket}/{key}")
            return True
        except SDK_ERRORS as e:
            self._record(e, f"创建目录失败 {self.bucket}/{key}")
            return False

    def delete_directory(self, directory: str) -> bool:
        try:
            paths = list(self.cursor(directory, True))
            if not paths:
                return True

            # remove_objects is lazy, errors are reported while iterating
            errors = list(self.client.remove_objects(
                self.bucket, [DeleteObject(path) for path in paths]
            ))
        except SDK_ERRORS as e:
            self._record(e, f"删除目录失败 {self.bucket}/{directory}")
            return False

        for error in errors:
            logger.error(f"❌ 删除文件失败 {self.bucket}/{error.name}: {error.code} {error.message}")

        if errors:
            return False

        logger.info(f"✅ 目录删除成功: {self.bucket}/{directory} (共{len(paths)}个文件)")
        return True

    def get_metadata(self, path: str) -> Optional[FileMetadata]:
        """Get object metadata without fetching its content"""
        try:
            stat = self.client.stat_object(self.bucket, path)
        except SDK_ERRORS as e:
            self._record(e, f"获取文件元数据失败 {self.bucket}/{path}")
            return None

        headers = {str(k).lower(): v for k, v in (stat.metadata or {}).items()}
        return FileMetadata(
            object_name=path,
            size=stat.size or 0,
            content_type=stat.content_type,
            last_modified=stat.last_modified,
            etag=stat.etag,
            headers=headers
        )

    @staticmethod
    def _normalize_prefix(prefix: Optional[str]) -> str:
        if prefix is None:
            prefix = ""
        if prefix != "" and not prefix.endswith("/"):
            prefix = f"{prefix}/"
        return prefix

    def _pages(self, prefix: Optional[str]) -> Iterator[ObjectListing]:
        prefix = self._normalize_prefix(prefix)

        marker = ""
        while True:
            page = self.list_contents(prefix, marker)
            yield page

            marker = page.next_marker
            if marker == "":
                break

    def cursor(self, prefix: Optional[str] = None, recursive: bool = False) -> Iterator[str]:
        """
        Lazily iterate object keys under a directory

        Pages are requested on demand. When recursive, the common prefixes
        of a page are walked depth-first before the next page is fetched.
        """
        for page in self._pages(prefix):
            yield from page.objects

            if recursive:
                for sub_prefix in page.prefixes:
                    yield from self.cursor(sub_prefix, True)

    def list_contents(self, directory: str, marker: str = "") -> ObjectListing:
        """Fetch one listing page under a directory"""
        return self.client.list_objects_page(
            self.bucket,
            prefix=directory,
            marker=marker,
            max_keys=self.config.max_keys
        )

    def errors(self) -> List[Exception]:
        """Errors caught by operations that report failure with a falsy result"""
        return list(self._errors)

    def __getattr__(self, name: str):
        # Only called when normal lookup fails
        client = self.__dict__.get("client")
        if client is None:
            raise AttributeError(name)
        return getattr(client, name)
