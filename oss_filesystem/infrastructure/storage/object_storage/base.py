"""
Cloud Filesystem Abstract Base Classes

Defines the filesystem-style contract that cloud object storage
implementations follow, so application code written against local disk
semantics can target a bucket instead (Alibaba OSS, MinIO, AWS S3, etc.).
"""

from abc import ABC, abstractmethod
from typing import Any, BinaryIO, Dict, Iterable, List, Mapping, Optional, Union
from dataclasses import dataclass, field
from datetime import datetime


DEFAULT_ENDPOINT = "oss-cn-shenzhen.aliyuncs.com"
DEFAULT_MAX_KEYS = 100
DEFAULT_ACCESS_TIMEOUT = 60


@dataclass
class StorageConfig:
    """Configuration for object storage services"""
    access_key_id: str
    access_key_secret: str
    bucket: str
    endpoint: str = DEFAULT_ENDPOINT
    secure: bool = True
    region: Optional[str] = None

    # Listing page size and signed URL lifetime (seconds)
    max_keys: int = DEFAULT_MAX_KEYS
    access_timeout: int = DEFAULT_ACCESS_TIMEOUT
    request_timeout: Optional[int] = None

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "StorageConfig":
        """
        Build a config from a plain driver dict.

        Empty values fall back to the defaults.
        """
        endpoint = config.get("end_point") or config.get("endpoint") or DEFAULT_ENDPOINT
        secure = config.get("secure")
        return cls(
            access_key_id=config.get("access_key_id") or "",
            access_key_secret=config.get("access_key_secret") or "",
            bucket=config.get("bucket") or "",
            endpoint=endpoint,
            secure=True if secure is None else bool(secure),
            region=config.get("region") or region_from_endpoint(endpoint),
            max_keys=int(config.get("max_keys") or DEFAULT_MAX_KEYS),
            access_timeout=int(config.get("access_timeout") or DEFAULT_ACCESS_TIMEOUT),
            request_timeout=int(config["request_timeout"]) if config.get("request_timeout") else None,
        )


def region_from_endpoint(endpoint: str) -> Optional[str]:
    """Derive the signing region from an OSS endpoint, e.g. oss-cn-shenzhen"""
    host = endpoint.split("://")[-1].split("/")[0]
    label = host.split(".")[0]
    if label.endswith("-internal"):
        label = label[:-len("-internal")]
    return label if label.startswith("oss-") else None


@dataclass
class FileMetadata:
    """File metadata information"""
    object_name: str
    size: int
    content_type: Optional[str] = None
    last_modified: Optional[datetime] = None
    etag: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)


class CloudFilesystem(ABC):
    """
    Abstract filesystem contract over cloud object storage

    Paths are object keys inside a single bucket. Directories are key
    prefixes ending with ``/``.
    """

    VISIBILITY_PUBLIC = "public"
    VISIBILITY_PRIVATE = "private"

    @abstractmethod
    def url(self, path: str) -> Optional[str]:
        """
        Get the URL for the file at the given path

        Args:
            path: Object key

        Returns:
            URL, or None if it could not be generated
        """
        pass

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Determine if a file exists"""
        pass

    @abstractmethod
    def get(self, path: str) -> bytes:
        """
        Get the contents of a file

        Raises:
            FileNotFoundException: if the object cannot be read
        """
        pass

    @abstractmethod
    def read_stream(self, path: str) -> BinaryIO:
        """
        Get a readable binary file object positioned at the start of the file

        Raises:
            FileNotFoundException: if the object cannot be read
        """
        pass

    @abstractmethod
    def put(
        self,
        path: str,
        contents: Union[str, bytes, BinaryIO],
        options: Optional[Dict[str, Any]] = None
    ) -> bool:
        """
        Write the contents of a file

        Args:
            path: Object key
            contents: Text, bytes or a binary stream
            options: Driver specific write options

        Returns:
            True if successful, False otherwise
        """
        pass

    @abstractmethod
    def write_stream(
        self,
        path: str,
        resource: BinaryIO,
        options: Optional[Dict[str, Any]] = None
    ) -> bool:
        """
        Write a new file using a stream

        Raises:
            InvalidArgumentError: if resource is not a file handle
        """
        pass

    @abstractmethod
    def get_visibility(self, path: str) -> str:
        """Get the visibility for the given path"""
        pass

    @abstractmethod
    def set_visibility(self, path: str, visibility: str) -> bool:
        """Set the visibility for the given path"""
        pass

    @abstractmethod
    def prepend(self, path: str, data: Union[str, bytes]) -> bool:
        """Prepend to a file"""
        pass

    @abstractmethod
    def append(self, path: str, data: Union[str, bytes]) -> bool:
        """Append to a file"""
        pass

    @abstractmethod
    def delete(self, paths: Union[str, Iterable[str]], *more: str) -> bool:
        """
        Delete the file(s) at the given path(s)

        Returns:
            True only if every path was deleted
        """
        pass

    @abstractmethod
    def copy(self, source: str, target: str) -> bool:
        """Copy a file to a new location"""
        pass

    @abstractmethod
    def move(self, source: str, target: str) -> bool:
        """Move a file to a new location"""
        pass

    @abstractmethod
    def size(self, path: str) -> int:
        """Get the file size of a given file"""
        pass

    @abstractmethod
    def last_modified(self, path: str) -> int:
        """Get the file's last modification time as a unix timestamp"""
        pass

    @abstractmethod
    def files(self, directory: Optional[str] = None, recursive: bool = False) -> List[str]:
        """Get a list of all files in a directory"""
        pass

    @abstractmethod
    def all_files(self, directory: Optional[str] = None) -> List[str]:
        """Get all of the files from the given directory (recursive)"""
        pass

    @abstractmethod
    def directories(self, directory: Optional[str] = None, recursive: bool = False) -> List[str]:
        """Get all of the directories within a given directory"""
        pass

    @abstractmethod
    def all_directories(self, directory: Optional[str] = None) -> List[str]:
        """Get all (recursive) of the directories within a given directory"""
        pass

    @abstractmethod
    def make_directory(self, path: str) -> bool:
        """Create a directory"""
        pass

    @abstractmethod
    def delete_directory(self, directory: str) -> bool:
        """Recursively delete a directory"""
        pass
