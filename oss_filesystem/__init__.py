"""
Aliyun OSS filesystem adapter.

Lets code written against the ``CloudFilesystem`` contract read and write
objects in an OSS bucket as if it were a local disk.
"""

from .infrastructure.storage.object_storage import (
    CloudFilesystem,
    StorageConfig,
    FileMetadata,
    StorageFactory,
)

__version__ = "0.1.0"

__all__ = [
    'CloudFilesystem',
    'StorageConfig',
    'FileMetadata',
    'StorageFactory',
]
