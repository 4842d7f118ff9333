"""
Object Storage Infrastructure Module

Provides the cloud filesystem contract and the factory building
provider adapters. Adapters load their SDK only when created.
"""

from .base import CloudFilesystem, StorageConfig, FileMetadata
from .factory import StorageFactory, create_aliyun_storage

__all__ = [
    'CloudFilesystem',
    'StorageConfig',
    'FileMetadata',
    'StorageFactory',
    'create_aliyun_storage'
]
