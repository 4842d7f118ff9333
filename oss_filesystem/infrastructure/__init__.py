from .exceptions import (
    InfrastructureError,
    StorageConfigError,
    InvalidArgumentError,
    FileNotFoundException,
)

__all__ = [
    'InfrastructureError',
    'StorageConfigError',
    'InvalidArgumentError',
    'FileNotFoundException',
]
