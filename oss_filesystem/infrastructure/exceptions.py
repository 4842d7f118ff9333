"""
Custom exceptions for the Infrastructure layer.
"""

class InfrastructureError(Exception):
    """Base class for exceptions in the infrastructure layer."""
    pass


class StorageConfigError(InfrastructureError):
    """Raised when a storage driver cannot be built from its configuration."""
    pass


class InvalidArgumentError(InfrastructureError, ValueError):
    """Raised when an operation receives an argument it cannot work with."""
    pass


class FileNotFoundException(InfrastructureError):
    """Raised by read operations when the object cannot be fetched."""
    pass
