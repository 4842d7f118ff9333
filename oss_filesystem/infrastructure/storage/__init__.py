"""
Storage Infrastructure Module

Provides storage components backed by cloud object storage.
"""

from . import object_storage

__all__ = [
    'object_storage'
]
