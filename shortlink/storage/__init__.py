"""Storage layer for URL shortener."""

from .base import MappingStoreBase
from .exceptions import (
    StoreError,
    NotFoundError,
    StorageError,
    CodeExistsError,
    UnsupportedBackendError,
)
from .factory import create_store, SUPPORTED_BACKENDS
from .memory import MemoryStore
from .models import URLMapping

__all__ = [
    "MappingStoreBase",
    "MemoryStore",
    "URLMapping",
    "create_store",
    "SUPPORTED_BACKENDS",
    "StoreError",
    "NotFoundError",
    "StorageError",
    "CodeExistsError",
    "UnsupportedBackendError",
]
