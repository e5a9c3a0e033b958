"""Errors raised by mapping store backends."""


class StoreError(Exception):
    """Base class for all store errors."""


class NotFoundError(StoreError):
    """The short code is unknown (or expired, on read paths)."""


class StorageError(StoreError):
    """I/O, timeout, connection or migration failure in a backend."""


class CodeExistsError(StorageError):
    """A mapping with the same short code is already stored."""


class UnsupportedBackendError(StoreError):
    """The configured database type cannot be constructed."""
