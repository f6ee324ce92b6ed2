"""
Cache exceptions

This module defines the exception hierarchy for persistcache.
All cache-related errors inherit from CacheError base class.
"""


class CacheError(Exception):
    """
    Base exception for all persistcache errors.

    Catch this to handle any cache error generically.
    """

    pass


class CacheConfigError(CacheError):
    """
    Exception raised when cache configuration is invalid.

    This is the only error that persistcache surfaces to the caller. It is
    raised synchronously, before any file I/O, when:
    - The cache directory or cache file name is empty
    - The cache type is missing
    - The TTL or its time unit is missing or invalid
    - A TOML configuration file cannot be read or parsed

    Args:
        message: Description of the configuration error
    """

    pass


class CacheStorageError(CacheError):
    """
    Exception raised when the persisted cache file cannot be decoded or written.

    Persistence code catches it internally and turns it into a load status
    or a failed save, so it never reaches users of the cache.

    Args:
        message: Description of the storage error
        originalError: The original exception that caused this error (optional)
    """

    def __init__(self, message: str, originalError: Exception | None = None):
        """
        Initialize CacheStorageError with message and optional original error.

        Args:
            message: Description of the storage error
            originalError: The original exception that caused this error
        """
        super().__init__(message)
        self.originalError = originalError


class CorruptedStorageError(CacheStorageError):
    """Raised when stored bytes are not a valid encoded stream at all."""

    pass


class SchemaMismatchError(CacheStorageError):
    """Raised when stored bytes decode fine but don't have the expected mapping shape."""

    pass
