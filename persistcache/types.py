"""
Core type definitions and protocols for persistcache, dood!

This module contains the enums, type variables and protocols shared by the
cache core, its persistence layer and the cache variants.
"""

from enum import StrEnum
from typing import TYPE_CHECKING, Dict, Protocol, TypeVar

if TYPE_CHECKING:
    from .key import CacheKey

# Type variables for generic cache operations, dood!
K = TypeVar("K")  # Key type accepted by a cache variant
V = TypeVar("V")  # Value type - can be any type
T = TypeVar("T", contravariant=True)  # Identifier type for key generators


class CacheType(StrEnum):
    """Known cache kinds. Used to tag cache instances in logs and default file names."""

    CSRF = "CSRF"
    USER = "USER"
    SESSION = "SESSION"


class TimeUnit(StrEnum):
    """Time unit for TTL values."""

    MILLISECONDS = "MILLISECONDS"
    SECONDS = "SECONDS"
    MINUTES = "MINUTES"
    HOURS = "HOURS"
    DAYS = "DAYS"

    @classmethod
    def fromStr(cls, value: str) -> "TimeUnit":
        """
        Parse time unit name, case-insensitive.

        Raises:
            ValueError: If value is not a known unit
        """
        return cls(value.strip().upper())

    def toMillis(self, value: float) -> int:
        """Convert value expressed in this unit to milliseconds."""
        return int(value * _MILLIS_PER_UNIT[self])


_MILLIS_PER_UNIT: Dict[TimeUnit, int] = {
    TimeUnit.MILLISECONDS: 1,
    TimeUnit.SECONDS: 1000,
    TimeUnit.MINUTES: 60 * 1000,
    TimeUnit.HOURS: 60 * 60 * 1000,
    TimeUnit.DAYS: 24 * 60 * 60 * 1000,
}


class LoadStatus(StrEnum):
    """Outcome of loading a persisted cache file."""

    OK = "ok"
    # No file yet, brand new one was created
    ABSENT = "absent"
    # File holds only the first-run marker
    PLACEHOLDER = "placeholder"
    # File exists but isn't a valid encoded stream
    CORRUPTED = "corrupted"
    # File decodes but has unexpected shape
    SCHEMA_MISMATCH = "schema_mismatch"


class KeyGenerator(Protocol[T]):
    """
    Protocol for converting raw identifiers into store keys, dood!

    Type Parameters:
        T: The type of identifiers that can be converted to cache keys

    Example:
        >>> generator = TimestampKeyGenerator()
        >>> key = generator.generateKey("csrf-token-123")
        >>> print(key.identifier)  # "csrf-token-123"
    """

    def generateKey(self, obj: T) -> "CacheKey":
        """
        Generate cache key from identifier, dood!

        Args:
            obj: The raw identifier

        Returns:
            CacheKey: Key wrapping the identifier
        """
        ...


class MappingCodec(Protocol):
    """
    Protocol for converting the whole store mapping to bytes and back.

    Implementations must raise CorruptedStorageError when the bytes are not a
    valid stream and SchemaMismatchError when they decode to something that
    is not a Dict[CacheKey, Any].
    """

    def encode(self, mapping: Dict["CacheKey", object]) -> bytes:
        """
        Encode store mapping to bytes, dood!

        Args:
            mapping: Snapshot of the store

        Returns:
            bytes: Encoded mapping
        """
        ...

    def decode(self, data: bytes) -> Dict["CacheKey", object]:
        """
        Decode bytes back to store mapping, dood!

        Args:
            data: Bytes read from the cache file

        Returns:
            Dict[CacheKey, object]: The decoded mapping
        """
        ...
