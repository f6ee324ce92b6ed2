"""
Cache key for persistcache, dood!

A CacheKey pairs a raw identifier with the time it was generated. Only the
identifier takes part in equality and hashing, so a freshly generated key
finds an entry stored under an older key with the same identifier.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class CacheKey:
    """
    Identity wrapper around a raw identifier plus creation timestamp.

    Attributes:
        identifier: Caller-supplied identifier, must be hashable
        creationTimeMillis: Wall-clock creation time in milliseconds, ignored by == and hash()

    Example:
        >>> CacheKey("token", 1) == CacheKey("token", 2)
        True
        >>> CacheKey("token", 1) == CacheKey("other", 1)
        False
    """

    identifier: Any
    creationTimeMillis: int = field(default=0, compare=False, hash=False)
