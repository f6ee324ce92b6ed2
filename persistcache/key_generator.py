"""
Built-in key generator for persistcache, dood!

TimestampKeyGenerator stamps every identifier with the current time. The
stamp is what the TTL sweep compares against, while lookups ignore it.
"""

from typing import Any, Callable

import persistcache.utils as utils

from .key import CacheKey
from .types import KeyGenerator


class TimestampKeyGenerator(KeyGenerator[Any]):
    """
    Key generator using the identifier and current time stamp, dood!

    Should be enough for almost everything. Pass a custom clock to control
    creation time (useful in tests).

    Example:
        >>> generator = TimestampKeyGenerator()
        >>> key = generator.generateKey("user:123")
        >>> key == CacheKey("user:123")
        True
    """

    __slots__ = ("clock",)

    def __init__(self, *, clock: Callable[[], int] = utils.currentTimeMillis):
        """
        Args:
            clock: Callable returning current time in milliseconds
        """
        self.clock = clock

    def generateKey(self, obj: Any) -> CacheKey:
        """
        Wrap identifier into a CacheKey created now.

        Args:
            obj: Raw identifier (any hashable object)

        Returns:
            CacheKey: New key with creationTimeMillis set to the clock value
        """
        return CacheKey(identifier=obj, creationTimeMillis=self.clock())
