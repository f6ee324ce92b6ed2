"""
Null cache implementation for persistcache, dood!

This module provides a no-op cache implementation that implements the
ApplicationCache contract but doesn't actually cache or persist anything.
Useful for tests and for deployments where caching should be disabled.
"""

from typing import Any, Dict, Optional

from .interface import ApplicationCache
from .types import K, LoadStatus, V


class NullCache(ApplicationCache[K, V]):
    """No-op cache that never stores anything, dood!

    Useful for:
    - Testing without cache side effects
    - Disabling cache in production
    - Benchmarking cache impact
    """

    def isPresentInCache(self, identifier: Any) -> bool:
        return False

    def getFromCache(self, key: K) -> Optional[V]:
        """Always return None (cache miss), dood!"""
        return None

    def putInCache(self, key: K, entry: V) -> bool:
        """
        Do nothing (don't cache), but pretend to succeed, dood!

        Returns:
            bool: Always True
        """
        return True

    def evictFromCache(self, key: K) -> None:
        pass

    def flush(self) -> int:
        return 0

    def start(self) -> LoadStatus:
        """Nothing to load, reported as OK"""
        return LoadStatus.OK

    def stop(self) -> bool:
        """Nothing to save, reported as not written"""
        return False

    def clear(self) -> None:
        pass

    def getStats(self) -> Dict[str, Any]:
        """
        Return cache statistics indicating cache is disabled, dood!

        Returns:
            Dict[str, Any]: Dictionary with cache disabled indicator
        """
        return {"enabled": False}
