"""
Abstract cache interface for persistcache, dood!

This module defines the generic ApplicationCache contract shared by every
cache variant: presence check, get/put/evict, the TTL sweep and the
start/stop lifecycle hooks called by the embedding application.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional

from .types import K, LoadStatus, V


class ApplicationCache(ABC, Generic[K, V]):
    """
    Generic application cache contract, dood!

    Type Parameters:
        K: The key type accepted by get/put/evict
        V: The value type (any type the codec can persist)

    Lifecycle:
        start() must be called once before anything else, stop() once at the
        very end. The application is responsible for not calling other
        methods concurrently with start() or stop().

    Example:
        >>> cache = GeneratedKeyCache[str](CacheConfig(CacheType.CSRF, cacheDir="/tmp/cache"))
        >>> cache.start()
        >>> cache.putInCache("token", "abc")
        >>> cache.getFromCache("token")  # "abc"
        >>> cache.flush()
        >>> cache.stop()
    """

    @abstractmethod
    def isPresentInCache(self, identifier: Any) -> bool:
        """
        Check if an entry exists for the raw identifier, dood!

        Args:
            identifier: Raw identifier (not a CacheKey)

        Returns:
            bool: True if an entry for the identifier is stored
        """
        pass

    @abstractmethod
    def getFromCache(self, key: K) -> Optional[V]:
        """
        Get cached value.

        Args:
            key: The cache key to retrieve

        Returns:
            Optional[V]: Stored value or None
        """
        pass

    @abstractmethod
    def putInCache(self, key: K, entry: V) -> bool:
        """
        Store value unless the key is already present, dood!

        Under concurrent calls with equal keys exactly one value wins.

        Returns:
            bool: True if the value was stored, False if an entry already existed
        """
        pass

    @abstractmethod
    def evictFromCache(self, key: K) -> None:
        """Remove entry for key, no-op if absent"""
        pass

    @abstractmethod
    def flush(self) -> int:
        """
        Evict entries older than the TTL.

        Returns:
            int: Number of evicted entries
        """
        pass

    @abstractmethod
    def start(self) -> LoadStatus:
        """
        Load persisted entries. Never raises on storage problems.

        Returns:
            LoadStatus: Result of loading the cache file
        """
        pass

    @abstractmethod
    def stop(self) -> bool:
        """
        Persist entries. Never raises on storage problems.

        Returns:
            bool: True if entries were written
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove all entries from memory, the cache file is left untouched"""
        pass

    @abstractmethod
    def getStats(self) -> Dict[str, Any]:
        """
        Get cache statistics, dood!

        Returns:
            Dict[str, Any]: Implementation-specific statistics
        """
        pass
