"""
Concrete file-backed caches, dood!

Available Variants:
    - GeneratedKeyCache: raw identifiers are turned into CacheKey on every call
    - DirectKeyCache: callers pass CacheKey instances themselves
    - CsrfTokenCache: GeneratedKeyCache preconfigured for CSRF tokens
"""

from typing import Any, Callable, Dict, Optional

import persistcache.utils as utils

from .config import DEFAULT_TTL, DEFAULT_TTL_UNIT, CacheConfig
from .core import FileSystemCacheCore
from .interface import ApplicationCache
from .key import CacheKey
from .types import CacheType, K, KeyGenerator, LoadStatus, MappingCodec, TimeUnit, V


def _requireCacheKey(key: Any) -> CacheKey:
    if not isinstance(key, CacheKey):
        raise TypeError(f"DirectKeyCache expects CacheKey, got {type(key).__name__}, dood!")
    return key


class FileSystemCache(ApplicationCache[K, V]):
    """
    Common part of the file-backed variants: lifecycle, presence check and
    TTL sweep go straight to the wrapped FileSystemCacheCore.
    """

    def __init__(
        self,
        config: CacheConfig,
        *,
        codec: Optional[MappingCodec] = None,
        keyGenerator: Optional[KeyGenerator[Any]] = None,
        clock: Callable[[], int] = utils.currentTimeMillis,
    ):
        self._core: FileSystemCacheCore[V] = FileSystemCacheCore(
            config, codec=codec, keyGenerator=keyGenerator, clock=clock
        )

    @property
    def config(self) -> CacheConfig:
        return self._core.config

    @property
    def loadStatus(self) -> Optional[LoadStatus]:
        return self._core.loadStatus

    def setTtl(self, ttl: float, ttlUnit: TimeUnit | str) -> None:
        """Change TTL of all entries, applies from the next flush"""
        self._core.config.setTtl(ttl, ttlUnit)

    def isPresentInCache(self, identifier: Any) -> bool:
        return self._core.isPresent(identifier)

    def flush(self) -> int:
        return self._core.flush()

    def start(self) -> LoadStatus:
        return self._core.start()

    def stop(self) -> bool:
        return self._core.stop()

    def clear(self) -> None:
        self._core.clear()

    def getStats(self) -> Dict[str, Any]:
        return self._core.getStats()


class GeneratedKeyCache(FileSystemCache[Any, V]):
    """
    Cache keyed by raw identifiers, dood!

    Every get/put/evict passes the identifier through the key generator, so
    an entry's creation time is the moment it was first put.

    Example:
        >>> cache = GeneratedKeyCache[str](CacheConfig(CacheType.SESSION, cacheDir="/tmp/cache"))
        >>> cache.start()
        >>> cache.putInCache("session:42", "payload")
        True
        >>> cache.getFromCache("session:42")
        'payload'
    """

    def getFromCache(self, key: Any) -> Optional[V]:
        return self._core.store.get(self._core.generateKey(key))

    def putInCache(self, key: Any, entry: V) -> bool:
        return self._core.store.putIfAbsent(self._core.generateKey(key), entry)

    def evictFromCache(self, key: Any) -> None:
        self._core.store.remove(self._core.generateKey(key))


class DirectKeyCache(FileSystemCache[CacheKey, V]):
    """
    Cache keyed by caller-supplied CacheKey instances.

    Useful when the caller controls an entry's creation time, for example
    when re-inserting user details that were authenticated earlier. Use
    makeKey() to stamp an identifier with the cache clock.
    """

    def makeKey(self, identifier: Any) -> CacheKey:
        return self._core.generateKey(identifier)

    def isPresentInCache(self, key: Any) -> bool:
        if isinstance(key, CacheKey):
            return self._core.store.containsKey(key)
        return super().isPresentInCache(key)

    def getFromCache(self, key: CacheKey) -> Optional[V]:
        return self._core.store.get(_requireCacheKey(key))

    def putInCache(self, key: CacheKey, entry: V) -> bool:
        return self._core.store.putIfAbsent(_requireCacheKey(key), entry)

    def evictFromCache(self, key: CacheKey) -> None:
        self._core.store.remove(_requireCacheKey(key))


class CsrfTokenCache(GeneratedKeyCache[V]):
    """
    Cache for CSRF tokens. Sensible defaults are used unless explicitly set.

    Args:
        cacheDir: Cache directory (default: <cwd>/temp/app_cache)
        cacheFile: Cache file name (default: "CSRF", stored as CSRF.ser)
        ttl: Token time-to-live
        ttlUnit: Unit of ttl
        codec: Mapping codec (default: pickle)
    """

    def __init__(
        self,
        cacheDir: Optional[str] = None,
        cacheFile: Optional[str] = None,
        *,
        ttl: float = DEFAULT_TTL,
        ttlUnit: TimeUnit | str = DEFAULT_TTL_UNIT,
        codec: Optional[MappingCodec] = None,
        clock: Callable[[], int] = utils.currentTimeMillis,
    ):
        config = CacheConfig(CacheType.CSRF, cacheDir=cacheDir, cacheFile=cacheFile, ttl=ttl, ttlUnit=ttlUnit)
        super().__init__(config, codec=codec, clock=clock)
