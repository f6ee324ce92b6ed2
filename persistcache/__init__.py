"""
persistcache - file-persisted TTL cache, dood!

A process-local cache whose entries expire after a configurable TTL and whose
contents survive restarts by being written to a file at shutdown and read
back at startup. Meant for short-lived security artifacts such as CSRF tokens
or session-scoped user data.

Core Components:
- CacheKey / TimestampKeyGenerator: identifier + creation time, compared by identifier
- ConcurrentStore: thread-safe mapping with insert-if-absent
- PersistenceManager: load at start(), save at stop(), never raising
- TtlEvictor: synchronous sweep of expired entries
- ApplicationCache: contract implemented by GeneratedKeyCache, DirectKeyCache, NullCache

Example Usage:
    >>> from persistcache import CacheConfig, CacheType, GeneratedKeyCache, TimeUnit
    >>>
    >>> cache = GeneratedKeyCache[str](
    ...     CacheConfig(CacheType.CSRF, cacheDir="/var/lib/app/cache", ttl=30, ttlUnit=TimeUnit.MINUTES)
    ... )
    >>> cache.start()  # Loads /var/lib/app/cache/CSRF.ser if present
    >>> cache.putInCache("token:abc", "session-1")
    >>> cache.flush()  # Call periodically from your scheduler
    >>> cache.stop()  # Writes the file back
"""

from .codec import JsonMappingCodec, PickleMappingCodec
from .config import CacheConfig
from .config_manager import ConfigManager
from .core import FileSystemCacheCore
from .evictor import TtlEvictor
from .exceptions import CacheConfigError, CacheError, CacheStorageError, CorruptedStorageError, SchemaMismatchError
from .interface import ApplicationCache
from .key import CacheKey
from .key_generator import TimestampKeyGenerator
from .logging_utils import initLogging
from .null_cache import NullCache
from .persistence import PersistenceManager
from .store import ConcurrentStore
from .types import CacheType, K, KeyGenerator, LoadStatus, MappingCodec, TimeUnit, V
from .variants import CsrfTokenCache, DirectKeyCache, FileSystemCache, GeneratedKeyCache

__version__ = "0.1.0"

__all__ = [
    # Core types
    "CacheType",
    "TimeUnit",
    "LoadStatus",
    "KeyGenerator",
    "MappingCodec",
    "K",
    "V",
    # Keys and storage
    "CacheKey",
    "TimestampKeyGenerator",
    "ConcurrentStore",
    "PickleMappingCodec",
    "JsonMappingCodec",
    "PersistenceManager",
    "TtlEvictor",
    # Configuration
    "CacheConfig",
    "ConfigManager",
    "initLogging",
    # Caches
    "ApplicationCache",
    "FileSystemCacheCore",
    "FileSystemCache",
    "GeneratedKeyCache",
    "DirectKeyCache",
    "CsrfTokenCache",
    "NullCache",
    # Errors
    "CacheError",
    "CacheConfigError",
    "CacheStorageError",
    "CorruptedStorageError",
    "SchemaMismatchError",
]
