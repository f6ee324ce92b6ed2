"""
File system cache core, dood!

FileSystemCacheCore wires the store, key generator, persistence manager and
TTL evictor of one cache instance together and owns its lifecycle. Cache
variants hold a core and decide only how caller keys map to store keys.
"""

import logging
from threading import RLock
from typing import Any, Callable, Dict, Generic, Optional

import persistcache.utils as utils

from .config import CacheConfig
from .evictor import TtlEvictor
from .key import CacheKey
from .key_generator import TimestampKeyGenerator
from .persistence import PersistenceManager
from .store import ConcurrentStore
from .types import KeyGenerator, LoadStatus, MappingCodec, V

logger = logging.getLogger(__name__)


class FileSystemCacheCore(Generic[V]):
    """
    Shared engine of file-backed caches.

    Args:
        config: Validated cache configuration
        codec: Mapping codec for the cache file (default: pickle)
        keyGenerator: Key generator (default: TimestampKeyGenerator using clock)
        clock: Callable returning current time in milliseconds
    """

    def __init__(
        self,
        config: CacheConfig,
        *,
        codec: Optional[MappingCodec] = None,
        keyGenerator: Optional[KeyGenerator[Any]] = None,
        clock: Callable[[], int] = utils.currentTimeMillis,
    ):
        self.config = config
        self.store: ConcurrentStore[V] = ConcurrentStore()
        self.keyGenerator: KeyGenerator[Any] = (
            keyGenerator if keyGenerator is not None else TimestampKeyGenerator(clock=clock)
        )
        self.persistence = PersistenceManager(config, codec)
        self.evictor = TtlEvictor(self.store, config, clock=clock)

        self._lifecycleLock = RLock()
        self._loadStatus: Optional[LoadStatus] = None
        self._stopped = False

    @property
    def loadStatus(self) -> Optional[LoadStatus]:
        """Result of start(), None if not started yet"""
        return self._loadStatus

    @property
    def isStarted(self) -> bool:
        return self._loadStatus is not None

    @property
    def isStopped(self) -> bool:
        return self._stopped

    def generateKey(self, identifier: Any) -> CacheKey:
        return self.keyGenerator.generateKey(identifier)

    def isPresent(self, identifier: Any) -> bool:
        return self.store.containsKey(self.generateKey(identifier))

    def start(self) -> LoadStatus:
        """Load the cache file once; later calls return the first result"""
        with self._lifecycleLock:
            if self._loadStatus is not None:
                logger.warning(f"{self.config.cacheType} cache already started, ignoring start(), dood!")
                return self._loadStatus

            self._loadStatus = self.persistence.load(self.store)
            logger.info(f"{self.config.cacheType} cache started ({self._loadStatus}), {len(self.store)} entries")
            return self._loadStatus

    def stop(self) -> bool:
        """Save the store once; later calls do nothing"""
        with self._lifecycleLock:
            if self._stopped:
                logger.warning(f"{self.config.cacheType} cache already stopped, ignoring stop(), dood!")
                return False
            self._stopped = True
            return self.persistence.save(self.store)

    def flush(self) -> int:
        return self.evictor.flush()

    def clear(self) -> None:
        self.store.clear()

    def getStats(self) -> Dict[str, Any]:
        return {
            "type": str(self.config.cacheType),
            "entries": len(self.store),
            "ttl": self.config.ttl,
            "ttlUnit": str(self.config.ttlUnit),
            "location": str(self.persistence.location),
            "loadStatus": None if self._loadStatus is None else str(self._loadStatus),
            "stopped": self._stopped,
        }
