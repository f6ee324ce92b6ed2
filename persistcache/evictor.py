"""
TTL-based eviction sweep.
"""

import logging
from typing import Callable, Optional

import persistcache.utils as utils

from .config import CacheConfig
from .store import ConcurrentStore

logger = logging.getLogger(__name__)


class TtlEvictor:
    """
    Removes store entries whose key is older than the configured TTL.

    The sweep runs synchronously in the calling thread, nothing schedules it.
    Keys are visited from a snapshot, so entries inserted while the sweep
    runs are left for the next flush. An entry re-put under an expired
    identifier after the snapshot was taken is kept.

    Args:
        store: Store to sweep
        config: Cache configuration, TTL is read on every flush
        clock: Callable returning current time in milliseconds
    """

    def __init__(
        self,
        store: ConcurrentStore,
        config: CacheConfig,
        *,
        clock: Callable[[], int] = utils.currentTimeMillis,
    ):
        self.store = store
        self.config = config
        self.clock = clock

    def flush(self, now: Optional[int] = None) -> int:
        """
        Evict expired entries, dood!

        An entry expires when its creation time is strictly before
        `now - ttl`; an entry created exactly at the cutoff is kept.

        Args:
            now: Current time in milliseconds (default: clock value)

        Returns:
            int: Number of evicted entries
        """
        if now is None:
            now = self.clock()
        cutoff = now - self.config.ttlMillis

        evicted = 0
        for key in self.store.snapshotKeys():
            if key.creationTimeMillis < cutoff and self.store.removeIfExpired(key, cutoff):
                evicted += 1

        if evicted:
            logger.debug(f"Evicted {evicted} expired entries from {self.config.cacheType} cache")
        return evicted
