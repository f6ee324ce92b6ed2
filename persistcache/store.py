"""
Thread-safe in-memory store backing every cache instance.
"""

import logging
from threading import RLock
from typing import Dict, Generic, List, Mapping, Optional, Tuple

from .key import CacheKey
from .types import V

logger = logging.getLogger(__name__)


class ConcurrentStore(Generic[V]):
    """
    Mapping from CacheKey to value, safe to use from many threads, dood!

    Every operation holds the lock only for the duration of a single dict
    operation, so nothing blocks indefinitely. putIfAbsent and
    removeIfExpired are the only check-and-set operations; everything else
    is a plain overwrite or removal.

    Entries keep the exact CacheKey they were stored with, so the creation
    time seen by the TTL sweep is the one of the entry currently present.
    """

    def __init__(self):
        self._entries: Dict[CacheKey, Tuple[CacheKey, V]] = {}
        self._lock = RLock()

    def get(self, key: CacheKey) -> Optional[V]:
        """Get value stored under key or None"""
        with self._lock:
            entry = self._entries.get(key)
            return None if entry is None else entry[1]

    def putIfAbsent(self, key: CacheKey, value: V) -> bool:
        """
        Store value unless an equal key is already present.

        Returns:
            bool: True if the value was inserted, False if an entry already existed
        """
        with self._lock:
            if key in self._entries:
                return False
            self._entries[key] = (key, value)
            return True

    def remove(self, key: CacheKey) -> bool:
        """Remove entry if present. Returns True if something was removed"""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def removeIfExpired(self, key: CacheKey, cutoffMillis: int) -> bool:
        """
        Remove entry for key only if the stored key was created before cutoffMillis.

        The check uses the creation time of the entry present right now, not
        of the passed key, so an entry re-put after a snapshot was taken
        survives the sweep.

        Returns:
            bool: True if an expired entry was removed
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or entry[0].creationTimeMillis >= cutoffMillis:
                return False
            del self._entries[key]
            return True

    def containsKey(self, key: CacheKey) -> bool:
        with self._lock:
            return key in self._entries

    def snapshotKeys(self) -> List[CacheKey]:
        """
        Copy of all keys taken under the lock.

        Entries added after the copy is taken are not part of it.
        """
        with self._lock:
            return [storedKey for storedKey, _ in self._entries.values()]

    def snapshot(self) -> Dict[CacheKey, V]:
        """Shallow copy of the whole mapping"""
        with self._lock:
            return {storedKey: value for storedKey, value in self._entries.values()}

    def putAll(self, mapping: Mapping[CacheKey, V]) -> None:
        """Merge mapping into the store, overwriting equal keys"""
        with self._lock:
            for key, value in mapping.items():
                self._entries[key] = (key, value)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
