"""
Tests for NullCache implementation, dood!
"""

from typing import Any

from .interface import ApplicationCache
from .null_cache import NullCache
from .types import LoadStatus


class TestNullCache:
    """Test cases for NullCache class, dood!"""

    def setup_method(self):
        self.cache = NullCache[str, Any]()

    def test_is_application_cache(self):
        assert isinstance(self.cache, ApplicationCache)

    def test_put_pretends_to_succeed(self):
        assert self.cache.putInCache("key1", "value1") is True
        assert self.cache.putInCache("key2", {"nested": "dict"}) is True

    def test_get_always_returns_none(self):
        self.cache.putInCache("key", "value")

        assert self.cache.getFromCache("key") is None
        assert self.cache.isPresentInCache("key") is False

    def test_lifecycle_is_noop(self):
        assert self.cache.start() == LoadStatus.OK
        assert self.cache.flush() == 0
        self.cache.evictFromCache("key")
        self.cache.clear()
        assert self.cache.stop() is False

    def test_get_stats_returns_disabled(self):
        assert self.cache.getStats() == {"enabled": False}
