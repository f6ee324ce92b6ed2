"""
Tests for PersistenceManager, dood!

Covers every load outcome (ok, absent, placeholder, corrupted, schema
mismatch) and makes sure neither load nor save ever raises.
"""

import logging
import pickle
import stat
from pathlib import Path

import pytest

from .codec import JsonMappingCodec
from .config import CacheConfig
from .key import CacheKey
from .persistence import PLACEHOLDER_BYTES, PersistenceManager, _makeWritable, isPlaceholder
from .store import ConcurrentStore
from .types import CacheType, LoadStatus


@pytest.fixture
def cacheConfig(tmp_path: Path) -> CacheConfig:
    """Config pointing into a not yet existing nested directory, dood!"""
    return CacheConfig(CacheType.CSRF, cacheDir=tmp_path / "app" / "temp" / "app_cache", cacheFile="tokens")


@pytest.fixture
def manager(cacheConfig: CacheConfig) -> PersistenceManager:
    return PersistenceManager(cacheConfig)


class TestLoad:
    """Test load outcomes, dood!"""

    def test_absent_creates_directory_and_placeholder(self, manager, cacheConfig, caplog):
        store = ConcurrentStore[str]()

        with caplog.at_level(logging.INFO, logger="persistcache.persistence"):
            status = manager.load(store)

        assert status == LoadStatus.ABSENT
        assert len(store) == 0
        assert cacheConfig.cacheDir.is_dir()
        assert cacheConfig.cacheLocation.read_bytes() == PLACEHOLDER_BYTES
        assert "Creating a brand new one" in caplog.text

    def test_placeholder_is_not_corrupted(self, manager):
        manager.load(ConcurrentStore())

        store = ConcurrentStore[str]()
        assert manager.load(store) == LoadStatus.PLACEHOLDER
        assert len(store) == 0

    def test_empty_file_is_placeholder(self, manager, cacheConfig):
        cacheConfig.cacheDir.mkdir(parents=True)
        cacheConfig.cacheLocation.write_bytes(b"")

        assert manager.load(ConcurrentStore()) == LoadStatus.PLACEHOLDER

    def test_garbage_is_corrupted(self, manager, cacheConfig, caplog):
        cacheConfig.cacheDir.mkdir(parents=True)
        cacheConfig.cacheLocation.write_bytes(b"\x80\x05garbage bytes, dood!")
        store = ConcurrentStore[str]()

        with caplog.at_level(logging.WARNING, logger="persistcache.persistence"):
            status = manager.load(store)

        assert status == LoadStatus.CORRUPTED
        assert len(store) == 0
        assert any(r.levelno == logging.WARNING for r in caplog.records)

    def test_wrong_shape_is_schema_mismatch(self, manager, cacheConfig, caplog):
        cacheConfig.cacheDir.mkdir(parents=True)
        cacheConfig.cacheLocation.write_bytes(pickle.dumps({"raw": "keys"}))
        store = ConcurrentStore[str]()

        with caplog.at_level(logging.ERROR, logger="persistcache.persistence"):
            status = manager.load(store)

        assert status == LoadStatus.SCHEMA_MISMATCH
        assert len(store) == 0
        assert "Delete" in caplog.text

    def test_directory_in_place_of_file_is_corrupted(self, manager, cacheConfig):
        cacheConfig.cacheLocation.mkdir(parents=True)

        assert manager.load(ConcurrentStore()) == LoadStatus.CORRUPTED

    def test_unwritable_location_does_not_raise(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file where a directory should be")
        manager = PersistenceManager(CacheConfig(CacheType.USER, cacheDir=blocker / "cache"))

        assert manager.load(ConcurrentStore()) == LoadStatus.ABSENT
        assert not (blocker / "cache").exists()


class TestCreateStorage:
    """Test directory creation on first run, dood!"""

    def test_created_directories_are_user_writable(self, manager, cacheConfig, tmp_path):
        manager.load(ConcurrentStore())

        for directory in (tmp_path / "app", tmp_path / "app" / "temp", cacheConfig.cacheDir):
            assert directory.stat().st_mode & stat.S_IWUSR, directory

    def test_existing_read_only_cache_dir_is_made_writable(self, manager, cacheConfig):
        cacheConfig.cacheDir.mkdir(parents=True)
        cacheConfig.cacheDir.chmod(0o500)
        try:
            assert manager.load(ConcurrentStore()) == LoadStatus.ABSENT

            assert cacheConfig.cacheDir.stat().st_mode & stat.S_IWUSR
            assert cacheConfig.cacheLocation.read_bytes() == PLACEHOLDER_BYTES
        finally:
            cacheConfig.cacheDir.chmod(0o700)

    def test_existing_parent_mode_is_untouched(self, manager, tmp_path):
        parent = tmp_path / "app"
        parent.mkdir()
        parent.chmod(0o750)

        manager.load(ConcurrentStore())

        assert stat.S_IMODE(parent.stat().st_mode) == 0o750

    def test_make_writable_adds_user_write_bit(self, tmp_path):
        directory = tmp_path / "ro"
        directory.mkdir()
        directory.chmod(0o500)

        _makeWritable(directory)

        assert stat.S_IMODE(directory.stat().st_mode) == 0o700


class TestSave:
    """Test save behaviour, dood!"""

    def test_save_then_load_round_trip(self, manager):
        manager.load(ConcurrentStore())
        store = ConcurrentStore[dict]()
        store.putAll({CacheKey("token", 10): {"user": "prinny"}, CacheKey("other", 20): {"user": "etna"}})

        assert manager.save(store) is True

        restored = ConcurrentStore[dict]()
        assert manager.load(restored) == LoadStatus.OK
        assert restored.snapshot() == store.snapshot()
        assert {k.identifier: k.creationTimeMillis for k in restored.snapshotKeys()} == {"token": 10, "other": 20}

    def test_save_overwrites_placeholder(self, manager, cacheConfig):
        manager.load(ConcurrentStore())
        store = ConcurrentStore[str]()
        store.putIfAbsent(CacheKey("k", 1), "v")

        manager.save(store)

        assert not isPlaceholder(cacheConfig.cacheLocation.read_bytes())

    def test_save_leaves_no_temp_file(self, manager, cacheConfig):
        manager.load(ConcurrentStore())
        manager.save(ConcurrentStore())

        assert [p.name for p in cacheConfig.cacheDir.iterdir()] == ["tokens.ser"]

    def test_save_empty_store_loads_as_ok(self, manager):
        manager.load(ConcurrentStore())
        manager.save(ConcurrentStore())

        assert manager.load(ConcurrentStore()) == LoadStatus.OK

    def test_save_without_directory_returns_false(self, manager, caplog):
        store = ConcurrentStore[str]()
        store.putIfAbsent(CacheKey("k"), "v")

        with caplog.at_level(logging.INFO, logger="persistcache.persistence"):
            assert manager.save(store) is False
        assert "weren't persisted" in caplog.text

    def test_save_without_store_returns_false(self, manager):
        assert manager.save(None) is False

    def test_save_unencodable_value_returns_false(self, cacheConfig):
        manager = PersistenceManager(cacheConfig, JsonMappingCodec())
        manager.load(ConcurrentStore())
        store = ConcurrentStore[object]()
        store.putIfAbsent(CacheKey("k", 1), object())

        assert manager.save(store) is False
        assert cacheConfig.cacheLocation.read_bytes() == PLACEHOLDER_BYTES

    def test_json_codec_round_trip(self, cacheConfig):
        manager = PersistenceManager(cacheConfig, JsonMappingCodec())
        manager.load(ConcurrentStore())
        store = ConcurrentStore[list]()
        store.putIfAbsent(CacheKey(("chat", 1), 5), ["a", "b"])

        assert manager.save(store) is True

        restored = ConcurrentStore[list]()
        assert manager.load(restored) == LoadStatus.OK
        assert restored.get(CacheKey(("chat", 1))) == ["a", "b"]


class TestLocation:
    """Test that the location is fixed by the first load, dood!"""

    def test_save_goes_where_load_read(self, manager, cacheConfig, caplog):
        manager.load(ConcurrentStore())
        originalLocation = cacheConfig.cacheLocation
        cacheConfig.setCacheFile("renamed")

        store = ConcurrentStore[str]()
        store.putIfAbsent(CacheKey("token", 1), "A")
        with caplog.at_level(logging.WARNING, logger="persistcache.persistence"):
            assert manager.save(store) is True

        assert manager.location == originalLocation
        assert not (cacheConfig.cacheDir / "renamed.ser").exists()
        assert "location changed" in caplog.text

        reloaded = ConcurrentStore[str]()
        freshConfig = CacheConfig(CacheType.CSRF, cacheDir=cacheConfig.cacheDir, cacheFile="tokens")
        assert PersistenceManager(freshConfig).load(reloaded) == LoadStatus.OK
        assert reloaded.get(CacheKey("token")) == "A"

    def test_location_follows_config_before_load(self, manager, cacheConfig):
        cacheConfig.setCacheFile("renamed")

        assert manager.location == cacheConfig.cacheDir / "renamed.ser"
