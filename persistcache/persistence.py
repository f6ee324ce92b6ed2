"""
Persistence of the cache store to a single file, dood!

PersistenceManager loads the store from the configured cache file at startup
and writes it back at shutdown. Neither operation ever raises: every failure
is turned into a LoadStatus (load) or a False result (save) and logged.
"""

import logging
import os
import stat
from pathlib import Path
from typing import Optional

from .codec import PickleMappingCodec
from .config import CacheConfig
from .exceptions import CacheStorageError, SchemaMismatchError
from .store import ConcurrentStore
from .types import LoadStatus, MappingCodec

logger = logging.getLogger(__name__)

# Content of the file written on first run, not a valid encoded mapping
PLACEHOLDER_BYTES = b"\x00"


def isPlaceholder(data: bytes) -> bool:
    """Check if data is the first-run marker (or an empty file)"""
    return data == b"" or data == PLACEHOLDER_BYTES


def _makeWritable(path: Path) -> None:
    mode = path.stat().st_mode
    if not mode & stat.S_IWUSR:
        os.chmod(path, mode | stat.S_IWUSR)


class PersistenceManager:
    """
    Loads and saves a ConcurrentStore using a MappingCodec, dood!

    Load outcomes:
    - OK: file decoded, entries merged into the store
    - ABSENT: no file, cache directory and placeholder file created
    - PLACEHOLDER: file only holds the first-run marker
    - CORRUPTED: file is not a valid stream (tampered with or truncated)
    - SCHEMA_MISMATCH: file decodes but to the wrong shape (format changed)

    Args:
        config: Cache configuration providing type tag and location
        codec: Mapping codec (default: PickleMappingCodec)
    """

    def __init__(self, config: CacheConfig, codec: Optional[MappingCodec] = None):
        self.config = config
        self.codec: MappingCodec = codec if codec is not None else PickleMappingCodec()
        self._location: Optional[Path] = None

    @property
    def location(self) -> Path:
        """
        Cache file location.

        Fixed by the first load(): later changes of the config directory or
        file name don't move the file the store is saved to.
        """
        if self._location is not None:
            return self._location
        return self.config.cacheLocation

    def load(self, store: ConcurrentStore) -> LoadStatus:
        """
        Load cache file into store.

        Args:
            store: Store to merge loaded entries into

        Returns:
            LoadStatus: What was found at the configured location
        """
        cacheType = self.config.cacheType
        if self._location is None:
            self._location = self.config.cacheLocation
        location = self._location

        try:
            with open(location, "rb") as f:
                data = f.read()
        except (FileNotFoundError, NotADirectoryError):
            logger.info(f"{cacheType} cache doesn't exist! Creating a brand new one at {location}, dood!")
            self._createStorage()
            return LoadStatus.ABSENT
        except OSError as e:
            logger.warning(f"{cacheType} cache at {location} is unreadable: {e}. Starting with empty cache.")
            return LoadStatus.CORRUPTED

        if isPlaceholder(data):
            logger.info(f"{cacheType} cache at {location} is empty, it will be written on shutdown")
            return LoadStatus.PLACEHOLDER

        try:
            mapping = self.codec.decode(data)
        except SchemaMismatchError as e:
            logger.error(
                f"{cacheType} cache implementation has changed from last invocation ({e})."
                f" Delete {location} manually and re-create."
            )
            return LoadStatus.SCHEMA_MISMATCH
        except CacheStorageError as e:
            logger.warning(
                f"{cacheType} cache at {location} was tampered with ({e})."
                " If it was a clean-up activity or a rogue administrator, you have been warned!"
            )
            return LoadStatus.CORRUPTED

        store.putAll(mapping)
        logger.info(f"Loaded {len(mapping)} entries into {cacheType} cache from {location}")
        return LoadStatus.OK

    def _createStorage(self) -> None:
        """Create cache directory (with missing parents) and the placeholder file"""
        cacheDir = self.location.parent
        try:
            # Cache dir itself plus up to two missing parent levels
            missingDirs = [d for d in (cacheDir, cacheDir.parent, cacheDir.parent.parent) if not d.exists()]
            cacheDir.mkdir(parents=True, exist_ok=True)
            for directory in dict.fromkeys([cacheDir, *missingDirs]):
                _makeWritable(directory)

            with open(self.location, "wb") as f:
                f.write(PLACEHOLDER_BYTES)
        except OSError as e:
            logger.error(f"Failed to create {self.config.cacheType} cache storage at {self.location}: {e}")

    def save(self, store: Optional[ConcurrentStore]) -> bool:
        """
        Write the whole store to the cache file, replacing it atomically.

        Args:
            store: Store to persist

        Returns:
            bool: True if the file was written, False otherwise (details are logged)
        """
        cacheType = self.config.cacheType
        location = self.location

        if store is None:
            logger.info(f"{cacheType} cache storage unavailable! Details weren't persisted to {location}.")
            return False

        if location != self.config.cacheLocation:
            logger.warning(
                f"{cacheType} cache location changed to {self.config.cacheLocation} after start,"
                f" saving to {location} it was loaded from"
            )

        tempPath = location.with_suffix(location.suffix + ".tmp")
        try:
            data = self.codec.encode(store.snapshot())
            with open(tempPath, "wb") as f:
                f.write(data)
            tempPath.replace(location)
        except (OSError, CacheStorageError) as e:
            logger.info(
                f"{cacheType} cache storage tampered/unreadable/unavailable: {e}."
                f" Details weren't persisted to {location}. It is advisable to clean the cache directory."
            )
            try:
                tempPath.unlink(missing_ok=True)
            except OSError:
                pass
            return False

        logger.info(f"Saved {len(store)} entries of {cacheType} cache to {location}")
        return True
