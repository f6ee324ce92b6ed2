"""
Cache configuration for persistcache.

CacheConfig holds everything one cache instance needs to know about where it
lives and how long entries survive. It validates itself on construction so
that a broken configuration fails before any file is touched.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from .exceptions import CacheConfigError
from .types import CacheType, TimeUnit
from .utils import parseDuration

logger = logging.getLogger(__name__)

DEFAULT_TTL = 30
DEFAULT_TTL_UNIT = TimeUnit.MINUTES
CACHE_FILE_SUFFIX = ".ser"


def defaultCacheDir() -> str:
    """Default cache directory: <cwd>/temp/app_cache"""
    return os.path.join(os.getcwd(), "temp", "app_cache")


def _assertNotEmpty(value: Optional[str], message: str) -> None:
    if value is None or not str(value).strip():
        raise CacheConfigError(message)


class CacheConfig:
    """
    Configuration of a single file-backed cache, dood!

    The storage file name is derived once, here: the cache file name with the
    `.ser` suffix appended (unless it's already there). Loading and saving
    both use the same derived location.

    Args:
        cacheType: Cache type tag (CacheType member or non-empty string)
        cacheDir: Directory holding the cache file (default: <cwd>/temp/app_cache)
        cacheFile: Cache file name without suffix (default: the type tag)
        ttl: Time-to-live of each entry
        ttlUnit: Unit of ttl

    Raises:
        CacheConfigError: If any of the values is missing or invalid

    Example:
        >>> config = CacheConfig(CacheType.CSRF, cacheDir="/tmp/cache", cacheFile="tokens")
        >>> str(config.cacheLocation)
        '/tmp/cache/tokens.ser'
    """

    def __init__(
        self,
        cacheType: CacheType | str,
        cacheDir: Optional[str | Path] = None,
        cacheFile: Optional[str] = None,
        ttl: float = DEFAULT_TTL,
        ttlUnit: TimeUnit | str = DEFAULT_TTL_UNIT,
    ):
        if cacheType is None or (isinstance(cacheType, str) and not cacheType.strip()):
            raise CacheConfigError("A cache type is required.")
        self.cacheType = cacheType

        self._cacheDir = ""
        self._cacheFile = ""
        self.setCacheDir(defaultCacheDir() if cacheDir is None else str(cacheDir))
        self.setCacheFile(str(cacheType) if cacheFile is None else cacheFile)
        self.setTtl(ttl, ttlUnit)

    def setTtl(self, ttl: float, ttlUnit: TimeUnit | str) -> None:
        """
        Set time-to-live and its unit for every entry of the cache.

        Raises:
            CacheConfigError: If ttl is missing/negative or ttlUnit is unknown
        """
        if ttl is None:
            raise CacheConfigError("Can't accept None as TTL.")
        if ttlUnit is None:
            raise CacheConfigError("Can't accept None as TTL time unit.")
        if isinstance(ttl, bool) or not isinstance(ttl, (int, float)) or ttl < 0:
            raise CacheConfigError(f"TTL must be a non-negative number, got {ttl!r}.")
        if not isinstance(ttlUnit, TimeUnit):
            try:
                ttlUnit = TimeUnit.fromStr(str(ttlUnit))
            except ValueError:
                raise CacheConfigError(f"Unknown TTL time unit: {ttlUnit!r}.")

        self.ttl = ttl
        self.ttlUnit = ttlUnit

    def setCacheDir(self, cacheDir: str | Path) -> None:
        _assertNotEmpty(None if cacheDir is None else str(cacheDir), "A cache directory location is required.")
        self._cacheDir = str(cacheDir)

    def setCacheFile(self, cacheFile: str) -> None:
        _assertNotEmpty(cacheFile, "A cache filename is required.")
        self._cacheFile = cacheFile

    @property
    def cacheDir(self) -> Path:
        return Path(self._cacheDir)

    @property
    def cacheFile(self) -> str:
        return self._cacheFile

    @property
    def storageFileName(self) -> str:
        """Cache file name with the serialized-cache suffix"""
        if self._cacheFile.endswith(CACHE_FILE_SUFFIX):
            return self._cacheFile
        return self._cacheFile + CACHE_FILE_SUFFIX

    @property
    def cacheLocation(self) -> Path:
        """Full path of the cache file: cacheDir / storageFileName"""
        return self.cacheDir / self.storageFileName

    @property
    def ttlMillis(self) -> int:
        return self.ttlUnit.toMillis(self.ttl)

    @classmethod
    def fromDict(cls, data: Dict[str, Any], cacheType: Optional[CacheType | str] = None) -> "CacheConfig":
        """
        Build config from a dict (e.g. a TOML table), dood!

        Recognised keys: `type`, `cache-dir`, `cache-file`, `ttl`, `ttl-unit`.
        `ttl` may be a number (in `ttl-unit`) or a duration string such as
        "1h30m", "500ms" or "0:45", which is converted to milliseconds.

        Raises:
            CacheConfigError: If the data is invalid
        """
        rawType = data.get("type", cacheType)
        if rawType is None:
            raise CacheConfigError("A cache type is required.")
        resolvedType: CacheType | str = rawType
        if isinstance(rawType, str) and rawType.upper() in CacheType.__members__:
            resolvedType = CacheType[rawType.upper()]

        ttl = data.get("ttl", DEFAULT_TTL)
        ttlUnit = data.get("ttl-unit", DEFAULT_TTL_UNIT)
        if isinstance(ttl, str):
            try:
                ttl = parseDuration(ttl)
            except ValueError as e:
                raise CacheConfigError(str(e))
            ttlUnit = TimeUnit.MILLISECONDS

        return cls(
            resolvedType,
            cacheDir=data.get("cache-dir"),
            cacheFile=data.get("cache-file"),
            ttl=ttl,
            ttlUnit=ttlUnit,
        )

    def __repr__(self) -> str:
        return (
            f"CacheConfig(type={self.cacheType}, location={self.cacheLocation}, "
            f"ttl={self.ttl} {self.ttlUnit})"
        )
