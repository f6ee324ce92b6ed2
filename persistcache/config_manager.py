"""
TOML configuration loading for persistcache.

Example config:

    [logging]
    level = "INFO"
    console = true

    [caches.csrf]
    type = "CSRF"
    ttl = "30m"
    cache-dir = "/var/lib/app/cache"

    [caches.users]
    type = "USER"
    ttl = 12
    ttl-unit = "hours"
    cache-file = "user-details"
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import tomli

import persistcache.logging_utils as logging_utils

from .config import CacheConfig
from .exceptions import CacheConfigError

logger = logging.getLogger(__name__)


class ConfigManager:
    """Loads cache and logging configuration from TOML files, dood!"""

    def __init__(self, configPath: str | Path = "persistcache.toml", configDirs: Optional[List[str]] = None):
        """
        Initialize ConfigManager with config file path and optional config directories.

        Raises:
            CacheConfigError: If no configuration can be loaded
        """
        self.configPath = Path(configPath)
        self.configDirs = configDirs or []
        self.config = self._loadConfig()

    def _findTomlFilesRecursive(self, directory: str) -> List[Path]:
        """Recursively find all .toml files in a directory, dood!"""
        tomlFiles: List[Path] = []
        dirPath = Path(directory)

        if not dirPath.is_dir():
            logger.warning(f"Config directory {directory} does not exist or is not a directory, skipping, dood!")
            return tomlFiles

        for tomlFile in dirPath.rglob("*.toml"):
            if tomlFile.is_file():
                tomlFiles.append(tomlFile)
                logger.debug(f"Found config file: {tomlFile}")

        return sorted(tomlFiles)  # Sort for consistent ordering

    def _mergeConfigs(self, baseConfig: Dict[str, Any], newConfig: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge two configuration dictionaries, dood!"""
        merged = baseConfig.copy()

        for key, value in newConfig.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self._mergeConfigs(merged[key], value)
            else:
                merged[key] = value

        return merged

    def _readToml(self, path: Path) -> Dict[str, Any]:
        try:
            with open(path, "rb") as f:
                return tomli.load(f)
        except (OSError, tomli.TOMLDecodeError) as e:
            raise CacheConfigError(f"Failed to load config file {path}: {e}")

    def _loadConfig(self) -> Dict[str, Any]:
        """Load configuration from TOML file and optional config directories."""
        hasConfigFile = self.configPath.exists()
        if not hasConfigFile and not self.configDirs:
            raise CacheConfigError(f"Configuration file {self.configPath} not found!")

        config: Dict[str, Any] = {}
        if hasConfigFile:
            config = self._readToml(self.configPath)
            logger.info(f"Loaded main config from {self.configPath}")

        for configDir in self.configDirs:
            tomlFiles = self._findTomlFilesRecursive(configDir)
            logger.info(f"Found {len(tomlFiles)} .toml files in {configDir}")
            for tomlFile in tomlFiles:
                config = self._mergeConfigs(config, self._readToml(tomlFile))
                logger.info(f"Merged config from {tomlFile}")

        caches = config.get("caches", {})
        if not isinstance(caches, dict):
            raise CacheConfigError("[caches] must be a table")

        return config

    def get(self, key: str, default=None) -> Any:
        """Get configuration value by key."""
        return self.config.get(key, default)

    def getLoggingConfig(self) -> Dict[str, Any]:
        """Get logging-specific configuration."""
        return self.get("logging", {})

    def initLogging(self) -> logging.Logger:
        """Configure the persistcache loggers from the [logging] table."""
        return logging_utils.initLogging(self.getLoggingConfig())

    def getCacheConfig(self, name: str) -> CacheConfig:
        """
        Build CacheConfig for [caches.<name>] table.

        The table name is used as cache type when `type` is omitted.

        Raises:
            CacheConfigError: If there is no such table or it's invalid
        """
        caches = self.get("caches", {})
        if name not in caches:
            raise CacheConfigError(f"No [caches.{name}] section in configuration")
        return CacheConfig.fromDict(caches[name], cacheType=name)

    def getCacheConfigs(self) -> Dict[str, CacheConfig]:
        """Build CacheConfig for every [caches.*] table."""
        return {name: self.getCacheConfig(name) for name in self.get("caches", {})}
