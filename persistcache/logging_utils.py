"""
Logging setup for persistcache, driven by the [logging] config table.

Only the `persistcache` logger tree is touched, so an embedding application
keeps its own root logger configuration. Example:

    [logging]
    level = "INFO"
    console = true
    file = "logs/cache.log"
    rotate = true

    [logging.logger.persistence]
    level = "DEBUG"
"""

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Dict, List, Optional

PACKAGE_LOGGER = "persistcache"
DEFAULT_LOG_LEVEL = logging.INFO
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
ROTATE_BACKUP_COUNT = 7

logger = logging.getLogger(__name__)


def getLogLevelByStr(levelStr: str, default: Optional[int] = None) -> Optional[int]:
    """Get log level by name (case-insensitive), or default if there's no such level."""
    level = logging.getLevelName(str(levelStr).upper())
    if not isinstance(level, int):
        logger.error(f"Invalid log level '{levelStr}'")
        return default
    return level


def _handlerLevel(config: Dict[str, Any], key: str, level: int) -> int:
    if key not in config:
        return level
    return getLogLevelByStr(config[key], level) or level


def _buildHandlers(config: Dict[str, Any], level: int) -> List[logging.Handler]:
    formatter = logging.Formatter(config.get("format", DEFAULT_LOG_FORMAT))
    handlers: List[logging.Handler] = []

    if config.get("console", False):
        handler: logging.Handler = logging.StreamHandler()
        handler.setLevel(_handlerLevel(config, "console-level", level))
        handlers.append(handler)

    logFile = config.get("file")
    if logFile:
        try:
            Path(logFile).parent.mkdir(parents=True, exist_ok=True)
            if config.get("rotate", False):
                handler = TimedRotatingFileHandler(
                    filename=logFile, when="midnight", backupCount=ROTATE_BACKUP_COUNT, encoding="utf-8"
                )
            else:
                handler = logging.FileHandler(logFile, encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to open cache log file {logFile}: {e}")
        else:
            handler.setLevel(_handlerLevel(config, "file-level", level))
            handlers.append(handler)

    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configureLogger(localLogger: logging.Logger, config: Dict[str, Any]) -> None:
    """
    Apply one logging table to localLogger, replacing its handlers.

    Recognised keys: `level`, `propagate`, `format`, `console`,
    `console-level`, `file`, `file-level`, `rotate`.
    """
    if "propagate" in config:
        localLogger.propagate = bool(config["propagate"])
    if "level" in config:
        level = getLogLevelByStr(config["level"])
        if level is not None:
            localLogger.setLevel(level)

    for handler in localLogger.handlers[:]:
        localLogger.removeHandler(handler)
        handler.close()

    for handler in _buildHandlers(config, localLogger.getEffectiveLevel()):
        localLogger.addHandler(handler)


def _qualifiedName(name: str) -> str:
    if name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + "."):
        return name
    return f"{PACKAGE_LOGGER}.{name}"


def initLogging(config: Optional[Dict[str, Any]] = None) -> logging.Logger:
    """
    Configure the persistcache logger tree, dood!

    Top-level keys of config apply to the `persistcache` logger (level
    defaults to INFO). Tables under `logger` tune single modules; names are
    taken relative to the package, so `persistence` means
    `persistcache.persistence`.

    Returns:
        logging.Logger: The configured package logger
    """
    config = config or {}
    packageLogger = logging.getLogger(PACKAGE_LOGGER)
    configureLogger(packageLogger, {"level": logging.getLevelName(DEFAULT_LOG_LEVEL), **config})

    for name, moduleConfig in config.get("logger", {}).items():
        configureLogger(logging.getLogger(_qualifiedName(name)), moduleConfig)

    logger.debug(f"Cache logging configured, level={logging.getLevelName(packageLogger.level)}")
    return packageLogger
