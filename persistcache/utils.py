"""
Common utilities for persistcache.
"""

import re
import time

_DURATION_PART = re.compile(r"(\d+)(ms|d|h|m|s)")
# Largest unit first; parts must follow this order
_DURATION_UNITS = {
    "d": 24 * 60 * 60 * 1000,
    "h": 60 * 60 * 1000,
    "m": 60 * 1000,
    "s": 1000,
    "ms": 1,
}


def currentTimeMillis() -> int:
    """
    Get current wall-clock time in milliseconds since epoch.
    """
    return int(time.time() * 1000)


def _parseClockDuration(text: str) -> int:
    parts = text.split(":")
    if not 2 <= len(parts) <= 3 or not all(part.isdigit() for part in parts):
        raise ValueError(f"Invalid duration: {text!r}")

    hours, minutes = int(parts[0]), int(parts[1])
    seconds = int(parts[2]) if len(parts) == 3 else 0
    if minutes >= 60 or seconds >= 60:
        raise ValueError(f"Invalid duration: {text!r}, minutes and seconds must be below 60")
    return ((hours * 60 + minutes) * 60 + seconds) * 1000


def parseDuration(value: str) -> int:
    """
    Parse a TTL duration string into milliseconds, dood!

    Supported formats:
        1. `[Nd][Nh][Nm][Ns][Nms]`, e.g. "1h30m", "45s", "1s500ms". At least
           one part, units from largest to smallest, each at most once.
        2. `HH:MM[:SS]`, e.g. "0:30" or "2:30:15".

    Raises:
        ValueError: If value matches neither format
    """
    text = value.strip().lower()
    if ":" in text:
        return _parseClockDuration(text)

    units = list(_DURATION_UNITS)
    totalMillis = 0
    position = 0
    lastUnitIndex = -1
    for match in _DURATION_PART.finditer(text):
        unitIndex = units.index(match.group(2))
        if match.start() != position or unitIndex <= lastUnitIndex:
            raise ValueError(f"Invalid duration: {value!r}")
        totalMillis += int(match.group(1)) * _DURATION_UNITS[match.group(2)]
        position = match.end()
        lastUnitIndex = unitIndex

    if position == 0 or position != len(text):
        raise ValueError(f"Invalid duration: {value!r}, expected e.g. '1h30m', '500ms' or 'HH:MM[:SS]'")
    return totalMillis
