"""Core data models shared by the line parsers."""

from __future__ import annotations

from enum import Enum

TagValue = str | int | float


class LogLevel(str, Enum):
    """Normalized severity levels derived from the syslog severity keyword."""

    CRITICAL = "CRITICAL"
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"
    DEBUG = "DEBUG"
    UNKNOWN = "UNKNOWN"


_SEVERITY_ALIASES = {
    "EMERG": "CRITICAL",
    "ALERT": "CRITICAL",
    "CRIT": "CRITICAL",
    "PANIC": "CRITICAL",
    "FATAL": "CRITICAL",
    "ERR": "ERROR",
    "WARN": "WARNING",
    "NOTICE": "INFO",
}


def level_from_severity(value: str) -> LogLevel:
    """Map a syslog severity keyword (``err``, ``notice``...) to a LogLevel."""
    name = value.strip().upper()
    if not name:
        return LogLevel.UNKNOWN
    name = _SEVERITY_ALIASES.get(name, name)
    try:
        return LogLevel[name]
    except KeyError:
        return LogLevel.UNKNOWN
