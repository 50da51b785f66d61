"""Core data models for the release logger."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class LogLevel(str, Enum):
    """Severity levels accepted by the logger, lowest first."""

    DEBUG = "debug"
    LOG = "log"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    @classmethod
    def parse(cls, value: str | LogLevel) -> LogLevel:
        """Parse a level name case-insensitively (stdlib aliases included)."""
        if isinstance(value, LogLevel):
            return value
        name = value.strip().lower()
        name = _ALIASES.get(name, name)
        try:
            return cls(name)
        except ValueError as e:
            valid = ", ".join(level.value for level in cls)
            raise ValueError(f"Unknown log level '{value}'. Valid values: {valid}.") from e


_RANKS = {
    LogLevel.DEBUG: 0,
    LogLevel.LOG: 1,
    LogLevel.INFO: 2,
    LogLevel.WARN: 3,
    LogLevel.ERROR: 4,
}

_ALIASES = {
    "warning": "warn",
    "critical": "error",
    "fatal": "error",
}


@dataclass(frozen=True, slots=True)
class QueuedEntry:
    """Admitted log event waiting to be written."""

    level: LogLevel
    message: str
    timestamp: datetime  # captured at admission, UTC
    args: tuple[Any, ...] = field(default_factory=tuple)
    stack: str | None = None


@dataclass(frozen=True, slots=True)
class FileInfo:
    """Directory listing entry returned by a storage adapter."""

    name: str
    size: int
    modified_time: datetime


@dataclass(frozen=True, slots=True)
class DeviceInfo:
    """Host metadata reported alongside exported logs."""

    platform: str
    model: str
    version: str
    manufacturer: str | None = None
