"""Logger configuration.

Configuration is fixed once a logger is built; reconfiguring means building a
new logger. ``LoggerConfig.from_env`` layers ``RELEASE_LOGGER_*`` environment
variables under explicit keyword overrides.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import platformdirs
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import LogLevel

APP_NAME = "release-logger"
DEFAULT_MAX_FILE_SIZE = 5 * 1024 * 1024
DEFAULT_MAX_FILES = 5
DEFAULT_MAX_PENDING = 10_000
DEFAULT_PREFIX = "app-log"
LOG_SUFFIX = ".log"

ENV_PREFIX = "RELEASE_LOGGER_"

_TRUE = ("true", "1", "yes", "on")
_FALSE = ("false", "0", "no", "off")


def default_log_directory() -> Path:
    """Return the platform user-data directory plus ``logs``."""
    return Path(platformdirs.user_data_dir(APP_NAME, appauthor=False)) / "logs"


class LoggerConfig(BaseModel):
    """Immutable logger settings; omitted fields take their defaults."""

    model_config = ConfigDict(frozen=True)

    max_file_size: int = Field(default=DEFAULT_MAX_FILE_SIZE, ge=1, description="Rotate before a file exceeds this many bytes.")
    max_files: int = Field(default=DEFAULT_MAX_FILES, ge=1, description="Maximum number of log files kept on disk.")
    log_directory: Path = Field(default_factory=default_log_directory)
    file_prefix: str = Field(default=DEFAULT_PREFIX, min_length=1)
    enabled: bool = True
    min_level: LogLevel = LogLevel.LOG
    include_stack_trace: bool = Field(default=True, description="Capture the caller stack for error entries.")
    max_pending: int = Field(
        default=DEFAULT_MAX_PENDING,
        ge=1,
        description="Entries held while no worker is running; further entries are dropped.",
    )

    @field_validator("min_level", mode="before")
    @classmethod
    def _parse_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            return LogLevel.parse(v)
        return v

    @field_validator("file_prefix")
    @classmethod
    def _check_prefix(cls, v: str) -> str:
        if "/" in v or "\\" in v or v in (".", ".."):
            raise ValueError("file_prefix must be a plain file name prefix")
        return v

    @field_validator("log_directory", mode="before")
    @classmethod
    def _expand_dir(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Path(v).expanduser()
        return v

    @classmethod
    def from_env(cls, **overrides: Any) -> LoggerConfig:
        """Build a config from ``RELEASE_LOGGER_*`` variables; overrides win."""
        values: dict[str, Any] = {}

        size = _env_int("MAX_FILE_SIZE")
        if size is not None:
            values["max_file_size"] = size
        count = _env_int("MAX_FILES")
        if count is not None:
            values["max_files"] = count
        pending = _env_int("MAX_PENDING")
        if pending is not None:
            values["max_pending"] = pending

        directory = os.getenv(ENV_PREFIX + "DIR")
        if directory:
            values["log_directory"] = directory
        prefix = os.getenv(ENV_PREFIX + "PREFIX")
        if prefix:
            values["file_prefix"] = prefix
        level = os.getenv(ENV_PREFIX + "MIN_LEVEL")
        if level:
            values["min_level"] = level

        enabled = _env_bool("ENABLED")
        if enabled is not None:
            values["enabled"] = enabled
        stack = _env_bool("INCLUDE_STACK_TRACE")
        if stack is not None:
            values["include_stack_trace"] = stack

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


def _env_int(name: str) -> int | None:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer") from exc


def _env_bool(name: str) -> bool | None:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return None
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{ENV_PREFIX}{name} must be a boolean (true/false)")
