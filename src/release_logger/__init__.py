"""On-device append-only log sink with size-based rotation and bounded retention."""

from __future__ import annotations

import logging

from .console import ConsoleCapture, ReleaseLogHandler
from .core import (
    BackgroundRunner,
    DeviceInfo,
    FileInfo,
    LocalStorage,
    LoggerConfig,
    LogLevel,
    ReleaseLogger,
    StorageAdapter,
)
from .registry import get_logger, init_logger, shutdown_logger

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "BackgroundRunner",
    "ConsoleCapture",
    "DeviceInfo",
    "FileInfo",
    "LocalStorage",
    "LogLevel",
    "LoggerConfig",
    "ReleaseLogHandler",
    "ReleaseLogger",
    "StorageAdapter",
    "get_logger",
    "init_logger",
    "shutdown_logger",
]
