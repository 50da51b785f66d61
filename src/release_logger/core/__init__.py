"""Ingestion, rotation and storage engine."""

from __future__ import annotations

from .background import BackgroundRunner
from .config import LoggerConfig, default_log_directory
from .formatting import admit, format_entry
from .logger import ReleaseLogger
from .models import DeviceInfo, FileInfo, LogLevel, QueuedEntry
from .storage import LocalStorage, StorageAdapter

__all__ = [
    "BackgroundRunner",
    "DeviceInfo",
    "FileInfo",
    "LocalStorage",
    "LogLevel",
    "LoggerConfig",
    "QueuedEntry",
    "ReleaseLogger",
    "StorageAdapter",
    "admit",
    "default_log_directory",
    "format_entry",
]
