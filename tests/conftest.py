from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest

from release_logger.core.config import LoggerConfig
from release_logger.core.storage import LocalStorage

FIXED_NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=UTC)


class RecordingStorage(LocalStorage):
    """LocalStorage that records every primitive call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []

    async def path_exists(self, path: Path) -> bool:
        self.calls.append(("path_exists", path))
        return await super().path_exists(path)

    async def create_directory(self, path: Path) -> None:
        self.calls.append(("create_directory", path))
        await super().create_directory(path)

    async def append(self, path: Path, text: str) -> None:
        self.calls.append(("append", path))
        await super().append(path, text)

    async def read_all(self, path: Path) -> str:
        self.calls.append(("read_all", path))
        return await super().read_all(path)

    async def delete(self, path: Path) -> None:
        self.calls.append(("delete", path))
        await super().delete(path)

    async def list_directory(self, path: Path):
        self.calls.append(("list_directory", path))
        return await super().list_directory(path)

    async def size_of(self, path: Path) -> int:
        self.calls.append(("size_of", path))
        return await super().size_of(path)


class FlakyStorage(LocalStorage):
    """LocalStorage whose selected operations fail on demand."""

    def __init__(
        self,
        *,
        fail_appends: set[int] | None = None,
        fail_append_containing: str | None = None,
        fail_delete_names: set[str] | None = None,
        fail_read_names: set[str] | None = None,
        fail_create_directory: bool = False,
        fail_device_info: bool = False,
    ) -> None:
        self.fail_appends = fail_appends or set()
        self.fail_append_containing = fail_append_containing
        self.fail_delete_names = fail_delete_names or set()
        self.fail_read_names = fail_read_names or set()
        self.fail_create_directory = fail_create_directory
        self.fail_device_info = fail_device_info
        self.append_calls = 0

    async def append(self, path: Path, text: str) -> None:
        self.append_calls += 1
        if self.append_calls in self.fail_appends:
            raise OSError(f"append #{self.append_calls} failed")
        if self.fail_append_containing and self.fail_append_containing in text:
            raise OSError("append failed")
        await super().append(path, text)

    async def delete(self, path: Path) -> None:
        if Path(path).name in self.fail_delete_names:
            raise PermissionError(f"cannot delete {path}")
        await super().delete(path)

    async def read_all(self, path: Path) -> str:
        if Path(path).name in self.fail_read_names:
            raise OSError(f"cannot read {path}")
        return await super().read_all(path)

    async def create_directory(self, path: Path) -> None:
        if self.fail_create_directory:
            raise PermissionError(f"cannot create {path}")
        await super().create_directory(path)

    async def device_info(self):
        if self.fail_device_info:
            raise OSError("no device info")
        return await super().device_info()


class SlowStorage(LocalStorage):
    """LocalStorage whose directory creation takes a while."""

    def __init__(self, delay: float = 0.05) -> None:
        self.delay = delay

    async def create_directory(self, path: Path) -> None:
        await asyncio.sleep(self.delay)
        await super().create_directory(path)


@pytest.fixture
def log_dir(tmp_path: Path) -> Path:
    return tmp_path / "logs"


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture
def make_config(log_dir: Path) -> Callable[..., LoggerConfig]:
    def _make(**overrides: Any) -> LoggerConfig:
        values: dict[str, Any] = {
            "log_directory": log_dir,
            "file_prefix": "t",
            "max_file_size": 1024 * 1024,
            "max_files": 5,
        }
        values.update(overrides)
        return LoggerConfig(**values)

    return _make


@pytest.fixture
def recording_storage() -> RecordingStorage:
    return RecordingStorage()


@pytest.fixture
def flaky_storage() -> Callable[..., FlakyStorage]:
    return FlakyStorage


@pytest.fixture
def slow_storage() -> SlowStorage:
    return SlowStorage()


@pytest.fixture
def write_files() -> Callable[[Path, list[str]], None]:
    def _write(directory: Path, names: list[str]) -> None:
        directory.mkdir(parents=True, exist_ok=True)
        for name in names:
            (directory / name).write_text(f"content of {name}\n", encoding="utf-8")

    return _write
