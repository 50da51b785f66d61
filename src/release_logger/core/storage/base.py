"""Storage adapter interface."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from ..models import DeviceInfo, FileInfo


class StorageAdapter(Protocol):
    """Path-based storage primitives used by the writer and the facade.

    Implementations hold no logger state. Any method may raise; callers treat
    every failure as recoverable.
    """

    async def path_exists(self, path: Path) -> bool:
        """Return True if a file or directory exists at ``path``."""
        ...

    async def create_directory(self, path: Path) -> None:
        """Create ``path`` and any missing parents."""
        ...

    async def append(self, path: Path, text: str) -> None:
        """Append UTF-8 text, creating the file if needed."""
        ...

    async def read_all(self, path: Path) -> str:
        """Return the whole file as text."""
        ...

    async def delete(self, path: Path) -> None:
        """Remove a file."""
        ...

    async def list_directory(self, path: Path) -> list[FileInfo]:
        """List regular files directly under ``path``."""
        ...

    async def size_of(self, path: Path) -> int:
        """Return the file size in bytes."""
        ...

    async def device_info(self) -> DeviceInfo:
        """Describe the device the logs are stored on."""
        ...
