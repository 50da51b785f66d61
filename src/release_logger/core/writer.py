"""Single-flight drain loop that moves queued entries onto storage."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from .diagnostics import get_logger
from .formatting import format_queued
from .ingestion import IngestionQueue
from .models import QueuedEntry
from .rotation import RotationManager
from .storage import StorageAdapter

logger = get_logger(__name__)


class LogWriter:
    """Owns the active file path and is the only code that appends to it.

    ``drain`` runs at most once at a time per writer. A call made while a
    drain is running returns immediately; the running drain keeps popping
    until the queue is empty, so entries queued after it started are
    written by it too.
    """

    def __init__(
        self,
        queue: IngestionQueue,
        storage: StorageAdapter,
        rotation: RotationManager,
        *,
        directory: Path,
        max_file_size: int,
    ) -> None:
        self._queue = queue
        self._storage = storage
        self._rotation = rotation
        self.directory = directory
        self.max_file_size = max_file_size
        self.active_path: Path | None = None
        self.rotation_count = 0
        self.written = 0
        self.dropped = 0
        self._draining = False
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def draining(self) -> bool:
        return self._draining

    def rebind(self) -> None:
        """Replace the idle event so the writer can run on a new event loop."""
        self._idle = asyncio.Event()
        if not self._draining:
            self._idle.set()

    async def drain(self) -> None:
        """Write queued entries in FIFO order until the queue is empty."""
        if self._draining:
            return
        self._draining = True
        self._idle.clear()
        try:
            while (entry := self._queue.pop()) is not None:
                await self._write_entry(entry)
        finally:
            self._draining = False
            self._idle.set()

    async def wait_idle(self) -> None:
        """Wait until no drain is in progress."""
        while self._draining:
            await self._idle.wait()

    @asynccontextmanager
    async def hold(self) -> AsyncIterator[None]:
        """Keep drains out while the caller maintains the log files."""
        await self.wait_idle()
        self._draining = True
        self._idle.clear()
        try:
            yield
        finally:
            self._draining = False
            self._idle.set()

    async def reset_active_path(self) -> Path:
        """Derive a fresh active path (used after the files were cleared)."""
        self.active_path = await self._rotation.next_path(self.directory)
        return self.active_path

    async def _current_size(self, path: Path) -> int:
        if not await self._storage.path_exists(path):
            return 0
        return await self._storage.size_of(path)

    async def _write_entry(self, entry: QueuedEntry) -> None:
        try:
            line = format_queued(entry)
            if self.active_path is None:
                self.active_path = await self._rotation.initial_path(self.directory)

            size = await self._current_size(self.active_path)
            # an empty file is never rotated away, even for an oversized entry
            if size > 0 and size + len(line.encode("utf-8")) > self.max_file_size:
                self.active_path = await self._rotation.rotate(self.directory)
                self.rotation_count += 1
                logger.debug("Rotated log file to %s", self.active_path)

            await self._storage.append(self.active_path, line)
            self.written += 1
        except Exception as exc:
            self.dropped += 1
            logger.warning("Failed to write log entry to %s: %s", self.active_path, exc)
