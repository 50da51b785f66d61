"""Public logger: admission, the drain worker, and read-back operations.

Typical use inside an asyncio application::

    async with ReleaseLogger(LoggerConfig(file_prefix="app")) as log:
        log.info("service started", {"port": 8080})
        ...
        print(await log.export_logs())

The logging methods never block and never raise. Entries are written by a
worker task on the loop that called ``start()``.
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from .config import LoggerConfig
from .diagnostics import get_logger
from .formatting import admit, capture_stack, render_message
from .ingestion import IngestionQueue
from .models import DeviceInfo, FileInfo, LogLevel, QueuedEntry
from .rotation import RotationManager
from .storage import LocalStorage, StorageAdapter
from .writer import LogWriter

logger = get_logger(__name__)


class ReleaseLogger:
    """Append-only, size-rotated file logger with bounded retention."""

    def __init__(
        self,
        config: LoggerConfig | None = None,
        *,
        storage: StorageAdapter | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config or LoggerConfig()
        self._storage: StorageAdapter = storage or LocalStorage()
        self._clock = clock or (lambda: datetime.now(UTC))
        self._queue = IngestionQueue()
        self._rotation = RotationManager(
            self._storage,
            prefix=self.config.file_prefix,
            max_files=self.config.max_files,
            clock=self._clock,
        )
        self.writer = LogWriter(
            self._queue,
            self._storage,
            self._rotation,
            directory=self.config.log_directory,
            max_file_size=self.config.max_file_size,
        )
        self._loop: asyncio.AbstractEventLoop | None = None
        self._wakeup: asyncio.Event | None = None
        self._startup: asyncio.Task[None] | None = None
        self._worker: asyncio.Task[None] | None = None
        self._closing = False
        self._degraded = False
        self._overflow_reported = False

    # ------------------------------------------------------------------
    # lifecycle

    @property
    def directory(self) -> Path:
        return self.config.log_directory

    @property
    def active_path(self) -> Path | None:
        return self.writer.active_path

    @property
    def rotation_count(self) -> int:
        return self.writer.rotation_count

    @property
    def degraded(self) -> bool:
        """True when the log directory could not be prepared."""
        return self._degraded

    @property
    def pending(self) -> int:
        """Entries admitted but not yet written."""
        return len(self._queue)

    async def start(self, *, cleanup: bool = True) -> None:
        """Prepare the directory, enforce retention and start the worker.

        Concurrent callers, including the implicit starts made by the read
        operations, all wait for the same startup. ``cleanup=False`` skips the
        startup retention pass so a directory can be inspected without
        deleting anything; it only has an effect on the first call.

        A logger runs on one event loop at a time. If the loop it was started
        on has stopped without ``aclose()``, the next ``start()`` begins again
        on the caller's loop and keeps whatever is still queued.
        """
        running = asyncio.get_running_loop()
        previous = self._loop
        stale = previous is not None and previous is not running and not previous.is_running()
        if self._startup is not None and stale:
            self._startup = None
            self._worker = None
            self._closing = False
        if self._startup is None:
            self._loop = running
            self._wakeup = asyncio.Event()
            self._degraded = False
            self._overflow_reported = False
            self.writer.rebind()
            self._startup = asyncio.create_task(
                self._start(cleanup), name=f"release-logger-start:{self.config.file_prefix}"
            )
        await asyncio.shield(self._startup)

    async def _start(self, cleanup: bool) -> None:
        try:
            if not await self._storage.path_exists(self.directory):
                await self._storage.create_directory(self.directory)
            self.writer.active_path = await self._rotation.initial_path(self.directory)
        except Exception as exc:
            self._degraded = True
            dropped = self._queue.clear()
            logger.warning(
                "Failed to initialize log directory %s; file logging disabled (%d pending entries dropped): %s",
                self.directory,
                dropped,
                exc,
            )
            return

        if cleanup:
            deleted = await self._rotation.cleanup_on_startup(self.directory)
            if deleted:
                logger.info("Removed %d old log file(s): %s", len(deleted), ", ".join(deleted))

        self._worker = asyncio.create_task(self._run(), name=f"release-logger:{self.config.file_prefix}")
        if self._queue:
            self._wakeup.set()

    async def _run(self) -> None:
        wakeup = self._wakeup
        assert wakeup is not None
        while not self._closing:
            await wakeup.wait()
            wakeup.clear()
            await self.writer.drain()

    async def flush(self) -> None:
        """Wait until everything submitted so far has been written or dropped."""
        await self.start()
        if self._degraded:
            return
        while True:
            await self.writer.drain()
            await self.writer.wait_idle()
            if not self._queue:
                return

    async def aclose(self) -> None:
        """Flush pending entries and stop the worker."""
        if self._startup is None:
            return
        await self.flush()
        worker, self._worker = self._worker, None
        if worker is not None and self._wakeup is not None:
            # let the worker finish its current drain and exit on its own
            self._closing = True
            self._wakeup.set()
            await worker
        self._closing = False
        self._startup = None
        self._loop = None
        self._wakeup = None

    async def __aenter__(self) -> ReleaseLogger:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # admission

    def submit(self, level: LogLevel | str, message: Any = "", *args: Any) -> None:
        """Queue one entry if it passes the level filter. Never raises."""
        try:
            self._submit(LogLevel.parse(level), message, args)
        except Exception as exc:
            logger.warning("Failed to queue log entry: %s", exc)

    def _submit(self, level: LogLevel, message: Any, args: tuple[Any, ...]) -> None:
        if not self.config.enabled or self._degraded:
            return
        if not admit(level, self.config.min_level):
            return
        worker = self._worker
        if (worker is None or worker.done()) and len(self._queue) >= self.config.max_pending:
            if not self._overflow_reported:
                self._overflow_reported = True
                logger.warning(
                    "Logger %r is not running; %d entries pending, dropping new entries until start()",
                    self.config.file_prefix,
                    len(self._queue),
                )
            return

        stack = None
        if level is LogLevel.ERROR and self.config.include_stack_trace:
            stack = capture_stack() or None

        entry = QueuedEntry(
            level=level,
            message=render_message((message, *args)),
            timestamp=self._clock(),
            args=args,
            stack=stack,
        )
        self._queue.put(entry)
        self._signal()

    def _signal(self) -> None:
        loop, wakeup = self._loop, self._wakeup
        if loop is None or wakeup is None:
            # not started yet; start() picks up whatever is queued
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            wakeup.set()
            return
        try:
            loop.call_soon_threadsafe(wakeup.set)
        except RuntimeError:
            # loop already closed; the entry stays queued
            logger.debug("Drain loop closed; entry left in queue")

    def log(self, message: Any = "", *args: Any) -> None:
        self.submit(LogLevel.LOG, message, *args)

    def info(self, message: Any = "", *args: Any) -> None:
        self.submit(LogLevel.INFO, message, *args)

    def warn(self, message: Any = "", *args: Any) -> None:
        self.submit(LogLevel.WARN, message, *args)

    def error(self, message: Any = "", *args: Any) -> None:
        self.submit(LogLevel.ERROR, message, *args)

    def debug(self, message: Any = "", *args: Any) -> None:
        self.submit(LogLevel.DEBUG, message, *args)

    # ------------------------------------------------------------------
    # read-back, export, clear

    async def get_logs(self) -> str:
        """Return the active file's contents, or "" if missing or unreadable."""
        await self.start()
        path = self.writer.active_path
        if path is None:
            return ""
        try:
            if not await self._storage.path_exists(path):
                return ""
            return await self._storage.read_all(path)
        except Exception as exc:
            logger.warning("Failed to read logs from %s: %s", path, exc)
            return ""

    async def get_log_file_info(self) -> list[FileInfo]:
        """Return this logger's files with sizes, oldest first."""
        await self.start()
        try:
            if not await self._storage.path_exists(self.directory):
                return []
            entries = await self._storage.list_directory(self.directory)
        except Exception as exc:
            logger.warning("Failed to read log directory %s: %s", self.directory, exc)
            return []

        naming = self._rotation.naming
        matching = [e for e in entries if naming.matches(e.name)]
        return sorted(matching, key=lambda e: naming.sort_key(e.name))

    async def get_log_files(self) -> list[str]:
        """Return this logger's file names, oldest first."""
        return [info.name for info in await self.get_log_file_info()]

    async def clear_logs(self) -> None:
        """Delete every log file and start over with a fresh active path."""
        await self.start()
        if self._degraded:
            return
        async with self.writer.hold():
            for name in await self.get_log_files():
                try:
                    await self._storage.delete(self.directory / name)
                except Exception as exc:
                    logger.warning("Failed to delete log file %s: %s", name, exc)
            try:
                await self.writer.reset_active_path()
            except Exception as exc:
                logger.warning("Failed to reset active log file: %s", exc)
        if self._queue and self._wakeup is not None:
            self._wakeup.set()

    async def export_logs(self) -> str:
        """Concatenate every file, oldest first, each under a ``=== name ===`` header."""
        parts: list[str] = []
        for name in await self.get_log_files():
            try:
                content = await self._storage.read_all(self.directory / name)
            except Exception as exc:
                logger.warning("Failed to read log file %s for export: %s", name, exc)
                content = ""
            parts.append(f"\n=== {name} ===\n{content}\n")
        return "".join(parts)

    async def get_device_info(self) -> DeviceInfo:
        """Describe the host device; falls back to ``sys.platform`` on failure."""
        try:
            return await self._storage.device_info()
        except Exception as exc:
            logger.warning("Failed to read device info: %s", exc)
            return DeviceInfo(platform=sys.platform, model="Unknown", version="unknown")
