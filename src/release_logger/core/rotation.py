"""Rotation and retention for date-named log files.

Files are named ``<prefix>-YYYY-MM-DD.log``; a second file on the same day
becomes ``<prefix>-YYYY-MM-DD-1.log``, then ``-2`` and so on. Retention
order is chronological: by date, then by suffix number.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from datetime import UTC, date, datetime
from pathlib import Path

from .config import LOG_SUFFIX
from .diagnostics import get_logger
from .storage import StorageAdapter

logger = get_logger(__name__)


def log_file_name(prefix: str, day: date, index: int = 0) -> str:
    """Build the file name for ``day``; ``index`` > 0 adds a collision suffix."""
    suffix = f"-{index}" if index > 0 else ""
    return f"{prefix}-{day.isoformat()}{suffix}{LOG_SUFFIX}"


class LogFileNaming:
    """Recognizes and orders the files that belong to one prefix."""

    def __init__(self, prefix: str) -> None:
        self.prefix = prefix
        self._re = re.compile(
            rf"^{re.escape(prefix)}-(?P<date>\d{{4}}-\d{{2}}-\d{{2}})(?:-(?P<n>\d+))?{re.escape(LOG_SUFFIX)}$"
        )

    def parse(self, name: str) -> tuple[date, int] | None:
        """Return (date, index) for a matching name, else None."""
        m = self._re.match(name)
        if not m:
            return None
        try:
            day = date.fromisoformat(m.group("date"))
        except ValueError:
            return None
        return day, int(m.group("n") or 0)

    def matches(self, name: str) -> bool:
        return self.parse(name) is not None

    def sort_key(self, name: str) -> tuple[date, int, str]:
        parsed = self.parse(name)
        if parsed is None:
            return date.min, 0, name
        return parsed[0], parsed[1], name

    def select(self, names: Iterable[str]) -> list[str]:
        """Filter ``names`` to this prefix's log files, oldest first."""
        return sorted((n for n in names if self.matches(n)), key=self.sort_key)


class RotationManager:
    """Decides file names and enforces the ``max_files`` ceiling."""

    def __init__(
        self,
        storage: StorageAdapter,
        *,
        prefix: str,
        max_files: int,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._storage = storage
        self.naming = LogFileNaming(prefix)
        self.max_files = max_files
        self._clock = clock or (lambda: datetime.now(UTC))

    def _today(self) -> date:
        return self._clock().astimezone(UTC).date()

    async def list_log_files(self, directory: Path) -> list[str]:
        """Return this prefix's log files, oldest first. May raise."""
        entries = await self._storage.list_directory(directory)
        return self.naming.select(e.name for e in entries)

    async def _delete(self, directory: Path, names: Iterable[str]) -> list[str]:
        deleted: list[str] = []
        for name in names:
            try:
                await self._storage.delete(directory / name)
            except Exception as exc:
                logger.warning("Failed to delete old log file %s: %s", name, exc)
                continue
            deleted.append(name)
        return deleted

    async def next_path(self, directory: Path) -> Path:
        """Return a fresh file name for today that sorts after every existing one."""
        today = self._today()
        try:
            names = await self.list_log_files(directory)
        except Exception as exc:
            logger.warning("Failed to list log directory %s: %s", directory, exc)
            names = []

        # reusing a freed lower index would put the new file behind older ones
        indexes = [parsed[1] for n in names if (parsed := self.naming.parse(n)) and parsed[0] == today]
        index = max(indexes) + 1 if indexes else 0
        while True:
            candidate = directory / log_file_name(self.naming.prefix, today, index)
            if not await self._storage.path_exists(candidate):
                return candidate
            index += 1

    async def initial_path(self, directory: Path) -> Path:
        """Pick the file to resume at startup: today's newest, else today's base name."""
        today = self._today()
        base = directory / log_file_name(self.naming.prefix, today)
        try:
            names = await self.list_log_files(directory)
        except Exception as exc:
            logger.warning("Failed to list log directory %s: %s", directory, exc)
            return base

        todays = [n for n in names if self.naming.sort_key(n)[0] == today]
        if not todays:
            return base
        return directory / todays[-1]

    async def rotate(self, directory: Path) -> Path:
        """Make room for a new file and return its path.

        Deletes the oldest files so that, counting the new one, at most
        ``max_files`` remain. Deletion and listing failures are logged and
        do not stop the new path from being returned.
        """
        try:
            names = await self.list_log_files(directory)
        except Exception as exc:
            logger.warning("Failed to list log files during rotation: %s", exc)
            names = []

        if len(names) >= self.max_files:
            surplus = names[: len(names) - self.max_files + 1]
            deleted = await self._delete(directory, surplus)
            if deleted:
                logger.debug("Rotation removed %d file(s): %s", len(deleted), ", ".join(deleted))

        return await self.next_path(directory)

    async def cleanup_on_startup(self, directory: Path) -> list[str]:
        """Delete the oldest files beyond ``max_files``; returns deleted names."""
        try:
            names = await self.list_log_files(directory)
        except Exception as exc:
            logger.warning("Failed to cleanup old logs in %s: %s", directory, exc)
            return []

        if len(names) <= self.max_files:
            return []
        return await self._delete(directory, names[: len(names) - self.max_files])
