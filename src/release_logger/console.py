"""Opt-in capture of print() output and stdlib logging records.

``ConsoleCapture.install()`` remembers the current ``sys.stdout``,
``sys.stderr`` and the target logger's handlers, then routes new output
through a ``ReleaseLogger`` as well. ``uninstall()`` puts the remembered
objects back. Nothing is patched until ``install()`` is called.
"""

from __future__ import annotations

import io
import logging
import sys
from dataclasses import dataclass
from typing import TextIO

from .core.diagnostics import emitting
from .core.logger import ReleaseLogger
from .core.models import LogLevel

_PACKAGE = __name__.split(".")[0]


def level_for_record(levelno: int) -> LogLevel:
    """Map a stdlib logging level number to a logger level."""
    if levelno >= logging.ERROR:
        return LogLevel.ERROR
    if levelno >= logging.WARNING:
        return LogLevel.WARN
    if levelno >= logging.INFO:
        return LogLevel.INFO
    return LogLevel.DEBUG


class ReleaseLogHandler(logging.Handler):
    """``logging.Handler`` that submits records to a ``ReleaseLogger``.

    Records emitted by this package are ignored so write failures reported on
    the diagnostic channel cannot feed back into the logger.
    """

    def __init__(self, release_logger: ReleaseLogger, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.release_logger = release_logger

    def emit(self, record: logging.LogRecord) -> None:
        if record.name == _PACKAGE or record.name.startswith(_PACKAGE + "."):
            return
        try:
            message = self.format(record)
            self.release_logger.submit(level_for_record(record.levelno), message)
        except Exception:
            self.handleError(record)


class _TeeStream(io.TextIOBase):
    """Text stream that echoes to the original and logs each complete line.

    Text written while the package reports a diagnostic is echoed only.
    """

    def __init__(self, original: TextIO, release_logger: ReleaseLogger, level: LogLevel, *, echo: bool) -> None:
        self._original = original
        self._logger = release_logger
        self._level = level
        self._echo = echo
        self._pending = ""

    @property
    def encoding(self) -> str:  # type: ignore[override]
        return getattr(self._original, "encoding", "utf-8")

    def writable(self) -> bool:
        return True

    def write(self, s: str) -> int:
        if self._echo:
            self._original.write(s)
        if emitting():
            return len(s)
        self._pending += s
        *lines, self._pending = self._pending.split("\n")
        for line in lines:
            if line:
                self._logger.submit(self._level, line)
        return len(s)

    def flush(self) -> None:
        if self._echo:
            self._original.flush()

    def drain_pending(self) -> None:
        if self._pending:
            self._logger.submit(self._level, self._pending)
            self._pending = ""


@dataclass(frozen=True, slots=True)
class _Snapshot:
    stdout: TextIO
    stderr: TextIO
    handlers: list[logging.Handler]


class ConsoleCapture:
    """Explicit install/uninstall pair for routing console output to a logger."""

    def __init__(
        self,
        release_logger: ReleaseLogger,
        *,
        capture_stdout: bool = True,
        capture_stderr: bool = True,
        capture_logging: bool = True,
        echo: bool = True,
        target: logging.Logger | None = None,
    ) -> None:
        self.release_logger = release_logger
        self.capture_stdout = capture_stdout
        self.capture_stderr = capture_stderr
        self.capture_logging = capture_logging
        self.echo = echo
        self.target = target if target is not None else logging.getLogger()
        self.handler = ReleaseLogHandler(release_logger)
        self._snapshot: _Snapshot | None = None
        self._streams: list[_TeeStream] = []

    @property
    def installed(self) -> bool:
        return self._snapshot is not None

    def install(self) -> ConsoleCapture:
        if self._snapshot is not None:
            raise RuntimeError("ConsoleCapture is already installed")
        self._snapshot = _Snapshot(
            stdout=sys.stdout,
            stderr=sys.stderr,
            handlers=list(self.target.handlers),
        )
        if self.capture_stdout:
            tee = _TeeStream(sys.stdout, self.release_logger, LogLevel.LOG, echo=self.echo)
            self._streams.append(tee)
            sys.stdout = tee
        if self.capture_stderr:
            tee = _TeeStream(sys.stderr, self.release_logger, LogLevel.ERROR, echo=self.echo)
            self._streams.append(tee)
            sys.stderr = tee
        if self.capture_logging:
            self.target.addHandler(self.handler)
        return self

    def uninstall(self) -> None:
        snapshot, self._snapshot = self._snapshot, None
        if snapshot is None:
            return
        for tee in self._streams:
            tee.drain_pending()
        self._streams.clear()
        sys.stdout = snapshot.stdout
        sys.stderr = snapshot.stderr
        self.target.handlers[:] = snapshot.handlers

    def __enter__(self) -> ConsoleCapture:
        return self.install()

    def __exit__(self, *exc_info: object) -> None:
        self.uninstall()
