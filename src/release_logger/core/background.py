"""Dedicated worker thread for hosts that do not run an asyncio loop.

The runner owns a private event loop on a daemon thread and starts the logger
on it. Logging calls from any thread hand entries to that loop; facade
coroutines can be run synchronously through :meth:`BackgroundRunner.run`.
"""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Coroutine
from typing import Any, TypeVar

from .diagnostics import get_logger
from .logger import ReleaseLogger

logger = get_logger(__name__)

T = TypeVar("T")


class BackgroundRunner:
    """Run a ``ReleaseLogger`` on its own event loop thread."""

    def __init__(self, release_logger: ReleaseLogger, *, name: str = "release-logger") -> None:
        self.logger = release_logger
        self._name = name
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> BackgroundRunner:
        if self.running:
            raise RuntimeError("BackgroundRunner is already running")
        loop = asyncio.new_event_loop()
        ready = threading.Event()

        def _serve() -> None:
            asyncio.set_event_loop(loop)
            loop.call_soon(ready.set)
            try:
                loop.run_forever()
            finally:
                loop.close()

        self._loop = loop
        self._thread = threading.Thread(target=_serve, name=self._name, daemon=True)
        self._thread.start()
        ready.wait()
        self.run(self.logger.start())
        return self

    def run(self, coro: Coroutine[Any, Any, T], timeout: float | None = None) -> T:
        """Run a coroutine on the runner's loop and return its result."""
        if self._loop is None or not self.running:
            coro.close()
            raise RuntimeError("BackgroundRunner is not running")
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        return future.result(timeout)

    def stop(self, timeout: float | None = 10.0) -> None:
        """Flush and close the logger, then stop the loop thread."""
        loop, thread = self._loop, self._thread
        if loop is None or thread is None:
            return
        try:
            self.run(self.logger.aclose(), timeout=timeout)
        except Exception as exc:
            logger.warning("Failed to close release logger cleanly: %s", exc)
        loop.call_soon_threadsafe(loop.stop)
        thread.join(timeout)
        self._loop = None
        self._thread = None

    def __enter__(self) -> BackgroundRunner:
        return self.start()

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
