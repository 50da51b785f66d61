"""Process-scoped default logger.

Prefer passing a ``ReleaseLogger`` explicitly. When one shared instance is
needed, create it once with ``init_logger()``, fetch it with ``get_logger()``
and tear it down with ``await shutdown_logger()``.
"""

from __future__ import annotations

import threading
from typing import Any

from .core.config import LoggerConfig
from .core.logger import ReleaseLogger

_default: ReleaseLogger | None = None
_lock = threading.Lock()


def init_logger(config: LoggerConfig | None = None, **kwargs: Any) -> ReleaseLogger:
    """Create the process default logger; extra kwargs go to ``ReleaseLogger``."""
    global _default
    with _lock:
        if _default is not None:
            raise RuntimeError("Default release logger already initialized; call shutdown_logger() first")
        _default = ReleaseLogger(config, **kwargs)
        return _default


def get_logger() -> ReleaseLogger:
    """Return the process default logger."""
    with _lock:
        if _default is None:
            raise RuntimeError("Default release logger is not initialized; call init_logger() first")
        return _default


async def shutdown_logger() -> None:
    """Flush and close the default logger, then forget it."""
    global _default
    with _lock:
        current, _default = _default, None
    if current is not None:
        await current.aclose()
