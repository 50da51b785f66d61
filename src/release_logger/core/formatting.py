"""Level filtering and entry formatting.

Everything here is pure except ``capture_stack``, which inspects the calling
frames. A formatted entry looks like::

    [2026-10-19T08:12:01.123Z] [ERROR] upstream timeout | Args: [{"id": 3}] | Stack: ...
"""

from __future__ import annotations

import json
import sys
import traceback
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime
from types import FrameType
from typing import Any

from .models import LogLevel, QueuedEntry

STACK_LIMIT = 16
_INTERNAL_MODULES = ("release_logger", "logging")
_PRIMITIVES = (str, int, float, bool, type(None))


def admit(level: LogLevel, min_level: LogLevel) -> bool:
    """Return True if ``level`` is at or above ``min_level``."""
    return level.rank >= min_level.rank


def iso_timestamp(ts: datetime) -> str:
    """Render a timestamp as UTC ISO-8601 with milliseconds and a Z suffix."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    ts = ts.astimezone(UTC)
    return ts.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def render_value(value: Any) -> str:
    """Render one message part; structured values become indented JSON."""
    if isinstance(value, _PRIMITIVES):
        return str(value)
    try:
        return json.dumps(value, indent=2, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(value)


def render_message(values: Iterable[Any]) -> str:
    """Join rendered values with spaces, console style."""
    return " ".join(render_value(v) for v in values)


def render_args(args: Sequence[Any]) -> str:
    """Compact JSON for auxiliary arguments, degrading to ``str`` on failure."""
    try:
        return json.dumps(list(args), ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        # cyclic containers end up here
        return str(list(args))


def format_entry(
    level: LogLevel,
    message: str,
    args: Sequence[Any] | None = None,
    stack: str | None = None,
    *,
    timestamp: datetime,
) -> str:
    """Serialize one entry to a newline-terminated line."""
    line = f"[{iso_timestamp(timestamp)}] [{level.value.upper()}] {message}"
    if args:
        line += f" | Args: {render_args(args)}"
    if stack:
        line += f" | Stack: {stack}"
    return line + "\n"


def format_queued(entry: QueuedEntry) -> str:
    return format_entry(
        entry.level,
        entry.message,
        entry.args,
        entry.stack,
        timestamp=entry.timestamp,
    )


def _is_internal(frame: FrameType) -> bool:
    module = frame.f_globals.get("__name__", "")
    return any(module == name or module.startswith(name + ".") for name in _INTERNAL_MODULES)


def capture_stack(limit: int = STACK_LIMIT) -> str:
    """Return the caller's stack on one line, innermost frame first.

    Frames from this package and from the stdlib ``logging`` module are
    skipped so the first frame shown is the code that emitted the entry.
    """
    frame: FrameType | None = sys._getframe(1)
    while frame is not None and _is_internal(frame):
        frame = frame.f_back
    if frame is None:
        return ""

    summary = traceback.extract_stack(frame, limit=limit)
    return " <- ".join(
        f"{fs.name} ({fs.filename}:{fs.lineno})" for fs in reversed(summary)
    )
