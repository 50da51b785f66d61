"""In-memory FIFO of admitted entries awaiting the writer."""

from __future__ import annotations

import threading
from collections import deque

from .models import QueuedEntry


class IngestionQueue:
    """Thread-safe FIFO: producers append at the tail, the writer pops the head.

    The lock is only held for the deque operation itself, never across an
    ``await``.
    """

    def __init__(self) -> None:
        self._items: deque[QueuedEntry] = deque()
        self._lock = threading.Lock()

    def put(self, entry: QueuedEntry) -> None:
        with self._lock:
            self._items.append(entry)

    def pop(self) -> QueuedEntry | None:
        """Remove and return the oldest entry, or None when empty."""
        with self._lock:
            if not self._items:
                return None
            return self._items.popleft()

    def clear(self) -> int:
        """Discard everything pending; returns how many entries were dropped."""
        with self._lock:
            dropped = len(self._items)
            self._items.clear()
            return dropped

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __bool__(self) -> bool:
        return len(self) > 0
