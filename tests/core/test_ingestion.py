from __future__ import annotations

import threading
from datetime import UTC, datetime

from release_logger.core.ingestion import IngestionQueue
from release_logger.core.models import LogLevel, QueuedEntry


def _entry(message: str) -> QueuedEntry:
    return QueuedEntry(level=LogLevel.INFO, message=message, timestamp=datetime(2026, 1, 1, tzinfo=UTC))


def test_queue_is_fifo() -> None:
    q = IngestionQueue()
    for i in range(5):
        q.put(_entry(str(i)))

    assert len(q) == 5
    assert [q.pop().message for _ in range(5)] == ["0", "1", "2", "3", "4"]
    assert q.pop() is None
    assert not q


def test_clear_reports_dropped() -> None:
    q = IngestionQueue()
    q.put(_entry("a"))
    q.put(_entry("b"))
    assert q.clear() == 2
    assert len(q) == 0


def test_concurrent_producers_lose_nothing() -> None:
    q = IngestionQueue()

    def produce(tid: int) -> None:
        for i in range(200):
            q.put(_entry(f"{tid}-{i}"))

    threads = [threading.Thread(target=produce, args=(t,)) for t in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    messages = []
    while (entry := q.pop()) is not None:
        messages.append(entry.message)

    assert len(messages) == 1000
    assert len(set(messages)) == 1000
    # per-producer order survives interleaving
    for tid in range(5):
        mine = [m for m in messages if m.startswith(f"{tid}-")]
        assert mine == [f"{tid}-{i}" for i in range(200)]
