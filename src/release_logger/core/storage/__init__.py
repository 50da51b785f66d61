"""Storage adapters.

The core only talks to ``StorageAdapter``; exactly one implementation is
chosen when a logger is built.
"""

from __future__ import annotations

from .base import StorageAdapter
from .local import LocalStorage

__all__ = [
    "LocalStorage",
    "StorageAdapter",
]
