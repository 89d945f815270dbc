# src/tiled_tables/identity/allocators.py
from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Dict, Optional, Protocol

from tiled_tables.projection.records import TABLE_FOR_KIND

if TYPE_CHECKING:
    from tiled_tables.store.base import Sink


# -----------------------------
# Protocol
# -----------------------------

class IdAllocator(Protocol):
    """Hands out primary keys. ``kind`` is one of ``TABLE_FOR_KIND``."""

    def next_id(self, kind: str) -> int:
        ...


def _check_kind(kind: str) -> str:
    try:
        return TABLE_FOR_KIND[kind]
    except KeyError:
        raise ValueError(f"Unknown id kind: {kind!r}") from None


# -----------------------------
# Counter allocator (default)
# -----------------------------

class CounterAllocator:
    """
    Per-kind monotonic counters behind a lock.

    Ids start at ``start`` for every kind unless seeded. Ids handed out for
    a batch that is later discarded are not reused.
    """

    def __init__(self, start: int = 0, seeds: Optional[Dict[str, int]] = None):
        self._lock = threading.Lock()
        self._next: Dict[str, int] = {kind: start for kind in TABLE_FOR_KIND}
        for kind, value in (seeds or {}).items():
            _check_kind(kind)
            self._next[kind] = value

    @classmethod
    def from_sink(cls, sink: "Sink") -> "CounterAllocator":
        """Continue after the highest key already stored in ``sink``."""
        seeds = {}
        for kind, table in TABLE_FOR_KIND.items():
            highest = sink.max_key(table)
            seeds[kind] = 0 if highest is None else highest + 1
        return cls(seeds=seeds)

    def next_id(self, kind: str) -> int:
        _check_kind(kind)
        with self._lock:
            value = self._next[kind]
            self._next[kind] = value + 1
        return value

    def peek(self, kind: str) -> int:
        _check_kind(kind)
        with self._lock:
            return self._next[kind]


# -----------------------------
# Row-count allocator (legacy)
# -----------------------------

class RowCountAllocator:
    """
    Derive ids from the current row count of the target table.

    The id for a kind is ``sink.count(table)``, moved past any id already
    handed out by this allocator so rows buffered in an uncommitted batch
    do not collide. Not safe with concurrent writers or with deletes, both
    of which make the row count lag behind the highest key.
    """

    def __init__(self, sink: "Sink"):
        self.sink = sink
        self._next: Dict[str, int] = {}

    def next_id(self, kind: str) -> int:
        table = _check_kind(kind)
        value = max(self.sink.count(table), self._next.get(kind, 0))
        self._next[kind] = value + 1
        return value


__all__ = ["CounterAllocator", "IdAllocator", "RowCountAllocator"]
