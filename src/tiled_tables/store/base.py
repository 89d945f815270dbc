# src/tiled_tables/store/base.py
from __future__ import annotations

from typing import Any, List, Optional, Protocol

from tiled_tables.projection.records import RECORD_TYPES, RecordBatch, _Record


class Sink(Protocol):
    """
    Relational storage for the six tables.

    ``insert_batch`` is all-or-nothing: if any record is rejected, none of
    the batch is visible afterwards.
    """

    def insert(self, table: str, record: _Record) -> None:
        ...

    def insert_batch(self, batch: RecordBatch) -> None:
        ...

    def count(self, table: str) -> int:
        ...

    def max_key(self, table: str) -> Optional[int]:
        ...

    def rows(self, table: str) -> List[Any]:
        ...


def check_table(table: str, record: Optional[_Record] = None) -> None:
    if table not in RECORD_TYPES:
        raise ValueError(f"Unknown table: {table!r}")
    if record is not None and record.TABLE != table:
        raise ValueError(f"{type(record).__name__} does not belong in table {table!r}")
