# src/tiled_tables/store/memory.py
from __future__ import annotations

from typing import Dict, List, Optional

from tiled_tables.core.exceptions import DuplicateKeyError
from tiled_tables.logging import get_logger
from tiled_tables.projection.records import TABLES, RecordBatch, _Record
from tiled_tables.store.base import check_table

log = get_logger("memory_sink")


class MemorySink:
    """
    Dict-backed tables keyed by primary key, insertion ordered.

    Example:
        sink = MemorySink()
        map_id = TmxLoader(sink).load("level1", text)
        sink.count("tiled_tile")
    """

    def __init__(self):
        self.tables: Dict[str, Dict[int, _Record]] = {table: {} for table in TABLES}

    def insert(self, table: str, record: _Record) -> None:
        check_table(table, record)
        rows = self.tables[table]
        if record.primary_key in rows:
            raise DuplicateKeyError(table, record.primary_key)
        rows[record.primary_key] = record

    def insert_batch(self, batch: RecordBatch) -> None:
        # Validate every key first so a rejected batch leaves nothing behind.
        for table in TABLES:
            rows = self.tables[table]
            seen = set()
            for record in batch.rows[table]:
                key = record.primary_key
                if key in rows or key in seen:
                    raise DuplicateKeyError(table, key)
                seen.add(key)

        for record in batch.iter_records():
            self.tables[record.TABLE][record.primary_key] = record

        log.debug("Committed batch for map %s: %d record(s)", batch.map_id, len(batch))

    def count(self, table: str) -> int:
        check_table(table)
        return len(self.tables[table])

    def max_key(self, table: str) -> Optional[int]:
        check_table(table)
        rows = self.tables[table]
        return max(rows) if rows else None

    def rows(self, table: str) -> List[_Record]:
        check_table(table)
        return list(self.tables[table].values())
