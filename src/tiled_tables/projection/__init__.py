# src/tiled_tables/projection/__init__.py

"""
Document -> relational records.

    TmxDocument -> project_document() -> RecordBatch

Per-entity builders are pure; only the projector requests ids.
"""

from __future__ import annotations

from .build_properties import decode_property_value, encode_property
from .build_records import project_document
from .build_tiles import DecodedGid, decode_gid, split_csv
from .records import (
    LayerRecord,
    MapRecord,
    ObjectRecord,
    PropertyRecord,
    RecordBatch,
    TABLES,
    TileRecord,
    TilesetRecord,
)

__all__ = [
    "DecodedGid",
    "LayerRecord",
    "MapRecord",
    "ObjectRecord",
    "PropertyRecord",
    "RecordBatch",
    "TABLES",
    "TileRecord",
    "TilesetRecord",
    "decode_gid",
    "decode_property_value",
    "encode_property",
    "project_document",
    "split_csv",
]
