"""
json_exporter.py
JSON exporter for sink contents.

This exporter:
- Dumps every table as a list of row dicts, ordered by primary key
- Adds a per-table row count summary
- Never mutates the sink
"""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from tiled_tables.logging import get_logger
from tiled_tables.projection.records import RECORD_TYPES, TABLES
from tiled_tables.queries import owned_properties, property_owners
from tiled_tables.store.base import Sink

log = get_logger("json_exporter")


def _to_json_compatible(obj: Any) -> Any:
    """
    Recursively convert objects into JSON-compatible structures.

    Rules:
    - Primitives pass through
    - dataclasses -> dict (recursively)
    - dict -> dict (recursively)
    - list / tuple / set -> list (recursively)
    - Unknown objects -> str(obj)
    """
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj

    if is_dataclass(obj) and not isinstance(obj, type):
        return {k: _to_json_compatible(v) for k, v in asdict(obj).items()}

    if isinstance(obj, dict):
        return {str(k): _to_json_compatible(v) for k, v in obj.items()}

    if isinstance(obj, (list, tuple, set)):
        return [_to_json_compatible(v) for v in obj]

    return str(obj)


def build_tables_dict(sink: Sink, map_id: Optional[int] = None) -> Dict[str, Any]:
    """
    Convert the sink contents into a JSON-safe dict.

    With ``map_id`` only that map and its descendants are included.
    """
    tables = {table: sorted(sink.rows(table), key=lambda r: r.primary_key) for table in TABLES}

    if map_id is not None:
        tables = _restrict_to_map(tables, map_id)

    return {
        "counts": {table: len(rows) for table, rows in tables.items()},
        "tables": {
            table: [_to_json_compatible(row) for row in rows]
            for table, rows in tables.items()
        },
    }


def _restrict_to_map(tables: Dict[str, list], map_id: int) -> Dict[str, list]:
    maps = [m for m in tables["tiled_map"] if m.map_id == map_id]
    layers = [l for l in tables["tiled_layer"] if l.map_id == map_id]
    tilesets = [t for t in tables["tiled_tileset"] if t.map_id == map_id]
    layer_ids = {l.layer_id for l in layers}
    tiles = [t for t in tables["tiled_tile"] if t.layer_id in layer_ids]
    objects = [o for o in tables["tiled_object"] if o.layer_id in layer_ids]

    owners = property_owners(map_id if maps else None, layers, tilesets, objects)
    properties = owned_properties(tables["tiled_property"], owners)

    return {
        "tiled_map": maps,
        "tiled_tileset": tilesets,
        "tiled_layer": layers,
        "tiled_tile": tiles,
        "tiled_object": objects,
        "tiled_property": properties,
    }


def serialize_tables_to_json_string(sink: Sink, indent: Optional[int] = 2, map_id: Optional[int] = None) -> str:
    return json.dumps(build_tables_dict(sink, map_id), indent=indent, ensure_ascii=False)


def export_tables_to_json(
    sink: Sink,
    output_path: str | Path,
    indent: Optional[int] = 2,
    map_id: Optional[int] = None,
) -> Path:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    log.info(
        "Exporting tables JSON to: %s (%s)",
        output_path,
        ", ".join(f"{table}={sink.count(table)}" for table in RECORD_TYPES),
    )

    json_str = serialize_tables_to_json_string(sink, indent=indent, map_id=map_id)

    with output_path.open("w", encoding="utf-8") as f:
        f.write(json_str)

    size_bytes = output_path.stat().st_size
    log.info("JSON export complete. size=%d bytes", size_bytes)
    return output_path
