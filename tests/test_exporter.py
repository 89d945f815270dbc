# tests/test_exporter.py

from __future__ import annotations

import json

from tiled_tables.exporter import build_tables_dict, export_tables_to_json
from tiled_tables.parser_core import TmxLoader
from tiled_tables.projection.records import TABLES
from tiled_tables.store import MemorySink
from tiled_tables.utils import mock_file_path


def _loaded_sink():
    sink = MemorySink()
    loader = TmxLoader(sink)
    first = loader.load_file("finite", mock_file_path("finite.tmx"))
    second = loader.load_file("infinite", mock_file_path("infinite.tmx"))
    return sink, first, second


def test_build_tables_dict_shape() -> None:
    sink, _, _ = _loaded_sink()
    data = build_tables_dict(sink)

    assert list(data["tables"]) == list(TABLES)
    assert data["counts"]["tiled_map"] == 2
    assert data["counts"]["tiled_tile"] == 12

    first_map = data["tables"]["tiled_map"][0]
    assert first_map["name"] == "finite"
    assert first_map["background_color"] == "#33669980"


def test_build_tables_dict_for_one_map() -> None:
    sink, first, second = _loaded_sink()

    assert build_tables_dict(sink, map_id=first)["counts"] == {
        "tiled_map": 1,
        "tiled_tileset": 2,
        "tiled_layer": 5,
        "tiled_tile": 8,
        "tiled_object": 5,
        "tiled_property": 9,
    }

    counts = build_tables_dict(sink, map_id=second)["counts"]
    assert (counts["tiled_map"], counts["tiled_layer"], counts["tiled_tile"]) == (1, 1, 4)
    assert counts["tiled_object"] == 0


def test_export_tables_to_json_writes_file(tmp_path) -> None:
    sink, _, _ = _loaded_sink()
    out = export_tables_to_json(sink, tmp_path / "nested" / "tables.json")

    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["counts"]["tiled_object"] == 5
    spawn = next(o for o in payload["tables"]["tiled_object"] if o["obj_type"] == "spawn")
    assert spawn["shape"] == "point"
