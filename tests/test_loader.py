# tests/test_loader.py

from __future__ import annotations

import pytest

from tiled_tables.config import TTConfig
from tiled_tables.core.exceptions import (
    AttributeValueError,
    NegativeCoordinateError,
    TmxSyntaxError,
    UnsupportedEncodingError,
)
from tiled_tables.core.policies import (
    LoadOptions,
    MalformedAttributePolicy,
    NegativeCoordinatePolicy,
    ZOrderPolicy,
)
from tiled_tables.identity import RowCountAllocator
from tiled_tables.parser_core import TmxLoader, load
from tiled_tables.projection.records import TABLES
from tiled_tables.store import MemorySink
from tiled_tables.utils import mock_file_path


def _empty(sink) -> bool:
    return all(sink.count(table) == 0 for table in TABLES)


def test_two_loads_get_distinct_map_ids(finite_tmx) -> None:
    sink = MemorySink()
    loader = TmxLoader(sink)

    first = loader.load("level", finite_tmx)
    second = loader.load("level", finite_tmx)

    assert first != second
    assert sink.count("tiled_map") == 2
    assert sink.count("tiled_tile") == 16


def test_module_level_load(finite_tmx) -> None:
    sink = MemorySink()
    map_id = load("level", finite_tmx, sink=sink)
    assert sink.rows("tiled_map")[0].map_id == map_id


def test_malformed_xml_writes_nothing() -> None:
    sink = MemorySink()
    with pytest.raises(TmxSyntaxError):
        TmxLoader(sink).load("broken", '<map width="2" height="1"><layer><data>1,2</data></map>')
    assert _empty(sink)


def test_base64_data_writes_nothing() -> None:
    sink = MemorySink()
    tmx = (
        '<map width="1" height="1"><layer name="a"/>'
        '<layer name="b"><data encoding="base64">AQAAAA==</data></layer></map>'
    )
    with pytest.raises(UnsupportedEncodingError):
        TmxLoader(sink).load("b64", tmx)
    assert _empty(sink)


def test_negative_chunks_policies() -> None:
    text = mock_file_path("infinite_negative.tmx").read_text(encoding="utf-8")

    sink = MemorySink()
    with pytest.raises(NegativeCoordinateError):
        TmxLoader(sink).load("neg", text)
    assert _empty(sink)

    skipped = MemorySink()
    TmxLoader(skipped, options=LoadOptions(negative_coordinates=NegativeCoordinatePolicy.SKIP)).load("neg", text)
    assert [(t.x, t.y) for t in skipped.rows("tiled_tile")] == [(5, 0)]

    allowed = MemorySink()
    TmxLoader(allowed, options=LoadOptions(negative_coordinates=NegativeCoordinatePolicy.ALLOW)).load("neg", text)
    assert [(t.x, t.y) for t in allowed.rows("tiled_tile")] == [(-16, 0), (-1, 15), (5, 0)]


def test_attribute_defaults_through_load() -> None:
    tmx = (
        '<map width="1" height="1">'
        '<layer name="a" visible="0" opacity="abc"/>'
        '<layer name="b" visible="true"/>'
        "</map>"
    )
    sink = MemorySink()
    TmxLoader(sink).load("attrs", tmx)
    a, b = sink.rows("tiled_layer")

    assert (a.visible, a.opacity) == (False, 1.0)
    assert b.visible is True


def test_strict_attribute_policy_raises_and_writes_nothing() -> None:
    sink = MemorySink()
    loader = TmxLoader(sink, options=LoadOptions(malformed_attribute=MalformedAttributePolicy.STRICT))
    with pytest.raises(AttributeValueError):
        loader.load("strict", '<map width="abc" height="1"/>')
    assert _empty(sink)


def test_streaming_default_z_order_is_layer_id(finite_tmx) -> None:
    sink = MemorySink()
    loader = TmxLoader(sink)
    loader.load("first", finite_tmx)
    second = loader.load("second", finite_tmx)

    layers = [l for l in sink.rows("tiled_layer") if l.map_id == second]
    assert [l.z_order for l in layers] == [l.layer_id for l in layers]


def test_tree_default_z_order_is_document_order(finite_tmx) -> None:
    sink = MemorySink()
    loader = TmxLoader(sink)
    loader.load_tree("first", finite_tmx)
    second = loader.load_tree("second", finite_tmx)

    layers = [l for l in sink.rows("tiled_layer") if l.map_id == second]
    assert [l.z_order for l in layers] == [0, 1, 2, 3, 4]


def test_load_file_resolves_external_tilesets() -> None:
    path = mock_file_path("finite.tmx")

    tree_sink = MemorySink()
    TmxLoader(tree_sink).load_file(None, path)
    stream_sink = MemorySink()
    TmxLoader(stream_sink).load_file(None, path, streaming=True)

    for sink in (tree_sink, stream_sink):
        assert sink.rows("tiled_map")[0].name == "finite"
        assert sink.count("tiled_property") == 9
        props = sink.rows("tiled_tileset")[1]
        assert (props.name, props.source, props.image_source) == ("props", "props.tsx", "props.png")


def test_load_file_missing_path(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        TmxLoader(MemorySink()).load_file("x", tmp_path / "missing.tmx")


def test_row_count_allocator_strategy(finite_tmx) -> None:
    sink = MemorySink()
    loader = TmxLoader(sink, RowCountAllocator(sink))

    assert loader.load("a", finite_tmx) == 0
    assert loader.load("b", finite_tmx) == 1
    assert sorted(t.tile_id for t in sink.rows("tiled_tile")) == list(range(16))


def test_options_come_from_config() -> None:
    cfg = TTConfig({"loader": {"negative_coordinates": "skip", "z_order": "document_order"}})
    loader = TmxLoader(MemorySink(), config=cfg)

    assert loader.options.negative_coordinates is NegativeCoordinatePolicy.SKIP
    assert loader.options.z_order is ZOrderPolicy.DOCUMENT_ORDER
    assert loader.options.malformed_attribute is MalformedAttributePolicy.USE_DEFAULT
