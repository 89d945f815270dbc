# tests/test_projection.py

from __future__ import annotations

from tiled_tables.core.policies import LoadOptions, ZOrderPolicy
from tiled_tables.identity import CounterAllocator
from tiled_tables.loader import build_tree, parse_tmx_stream
from tiled_tables.projection import project_document
from tiled_tables.projection.records import TABLES, MapRecord
from tiled_tables.utils import mock_file_path


def _project(text: str, **kwargs):
    doc = build_tree(text, base_dir=mock_file_path(""))
    return project_document("level", doc, CounterAllocator(), **kwargs)


def test_map_record_emitted_first(finite_tmx) -> None:
    batch = _project(finite_tmx)
    first = next(batch.iter_records())

    assert isinstance(first, MapRecord)
    assert first.map_id == batch.map_id == 0
    assert first.name == "level"
    assert first.background_color == "#33669980"
    assert (first.width, first.height, first.tile_width, first.tile_height) == (4, 3, 16, 16)


def test_record_counts(finite_tmx) -> None:
    counts = _project(finite_tmx).counts()
    assert counts == {
        "tiled_map": 1,
        "tiled_tileset": 2,
        "tiled_layer": 5,
        "tiled_tile": 8,
        "tiled_object": 5,
        "tiled_property": 9,
    }


def test_children_reference_their_map_and_layer(finite_tmx) -> None:
    batch = _project(finite_tmx)
    layer_ids = {l.layer_id for l in batch.layers}

    assert all(l.map_id == batch.map_id for l in batch.layers)
    assert all(t.map_id == batch.map_id for t in batch.tilesets)
    assert all(t.layer_id in layer_ids for t in batch.tiles)
    assert all(o.layer_id in layer_ids for o in batch.objects)


def test_tiles_only_for_nonzero_masked_gids(finite_tmx) -> None:
    batch = _project(finite_tmx)
    ground = batch.layers[0]

    ground_tiles = [(t.x, t.y, t.gid, t.flip_h) for t in batch.tiles if t.layer_id == ground.layer_id]
    assert ground_tiles == [
        (0, 0, 1, False),
        (1, 0, 2, False),
        (3, 0, 3, False),
        (2, 1, 2, True),
        (3, 1, 1, False),
        (0, 2, 4, False),
        (3, 2, 1, False),
    ]
    assert all(0 < t.gid <= 0x1FFFFFFF for t in batch.tiles)


def test_group_children_record_parent(finite_tmx) -> None:
    batch = _project(finite_tmx)
    by_name = {l.name: l for l in batch.layers}

    assert by_name["Decor"].kind == "group"
    assert by_name["Sky"].parent_layer_id == by_name["Decor"].layer_id
    assert by_name["Overlay"].parent_layer_id == by_name["Decor"].layer_id
    assert by_name["Ground"].parent_layer_id is None

    overlay_tiles = [t for t in batch.tiles if t.layer_id == by_name["Overlay"].layer_id]
    assert [(t.x, t.y, t.gid, t.flip_v) for t in overlay_tiles] == [(1, 1, 1, True)]


def test_tile_properties_use_global_id(finite_tmx) -> None:
    batch = _project(finite_tmx)
    tile_props = {(p.parent_id, p.key): p.value for p in batch.properties if p.parent_type == "tile"}

    assert tile_props == {
        (2, "walkable"): "false",
        (5, "pickup"): "true",
        (5, "tint"): "#00ff00ff",
    }


def test_object_shapes_and_types(finite_tmx) -> None:
    batch = _project(finite_tmx)
    objects = {o.name: o for o in batch.objects}

    assert objects["player_start"].shape == "point"
    assert objects["player_start"].obj_type == "spawn"
    assert objects["pond"].shape == "ellipse"
    assert objects["marker"].obj_type == "waypoint"
    assert (objects["fence"].shape, objects["fence"].width) == ("polyline", 0.0)
    assert objects["wall"].shape == "rectangle"
    assert objects["wall"].visible is False


def test_z_order_policies() -> None:
    tmx = '<map width="1" height="1"><layer name="a"/><layer name="b"/></map>'
    allocator = CounterAllocator(seeds={"layer": 10})
    doc = parse_tmx_stream(tmx)

    by_id = project_document("m", doc, allocator, default_z_order=ZOrderPolicy.LAYER_ID)
    assert [l.z_order for l in by_id.layers] == [10, 11]

    by_order = project_document("m", doc, allocator, default_z_order=ZOrderPolicy.DOCUMENT_ORDER)
    assert [l.z_order for l in by_order.layers] == [0, 1]

    forced = project_document(
        "m",
        doc,
        allocator,
        LoadOptions(z_order=ZOrderPolicy.DOCUMENT_ORDER),
        default_z_order=ZOrderPolicy.LAYER_ID,
    )
    assert [l.z_order for l in forced.layers] == [0, 1]


def test_front_ends_project_identically(finite_tmx) -> None:
    stream = project_document("m", parse_tmx_stream(finite_tmx), CounterAllocator())
    tree = project_document("m", build_tree(finite_tmx), CounterAllocator())

    for table in TABLES:
        assert stream.rows[table] == tree.rows[table]


def test_infinite_map_chunks(infinite_tmx) -> None:
    batch = _project(infinite_tmx)
    assert batch.maps[0].infinite is True
    assert [(t.x, t.y, t.gid) for t in batch.tiles] == [
        (0, 0, 1),
        (1, 1, 4),
        (16, 32, 1),
        (19, 36, 2),
    ]
    assert batch.tiles[1].flip_h and batch.tiles[1].flip_v
