"""
Read-side helpers over any sink.

These mirror the lookups a game server runs against loaded maps: map info,
the tile under a cell, the objects of a layer, spawn points and so on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set

from tiled_tables.core.exceptions import MapNotFoundError
from tiled_tables.projection.records import (
    LAYER_TABLE,
    MAP_TABLE,
    OBJECT_TABLE,
    PROPERTY_TABLE,
    TILE_TABLE,
    TILESET_TABLE,
    LayerRecord,
    MapRecord,
    ObjectRecord,
    PropertyRecord,
    TileRecord,
    TilesetRecord,
)
from tiled_tables.store.base import Sink


@dataclass
class MapSummary:
    map: MapRecord
    layers: int = 0
    tilesets: int = 0
    tiles: int = 0
    objects: int = 0
    properties: int = 0


@dataclass
class LayerSummary:
    layer: LayerRecord
    tiles: int = 0
    objects: int = 0


@dataclass
class ObjectWithProperties:
    object: ObjectRecord
    properties: Dict[str, str] = field(default_factory=dict)


def get_map(sink: Sink, map_id: int) -> MapRecord:
    for record in sink.rows(MAP_TABLE):
        if record.map_id == map_id:
            return record
    raise MapNotFoundError(f"No map with id {map_id}")


def find_map_by_name(sink: Sink, name: str) -> MapRecord:
    """Most recently loaded map called ``name``."""
    matches = [m for m in sink.rows(MAP_TABLE) if m.name == name]
    if not matches:
        raise MapNotFoundError(f"No map named {name!r}")
    return max(matches, key=lambda m: m.map_id)


def list_layers(sink: Sink, map_id: int) -> List[LayerRecord]:
    """Layers of a map sorted by z_order, then id."""
    get_map(sink, map_id)
    layers = [l for l in sink.rows(LAYER_TABLE) if l.map_id == map_id]
    return sorted(layers, key=lambda l: (l.z_order, l.layer_id))


def _layer_ids(sink: Sink, map_id: int) -> set:
    return {l.layer_id for l in list_layers(sink, map_id)}


def tileset_global_ids(tilesets: Iterable[TilesetRecord]) -> Set[int]:
    """Every gid covered by ``tilesets``; tile properties are keyed by these."""
    ids: Set[int] = set()
    for tileset in tilesets:
        ids.update(range(tileset.first_gid, tileset.first_gid + max(tileset.tile_count, 0)))
    return ids


def property_owners(
    map_id: Optional[int],
    layers: Iterable[LayerRecord],
    tilesets: Iterable[TilesetRecord],
    objects: Iterable[ObjectRecord],
) -> Dict[str, Set[int]]:
    """
    Parent ids per ``parent_type`` for the properties of one map.

    Tile parents are gids, so a gid shared with another map's tileset
    matches both maps.
    """
    tilesets = list(tilesets)
    return {
        "map": {map_id} if map_id is not None else set(),
        "layer": {l.layer_id for l in layers},
        "tileset": {t.tileset_id for t in tilesets},
        "object": {o.object_id for o in objects},
        "tile": tileset_global_ids(tilesets),
    }


def owned_properties(properties: Iterable[PropertyRecord], owners: Dict[str, Set[int]]) -> List[PropertyRecord]:
    return [p for p in properties if p.parent_id in owners.get(p.parent_type, ())]


def map_summary(sink: Sink, map_id: int) -> MapSummary:
    record = get_map(sink, map_id)
    layers = list_layers(sink, map_id)
    layer_ids = {l.layer_id for l in layers}
    tilesets = [t for t in sink.rows(TILESET_TABLE) if t.map_id == map_id]
    objects = [o for o in sink.rows(OBJECT_TABLE) if o.layer_id in layer_ids]
    owners = property_owners(map_id, layers, tilesets, objects)

    return MapSummary(
        map=record,
        layers=len(layer_ids),
        tilesets=len(tilesets),
        tiles=sum(1 for t in sink.rows(TILE_TABLE) if t.layer_id in layer_ids),
        objects=len(objects),
        properties=len(owned_properties(sink.rows(PROPERTY_TABLE), owners)),
    )


def layer_summaries(sink: Sink, map_id: int) -> List[LayerSummary]:
    """Every layer of a map with its tile and object counts."""
    summaries = {l.layer_id: LayerSummary(layer=l) for l in list_layers(sink, map_id)}
    for tile in sink.rows(TILE_TABLE):
        if tile.layer_id in summaries:
            summaries[tile.layer_id].tiles += 1
    for obj in sink.rows(OBJECT_TABLE):
        if obj.layer_id in summaries:
            summaries[obj.layer_id].objects += 1
    return list(summaries.values())


def tile_at(sink: Sink, layer_id: int, x: int, y: int) -> Optional[TileRecord]:
    """The tile placed at (x, y) on a layer, or ``None`` for an empty cell."""
    for tile in sink.rows(TILE_TABLE):
        if tile.layer_id == layer_id and tile.x == x and tile.y == y:
            return tile
    return None


def objects_in_layer(sink: Sink, layer_id: int) -> List[ObjectRecord]:
    return [o for o in sink.rows(OBJECT_TABLE) if o.layer_id == layer_id]


def properties_of(sink: Sink, parent_type: str, parent_id: int) -> Dict[str, str]:
    """Properties of one record as ``{key: value}``; tile parents use the global id."""
    return {
        p.key: p.value
        for p in sink.rows(PROPERTY_TABLE)
        if p.parent_type == parent_type and p.parent_id == parent_id
    }


def objects_of_type(
    sink: Sink,
    obj_type: str,
    map_id: Optional[int] = None,
) -> List[ObjectWithProperties]:
    """
    Objects whose ``obj_type`` matches, each with its properties.

    ``objects_of_type(sink, "spawn", map_id)`` lists spawn points.
    """
    layer_ids = _layer_ids(sink, map_id) if map_id is not None else None

    results = []
    for obj in sink.rows(OBJECT_TABLE):
        if obj.obj_type != obj_type:
            continue
        if layer_ids is not None and obj.layer_id not in layer_ids:
            continue
        results.append(
            ObjectWithProperties(
                object=obj,
                properties=properties_of(sink, "object", obj.object_id),
            )
        )
    return results
