from __future__ import annotations

from tiled_tables.loader.nodes import TmxTilesetNode
from tiled_tables.projection.records import TilesetRecord


def build_tileset(node: TmxTilesetNode, tileset_id: int, map_id: int) -> TilesetRecord:
    """Build a TilesetRecord. ``tileset_index`` is the node's per-map position."""
    return TilesetRecord(
        tileset_id=tileset_id,
        map_id=map_id,
        tileset_index=node.index,
        name=node.name,
        first_gid=node.first_gid,
        tile_width=node.tile_width,
        tile_height=node.tile_height,
        tile_count=node.tile_count,
        columns=node.columns,
        image_source=node.image_source,
        image_width=node.image_width,
        image_height=node.image_height,
        source=node.source,
    )
