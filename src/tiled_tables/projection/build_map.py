from __future__ import annotations

from tiled_tables.loader.nodes import TmxDocument
from tiled_tables.projection.records import MapRecord


def build_map(document: TmxDocument, map_id: int, map_name: str) -> MapRecord:
    """
    Build the MapRecord for a parsed document.

    PURE FUNCTION: the background color is normalized to ``#rrggbbaa``.
    """
    background = document.background_color.to_hex() if document.background_color else None

    return MapRecord(
        map_id=map_id,
        name=map_name,
        width=document.width,
        height=document.height,
        tile_width=document.tile_width,
        tile_height=document.tile_height,
        orientation=document.orientation or "orthogonal",
        background_color=background,
        infinite=document.infinite,
    )
