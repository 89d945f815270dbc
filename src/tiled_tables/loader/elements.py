# src/tiled_tables/loader/elements.py

"""
Element-level builders shared by both front-ends.

Each function converts the attributes of exactly one TMX element into the
matching intermediate node. They know nothing about where the attributes
came from (pull events or a parsed element tree).
"""

from __future__ import annotations

from typing import Optional

from tiled_tables.core.exceptions import TmxFormatError, UnsupportedEncodingError
from tiled_tables.loader.attributes import AttributeReader
from tiled_tables.loader.nodes import (
    TmxChunk,
    TmxDocument,
    TmxLayerNode,
    TmxObjectNode,
    TmxTileDefinition,
    TmxTilesetNode,
)

# Fixed extent of an infinite-map chunk, in tiles.
CHUNK_SIZE = 16

# Element name -> layer kind.
LAYER_ELEMENTS = {
    "layer": "tile",
    "objectgroup": "object",
    "imagelayer": "image",
    "group": "group",
}

# Object child element -> shape name.
SHAPE_ELEMENTS = {
    "ellipse": "ellipse",
    "point": "point",
    "polygon": "polygon",
    "polyline": "polyline",
    "text": "text",
}


def read_map_header(doc: TmxDocument, reader: AttributeReader) -> None:
    """Fill the map-level fields of ``doc`` from a ``<map>`` element."""
    doc.width = reader.get_int("width")
    doc.height = reader.get_int("height")
    doc.tile_width = reader.get_int("tilewidth")
    doc.tile_height = reader.get_int("tileheight")
    doc.orientation = reader.get_str("orientation", "orthogonal") or "orthogonal"
    doc.background_color = reader.get_color("backgroundcolor")
    doc.infinite = reader.get_bool("infinite", False)


def build_tileset_node(reader: AttributeReader, index: int) -> TmxTilesetNode:
    return TmxTilesetNode(
        index=index,
        first_gid=reader.get_int("firstgid", 1),
        name=reader.get_str("name"),
        tile_width=reader.get_int("tilewidth"),
        tile_height=reader.get_int("tileheight"),
        tile_count=reader.get_int("tilecount"),
        columns=reader.get_int("columns"),
        source=reader.get_optional_str("source"),
    )


def merge_external_tileset(tileset: TmxTilesetNode, reader: AttributeReader) -> None:
    """Copy the definition found in a ``.tsx`` root onto a referencing tileset."""
    tileset.name = reader.get_str("name")
    tileset.tile_width = reader.get_int("tilewidth")
    tileset.tile_height = reader.get_int("tileheight")
    tileset.tile_count = reader.get_int("tilecount")
    tileset.columns = reader.get_int("columns")


def apply_tileset_image(tileset: TmxTilesetNode, reader: AttributeReader) -> None:
    tileset.image_source = reader.get_optional_str("source")
    tileset.image_width = reader.get_optional_int("width")
    tileset.image_height = reader.get_optional_int("height")


def build_tile_definition(reader: AttributeReader) -> TmxTileDefinition:
    return TmxTileDefinition(local_id=reader.get_int("id"))


def build_layer_node(element: str, reader: AttributeReader) -> TmxLayerNode:
    return TmxLayerNode(
        kind=LAYER_ELEMENTS[element],
        name=reader.get_str("name"),
        visible=reader.get_bool("visible", True),
        opacity=reader.get_float("opacity", 1.0),
        offset_x=reader.get_truncated_int("offsetx"),
        offset_y=reader.get_truncated_int("offsety"),
    )


def build_object_node(reader: AttributeReader) -> TmxObjectNode:
    obj_type = reader.get_optional_str("type")
    if obj_type is None:
        # Tiled 1.9+ writes the object class as "class".
        obj_type = reader.get_str("class")

    return TmxObjectNode(
        name=reader.get_str("name"),
        obj_type=obj_type,
        x=reader.get_float("x"),
        y=reader.get_float("y"),
        width=reader.get_float("width"),
        height=reader.get_float("height"),
        rotation=reader.get_float("rotation"),
        visible=reader.get_bool("visible", True),
    )


def check_data_encoding(reader: AttributeReader) -> None:
    """
    Only plain CSV tile data is supported.

    Raises:
        UnsupportedEncodingError: for base64 data, any compression, or XML
            ``<tile>`` encoding declared explicitly.
    """
    encoding: Optional[str] = reader.get_optional_str("encoding")
    compression: Optional[str] = reader.get_optional_str("compression")

    if compression:
        raise UnsupportedEncodingError(
            f"Compressed tile data is not supported (compression={compression!r})"
        )
    if encoding is not None and encoding.strip().lower() != "csv":
        raise UnsupportedEncodingError(
            f"Only CSV tile data is supported (encoding={encoding!r})"
        )


def build_chunk(reader: AttributeReader) -> TmxChunk:
    """
    Build a chunk from its ``x``/``y`` tile offsets.

    Raises:
        TmxFormatError: when the chunk is not a 16x16 block aligned on the
            16-tile chunk grid.
    """
    x = reader.get_int("x")
    y = reader.get_int("y")
    width = reader.get_int("width", CHUNK_SIZE)
    height = reader.get_int("height", CHUNK_SIZE)

    if width != CHUNK_SIZE or height != CHUNK_SIZE:
        raise TmxFormatError(
            f"Chunk at ({x}, {y}) is {width}x{height}; only {CHUNK_SIZE}x{CHUNK_SIZE} chunks are supported"
        )
    if x % CHUNK_SIZE or y % CHUNK_SIZE:
        raise TmxFormatError(
            f"Chunk at ({x}, {y}) is not aligned to the {CHUNK_SIZE}-tile chunk grid"
        )

    return TmxChunk(origin_x=x // CHUNK_SIZE, origin_y=y // CHUNK_SIZE)
