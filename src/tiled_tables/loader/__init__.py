# src/tiled_tables/loader/__init__.py

"""
Public interface for the TMX loader stack.

Two front-ends build the same intermediate TmxDocument:

    text -> tokenize() -> StreamParser      -> TmxDocument   (streaming)
    text -> ElementTree  -> TreeBuilder     -> TmxDocument   (tree)

Intended usage from other parts of the project and tests:

    from tiled_tables.loader import (
        AttributeReader,
        StreamParser,
        TmxDocument,
        build_tree,
        parse_tmx_stream,
        tokenize,
    )
"""

from __future__ import annotations

from .attributes import AttributeReader, parse_color
from .elements import CHUNK_SIZE
from .nodes import (
    TmxChunk,
    TmxColor,
    TmxDocument,
    TmxLayerNode,
    TmxObjectNode,
    TmxPropertyNode,
    TmxTileData,
    TmxTileDefinition,
    TmxTilesetNode,
)
from .stream_parser import ParseState, StreamParser, parse_tmx_stream
from .tokenizer import EventKind, XmlEvent, tokenize
from .tree_builder import TreeBuilder, build_tree, parse_element_tree

__all__ = [
    "AttributeReader",
    "CHUNK_SIZE",
    "EventKind",
    "ParseState",
    "StreamParser",
    "TmxChunk",
    "TmxColor",
    "TmxDocument",
    "TmxLayerNode",
    "TmxObjectNode",
    "TmxPropertyNode",
    "TmxTileData",
    "TmxTileDefinition",
    "TmxTilesetNode",
    "TreeBuilder",
    "XmlEvent",
    "build_tree",
    "parse_color",
    "parse_element_tree",
    "parse_tmx_stream",
    "tokenize",
]
