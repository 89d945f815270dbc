# src/tiled_tables/loader/stream_parser.py

"""
Streaming TMX front-end.

Consumes the flat XmlEvent stream produced by ``tokenize()`` in a single
forward pass and rebuilds a TmxDocument. There is no element tree to lean
on, so the parser keeps its own context: the current layer and its kind,
whether it is inside ``<data>`` / ``<chunk>``, the open object, the open
tileset and tile definition, the stack of open ``<group>`` layers and a
pending ``<property>``.

States::

    IDLE -> IN_MAP -> IN_TILE_LAYER    (+ IN_DATA while inside <data>)
                   -> IN_OBJECT_LAYER  (+ IN_OBJECT while inside <object>)
                   -> IN_IMAGE_LAYER
         -> CLOSED (after </map>)  -> DONE (after EOF)
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Optional, Union

from tiled_tables.core.exceptions import (
    TmxFormatError,
    TmxStructureError,
    UnsupportedEncodingError,
)
from tiled_tables.core.policies import LoadOptions, OrphanPolicy
from tiled_tables.loader.attributes import AttributeReader
from tiled_tables.loader.elements import (
    LAYER_ELEMENTS,
    SHAPE_ELEMENTS,
    apply_tileset_image,
    build_chunk,
    build_layer_node,
    build_object_node,
    build_tile_definition,
    build_tileset_node,
    check_data_encoding,
    read_map_header,
)
from tiled_tables.loader.nodes import (
    TmxChunk,
    TmxDocument,
    TmxLayerNode,
    TmxObjectNode,
    TmxPropertyNode,
    TmxTileData,
    TmxTileDefinition,
    TmxTilesetNode,
)
from tiled_tables.loader.properties import build_property_node
from tiled_tables.loader.tokenizer import EventKind, XmlEvent, tokenize
from tiled_tables.logging import get_logger

log = get_logger("stream_parser")


class ParseState(str, Enum):
    IDLE = "idle"
    IN_MAP = "in_map"
    IN_TILE_LAYER = "in_tile_layer"
    IN_OBJECT_LAYER = "in_object_layer"
    IN_IMAGE_LAYER = "in_image_layer"
    CLOSED = "closed"
    DONE = "done"


_LAYER_STATES = {
    "tile": ParseState.IN_TILE_LAYER,
    "object": ParseState.IN_OBJECT_LAYER,
    "image": ParseState.IN_IMAGE_LAYER,
}


class StreamParser:
    """
    Event-driven TMX state machine.

    Usage:
        parser = StreamParser(options)
        for event in tokenize(text):
            parser.feed(event)
        document = parser.document

    or simply ``StreamParser(options).parse(tokenize(text))``.
    """

    def __init__(self, options: Optional[LoadOptions] = None):
        self.options = options or LoadOptions()
        self.document = TmxDocument()
        self.state = ParseState.IDLE

        self.current_layer: Optional[TmxLayerNode] = None
        self.group_stack: List[TmxLayerNode] = []
        self.current_object: Optional[TmxObjectNode] = None
        self.current_tileset: Optional[TmxTilesetNode] = None
        self.current_tile_def: Optional[TmxTileDefinition] = None

        self.in_data = False
        self.current_chunk: Optional[TmxChunk] = None
        self._data_parts: List[str] = []

        self._pending_property: Optional[AttributeReader] = None
        self._pending_property_text: List[str] = []

        # Depth of an element whose whole subtree is being ignored.
        self._skip_depth: Optional[int] = None

        self.tileset_counter = 0
        self.dropped_objects = 0

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def parse(self, events: Iterable[XmlEvent]) -> TmxDocument:
        for event in events:
            self.feed(event)
            if self.state is ParseState.DONE:
                break
        if self.state is not ParseState.DONE:
            # Event source ended without EOF; treat the end of input as EOF.
            self.feed(XmlEvent(EventKind.EOF))
        return self.document

    def feed(self, event: XmlEvent) -> None:
        if self.state is ParseState.DONE:
            return

        if event.kind is EventKind.EOF:
            self._on_eof()
            return

        if self._skip_depth is not None:
            if event.kind is EventKind.END and event.depth == self._skip_depth:
                self._skip_depth = None
            return

        if event.kind is EventKind.START:
            self._on_start(event)
        elif event.kind is EventKind.TEXT:
            self._on_text(event)
        elif event.kind is EventKind.END:
            self._on_end(event)

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _reader(self, event: XmlEvent) -> AttributeReader:
        return AttributeReader(event.attrs, self.options.malformed_attribute, element=event.name)

    def _skip_subtree(self, event: XmlEvent) -> None:
        self._skip_depth = event.depth

    def _orphan(self, what: str) -> None:
        if self.options.orphan is OrphanPolicy.STRICT:
            raise TmxStructureError(f"<{what}> outside of a layer that can hold it")
        log.debug("Dropping <%s> outside of an open layer", what)

    def _property_owner(self) -> List[TmxPropertyNode]:
        if self.current_object is not None:
            return self.current_object.properties
        if self.current_tile_def is not None:
            return self.current_tile_def.properties
        if self.current_tileset is not None:
            return self.current_tileset.properties
        if self.current_layer is not None:
            return self.current_layer.properties
        if self.group_stack:
            return self.group_stack[-1].properties
        return self.document.properties

    # ------------------------------------------------------------------ #
    # Event handlers
    # ------------------------------------------------------------------ #

    def _on_start(self, event: XmlEvent) -> None:
        name = event.name

        if self.state is ParseState.IDLE:
            if name != "map":
                raise TmxFormatError(f"Expected <map> root element, found <{name}>")
            read_map_header(self.document, self._reader(event))
            self.state = ParseState.IN_MAP
            log.debug(
                "Map header: %dx%d tiles of %dx%d px, orientation=%s",
                self.document.width,
                self.document.height,
                self.document.tile_width,
                self.document.tile_height,
                self.document.orientation,
            )
            return

        if self.state is ParseState.CLOSED:
            return

        if name == "property":
            if self._pending_property is not None:
                # Member of a class property; members are not expanded.
                self._skip_subtree(event)
                return
            self._pending_property = self._reader(event)
            self._pending_property_text = []
            return

        if name == "properties":
            return

        if self.current_tileset is not None:
            self._on_tileset_child(event)
            return

        if name == "tileset":
            self.current_tileset = build_tileset_node(self._reader(event), self.tileset_counter)
            self.document.tilesets.append(self.current_tileset)
            self.tileset_counter += 1
            return

        if name in LAYER_ELEMENTS:
            self._open_layer(event)
            return

        if name == "object":
            if self.state is not ParseState.IN_OBJECT_LAYER or self.current_layer is None:
                self.dropped_objects += 1
                self._orphan("object")
                self._skip_subtree(event)
                return
            self.current_object = build_object_node(self._reader(event))
            self.current_layer.objects.append(self.current_object)
            return

        if name in SHAPE_ELEMENTS and self.current_object is not None:
            self.current_object.shape = SHAPE_ELEMENTS[name]
            if name == "text":
                # Text content of a text object is not retained.
                self._skip_subtree(event)
            return

        if name == "data":
            if self.state is not ParseState.IN_TILE_LAYER or self.current_layer is None:
                self._orphan("data")
                self._skip_subtree(event)
                return
            check_data_encoding(self._reader(event))
            self.current_layer.data = TmxTileData()
            self.in_data = True
            self._data_parts = []
            return

        if name == "chunk" and self.in_data:
            self.current_chunk = build_chunk(self._reader(event))
            self.current_layer.data.chunks.append(self.current_chunk)  # type: ignore[union-attr]
            return

        if name == "tile" and self.in_data:
            raise UnsupportedEncodingError("XML <tile> encoded layer data is not supported")

        # Anything else (editorsettings, template references, polygon
        # point lists, image layer images, ...) carries nothing we store.
        self._skip_subtree(event)

    def _on_tileset_child(self, event: XmlEvent) -> None:
        name = event.name
        tileset = self.current_tileset

        if name == "image" and self.current_tile_def is None:
            apply_tileset_image(tileset, self._reader(event))  # type: ignore[arg-type]
            self._skip_subtree(event)
            return

        if name == "tile" and self.current_tile_def is None:
            self.current_tile_def = build_tile_definition(self._reader(event))
            tileset.tiles.append(self.current_tile_def)  # type: ignore[union-attr]
            return

        # Collision shapes, animations, wang sets, per-tile images, ...
        self._skip_subtree(event)

    def _open_layer(self, event: XmlEvent) -> None:
        layer = build_layer_node(event.name, self._reader(event))

        if self.group_stack:
            self.group_stack[-1].children.append(layer)
        else:
            self.document.layers.append(layer)

        if layer.kind == "group":
            self.group_stack.append(layer)
            return

        self.current_layer = layer
        self.state = _LAYER_STATES[layer.kind]
        log.debug("Opened %s layer %r", layer.kind, layer.name)

    def _on_text(self, event: XmlEvent) -> None:
        if self._pending_property is not None and event.name == "property":
            self._pending_property_text.append(event.text)
        elif self.current_chunk is not None and event.name == "chunk":
            self.current_chunk.csv += event.text
        elif self.in_data and event.name == "data":
            self._data_parts.append(event.text)

    def _on_end(self, event: XmlEvent) -> None:
        name = event.name

        if name == "property" and self._pending_property is not None:
            text = "".join(self._pending_property_text) or None
            self._property_owner().append(build_property_node(self._pending_property, text))
            self._pending_property = None
            self._pending_property_text = []
        elif name == "map":
            self.state = ParseState.CLOSED
        elif name == "tileset":
            self.current_tileset = None
            self.current_tile_def = None
        elif name == "tile" and self.current_tile_def is not None:
            self.current_tile_def = None
        elif name == "group" and self.group_stack:
            self.group_stack.pop()
        elif name in ("layer", "objectgroup", "imagelayer"):
            self.current_layer = None
            self.current_object = None
            self.in_data = False
            self.current_chunk = None
            self.state = ParseState.IN_MAP
        elif name == "object":
            self.current_object = None
        elif name == "chunk":
            self.current_chunk = None
        elif name == "data" and self.in_data:
            data = self.current_layer.data  # type: ignore[union-attr]
            if not data.chunks:
                data.csv = "".join(self._data_parts)
            self.in_data = False
            self._data_parts = []

    def _on_eof(self) -> None:
        if self.state is ParseState.IDLE:
            raise TmxFormatError("Document has no <map> element")
        self.state = ParseState.DONE
        if self.dropped_objects:
            log.info("Dropped %d object(s) outside of an object layer", self.dropped_objects)


def parse_tmx_stream(
    source: Union[str, bytes],
    options: Optional[LoadOptions] = None,
) -> TmxDocument:
    """Tokenize ``source`` and run the streaming state machine over it."""
    return StreamParser(options).parse(tokenize(source))
