# src/tiled_tables/loader/tree_builder.py

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Optional, Union

from tiled_tables.core.exceptions import (
    TmxFormatError,
    TmxStructureError,
    TmxSyntaxError,
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
    merge_external_tileset,
    read_map_header,
)
from tiled_tables.loader.nodes import (
    TmxDocument,
    TmxLayerNode,
    TmxPropertyNode,
    TmxTileData,
    TmxTilesetNode,
)
from tiled_tables.loader.properties import build_property_node
from tiled_tables.logging import get_logger

log = get_logger("tree_builder")


def parse_element_tree(source: Union[str, bytes]) -> ET.Element:
    """
    Parse TMX text into an ElementTree root.

    Raises:
        TmxSyntaxError: for malformed XML.
    """
    try:
        return ET.fromstring(source)
    except ET.ParseError as exc:
        position = getattr(exc, "position", None)
        raise TmxSyntaxError(
            f"XML parse error: {exc}", lineno=position[0] if position else None
        ) from exc


def _text(elem: ET.Element) -> str:
    """Element text, or "" when it is only whitespace."""
    text = elem.text
    return text if text and text.strip() else ""


class TreeBuilder:
    """
    Build a TmxDocument from an already-parsed ``<map>`` element.

    Unlike the streaming front-end this walks a complete element tree, so it
    can look ahead (children of ``<object>``) and resolve external ``.tsx``
    tilesets relative to ``base_dir``.
    """

    def __init__(
        self,
        options: Optional[LoadOptions] = None,
        base_dir: Optional[Union[str, Path]] = None,
    ):
        self.options = options or LoadOptions()
        self.base_dir = Path(base_dir) if base_dir is not None else None

    def _reader(self, elem: ET.Element) -> AttributeReader:
        return AttributeReader(elem.attrib, self.options.malformed_attribute, element=elem.tag)

    # ------------------------------------------------------------------ #
    # Properties
    # ------------------------------------------------------------------ #

    def _properties(self, elem: ET.Element) -> List[TmxPropertyNode]:
        props_elem = elem.find("properties")
        if props_elem is None:
            return []
        nodes = []
        for prop_elem in props_elem.findall("property"):
            text = prop_elem.text if prop_elem.text and prop_elem.text.strip() else None
            nodes.append(build_property_node(self._reader(prop_elem), text))
        return nodes

    # ------------------------------------------------------------------ #
    # Tilesets
    # ------------------------------------------------------------------ #

    def _fill_tileset(self, tileset: TmxTilesetNode, elem: ET.Element) -> None:
        tileset.properties.extend(self._properties(elem))

        img_elem = elem.find("image")
        if img_elem is not None:
            apply_tileset_image(tileset, self._reader(img_elem))

        for tile_elem in elem.findall("tile"):
            tile_def = build_tile_definition(self._reader(tile_elem))
            tile_def.properties.extend(self._properties(tile_elem))
            tileset.tiles.append(tile_def)

    def load_external_tileset(self, tileset: TmxTilesetNode) -> None:
        if self.base_dir is None:
            log.warning(
                "Tileset %r references %s but no base directory is known; storing the reference only",
                tileset.index,
                tileset.source,
            )
            return

        path = self.base_dir / tileset.source  # type: ignore[operator]
        if not path.is_file():
            log.warning("External tileset not found: %s", path)
            return

        root = parse_element_tree(path.read_bytes())
        if root.tag != "tileset":
            raise TmxFormatError(f"{path}: expected <tileset> root element, found <{root.tag}>")

        merge_external_tileset(tileset, self._reader(root))
        self._fill_tileset(tileset, root)
        log.debug("Loaded external tileset %r from %s", tileset.name, path)

    def _build_tileset(self, elem: ET.Element, index: int) -> TmxTilesetNode:
        tileset = build_tileset_node(self._reader(elem), index)
        if tileset.source:
            self.load_external_tileset(tileset)
        else:
            self._fill_tileset(tileset, elem)
        return tileset

    # ------------------------------------------------------------------ #
    # Layers
    # ------------------------------------------------------------------ #

    def _build_tile_data(self, elem: ET.Element) -> TmxTileData:
        check_data_encoding(self._reader(elem))

        if elem.find("tile") is not None:
            raise UnsupportedEncodingError("XML <tile> encoded layer data is not supported")

        data = TmxTileData()
        for chunk_elem in elem.findall("chunk"):
            chunk = build_chunk(self._reader(chunk_elem))
            chunk.csv = _text(chunk_elem)
            data.chunks.append(chunk)

        if not data.chunks:
            data.csv = _text(elem)
        return data

    def _build_object_layer_objects(self, layer: TmxLayerNode, elem: ET.Element) -> None:
        for obj_elem in elem.findall("object"):
            obj = build_object_node(self._reader(obj_elem))
            for child in obj_elem:
                if child.tag in SHAPE_ELEMENTS:
                    obj.shape = SHAPE_ELEMENTS[child.tag]
            obj.properties.extend(self._properties(obj_elem))
            layer.objects.append(obj)

    def _check_orphans(self, layer: TmxLayerNode, elem: ET.Element) -> None:
        if layer.kind != "object" and elem.find("object") is not None:
            self._orphan("object")
        if layer.kind != "tile" and elem.find("data") is not None:
            self._orphan("data")

    def _orphan(self, what: str) -> None:
        if self.options.orphan is OrphanPolicy.STRICT:
            raise TmxStructureError(f"<{what}> outside of a layer that can hold it")
        log.debug("Dropping <%s> outside of an open layer", what)

    def _build_layer(self, elem: ET.Element) -> TmxLayerNode:
        layer = build_layer_node(elem.tag, self._reader(elem))
        layer.properties.extend(self._properties(elem))
        self._check_orphans(layer, elem)

        if layer.kind == "tile":
            data_elem = elem.find("data")
            if data_elem is not None:
                layer.data = self._build_tile_data(data_elem)

        elif layer.kind == "object":
            self._build_object_layer_objects(layer, elem)

        elif layer.kind == "group":
            for child in elem:
                if child.tag in LAYER_ELEMENTS:
                    layer.children.append(self._build_layer(child))

        return layer

    # ------------------------------------------------------------------ #
    # Map
    # ------------------------------------------------------------------ #

    def build(self, root: ET.Element) -> TmxDocument:
        if root.tag != "map":
            raise TmxFormatError(f"Expected <map> root element, found <{root.tag}>")

        doc = TmxDocument()
        read_map_header(doc, self._reader(root))
        doc.properties.extend(self._properties(root))

        tileset_index = 0
        for child in root:
            if child.tag == "tileset":
                doc.tilesets.append(self._build_tileset(child, tileset_index))
                tileset_index += 1
            elif child.tag in LAYER_ELEMENTS:
                doc.layers.append(self._build_layer(child))
            elif child.tag == "object":
                self._orphan("object")

        log.debug(
            "Built document tree: %d tileset(s), %d top-level layer(s)",
            len(doc.tilesets),
            len(doc.layers),
        )
        return doc


def build_tree(
    source: Union[str, bytes],
    options: Optional[LoadOptions] = None,
    base_dir: Optional[Union[str, Path]] = None,
) -> TmxDocument:
    """
    Parse TMX text with ElementTree and build a TmxDocument.

        text -> ET.Element -> TmxDocument
    """
    return TreeBuilder(options, base_dir=base_dir).build(parse_element_tree(source))
