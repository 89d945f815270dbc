# src/tiled_tables/loader/nodes.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional


@dataclass(frozen=True)
class TmxColor:
    """An RGBA color; TMX writes these as ``#AARRGGBB`` or ``#RRGGBB``."""

    red: int
    green: int
    blue: int
    alpha: int = 255

    def to_hex(self) -> str:
        """Return ``#rrggbbaa`` (red, green, blue, alpha)."""
        return f"#{self.red:02x}{self.green:02x}{self.blue:02x}{self.alpha:02x}"


@dataclass
class TmxPropertyNode:
    """
    A ``<property>`` element after type conversion.

    Attributes:
        name: Property key.
        kind: TMX type attribute (string, int, float, bool, color, file,
            object, class). Unknown kinds are normalized to ``string``.
        value: The converted Python value (``TmxColor`` for colors, ``None``
            for class properties and unset colors).
    """

    name: str
    kind: str = "string"
    value: Any = None


@dataclass
class TmxChunk:
    """
    One ``<chunk>`` of an infinite tile layer.

    ``origin_x`` / ``origin_y`` are in chunk units (tile offset // 16).
    """

    origin_x: int
    origin_y: int
    csv: str = ""


@dataclass
class TmxTileData:
    """The ``<data>`` payload of a tile layer: plain CSV or a list of chunks."""

    csv: Optional[str] = None
    chunks: List[TmxChunk] = field(default_factory=list)

    @property
    def is_chunked(self) -> bool:
        return bool(self.chunks)


@dataclass
class TmxObjectNode:
    name: str = ""
    obj_type: str = ""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    rotation: float = 0.0
    visible: bool = True
    # Set from a shape child element; None means "infer from size".
    shape: Optional[str] = None
    properties: List[TmxPropertyNode] = field(default_factory=list)


@dataclass
class TmxTileDefinition:
    """A ``<tile id=...>`` entry inside a tileset (carries tile properties)."""

    local_id: int
    properties: List[TmxPropertyNode] = field(default_factory=list)


@dataclass
class TmxTilesetNode:
    index: int
    first_gid: int = 1
    name: str = ""
    tile_width: int = 0
    tile_height: int = 0
    tile_count: int = 0
    columns: int = 0
    image_source: Optional[str] = None
    image_width: Optional[int] = None
    image_height: Optional[int] = None
    source: Optional[str] = None
    properties: List[TmxPropertyNode] = field(default_factory=list)
    tiles: List[TmxTileDefinition] = field(default_factory=list)


@dataclass
class TmxLayerNode:
    """
    A layer of any kind. ``children`` is only populated for ``group`` layers;
    ``data`` only for ``tile`` layers and ``objects`` only for ``object`` layers.
    """

    kind: str
    name: str = ""
    visible: bool = True
    opacity: float = 1.0
    offset_x: int = 0
    offset_y: int = 0
    data: Optional[TmxTileData] = None
    objects: List[TmxObjectNode] = field(default_factory=list)
    children: List["TmxLayerNode"] = field(default_factory=list)
    properties: List[TmxPropertyNode] = field(default_factory=list)

    def iter_subtree(self) -> Iterator["TmxLayerNode"]:
        """Yield this layer and every nested layer in document order."""
        yield self
        for child in self.children:
            yield from child.iter_subtree()


@dataclass
class TmxDocument:
    """
    Front-end neutral representation of one TMX map.

    Both the streaming state machine and the element-tree builder produce
    this structure; the projector turns it into relational records.
    """

    width: int = 0
    height: int = 0
    tile_width: int = 0
    tile_height: int = 0
    orientation: str = "orthogonal"
    background_color: Optional[TmxColor] = None
    infinite: bool = False
    tilesets: List[TmxTilesetNode] = field(default_factory=list)
    layers: List[TmxLayerNode] = field(default_factory=list)
    properties: List[TmxPropertyNode] = field(default_factory=list)

    def iter_layers(self) -> Iterator[TmxLayerNode]:
        """Every layer, groups included, depth-first in document order."""
        for layer in self.layers:
            yield from layer.iter_subtree()

    def __repr__(self) -> str:  # pragma: no cover - cosmetic
        return (
            f"<TmxDocument {self.width}x{self.height} "
            f"tilesets={len(self.tilesets)} layers={len(self.layers)}>"
        )
