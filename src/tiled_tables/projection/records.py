from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, ClassVar, Dict, Iterator, List, Optional, Tuple


# -----------------------------
# Table names
# -----------------------------

MAP_TABLE = "tiled_map"
LAYER_TABLE = "tiled_layer"
TILESET_TABLE = "tiled_tileset"
TILE_TABLE = "tiled_tile"
OBJECT_TABLE = "tiled_object"
PROPERTY_TABLE = "tiled_property"

# Allocation kind -> table. Kinds are what IdAllocator.next_id() receives.
TABLE_FOR_KIND: Dict[str, str] = {
    "map": MAP_TABLE,
    "layer": LAYER_TABLE,
    "tileset": TILESET_TABLE,
    "tile": TILE_TABLE,
    "object": OBJECT_TABLE,
    "property": PROPERTY_TABLE,
}

# Commit order; parents before children.
TABLES: Tuple[str, ...] = (
    MAP_TABLE,
    TILESET_TABLE,
    LAYER_TABLE,
    TILE_TABLE,
    OBJECT_TABLE,
    PROPERTY_TABLE,
)


class _Record:
    __slots__ = ()

    TABLE: ClassVar[str]
    KEY: ClassVar[str]

    @property
    def primary_key(self) -> int:
        return getattr(self, self.KEY)

    def to_row(self) -> Dict[str, Any]:
        return asdict(self)  # type: ignore[call-overload]


# -----------------------------
# Records
# -----------------------------

@dataclass(slots=True)
class MapRecord(_Record):
    TABLE: ClassVar[str] = MAP_TABLE
    KEY: ClassVar[str] = "map_id"

    map_id: int
    name: str
    width: int = 0
    height: int = 0
    tile_width: int = 0
    tile_height: int = 0
    orientation: str = "orthogonal"
    background_color: Optional[str] = None
    infinite: bool = False


@dataclass(slots=True)
class LayerRecord(_Record):
    TABLE: ClassVar[str] = LAYER_TABLE
    KEY: ClassVar[str] = "layer_id"

    layer_id: int
    map_id: int
    name: str = ""
    kind: str = "tile"
    visible: bool = True
    opacity: float = 1.0
    offset_x: int = 0
    offset_y: int = 0
    z_order: int = 0
    parent_layer_id: Optional[int] = None


@dataclass(slots=True)
class TilesetRecord(_Record):
    TABLE: ClassVar[str] = TILESET_TABLE
    KEY: ClassVar[str] = "tileset_id"

    tileset_id: int
    map_id: int
    tileset_index: int
    name: str = ""
    first_gid: int = 1
    tile_width: int = 0
    tile_height: int = 0
    tile_count: int = 0
    columns: int = 0
    image_source: Optional[str] = None
    image_width: Optional[int] = None
    image_height: Optional[int] = None
    source: Optional[str] = None


@dataclass(slots=True)
class TileRecord(_Record):
    """One placed tile. ``gid`` is always the 29-bit masked id, never 0."""

    TABLE: ClassVar[str] = TILE_TABLE
    KEY: ClassVar[str] = "tile_id"

    tile_id: int
    layer_id: int
    x: int
    y: int
    gid: int
    flip_h: bool = False
    flip_v: bool = False
    flip_d: bool = False


@dataclass(slots=True)
class ObjectRecord(_Record):
    TABLE: ClassVar[str] = OBJECT_TABLE
    KEY: ClassVar[str] = "object_id"

    object_id: int
    layer_id: int
    name: str = ""
    obj_type: str = ""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    rotation: float = 0.0
    visible: bool = True
    shape: str = "rectangle"


@dataclass(slots=True)
class PropertyRecord(_Record):
    """
    A custom property attached to another record via (parent_type, parent_id).

    For ``parent_type == "tile"`` the parent id is the tile's global id, which
    matches ``TileRecord.gid`` rather than a ``tile_id``.
    """

    TABLE: ClassVar[str] = PROPERTY_TABLE
    KEY: ClassVar[str] = "property_id"

    property_id: int
    parent_type: str
    parent_id: int
    key: str
    value: str = ""
    value_type: str = "string"


RECORD_TYPES = {
    MAP_TABLE: MapRecord,
    LAYER_TABLE: LayerRecord,
    TILESET_TABLE: TilesetRecord,
    TILE_TABLE: TileRecord,
    OBJECT_TABLE: ObjectRecord,
    PROPERTY_TABLE: PropertyRecord,
}


# -----------------------------
# Batch
# -----------------------------

@dataclass(slots=True)
class RecordBatch:
    """
    Every record produced by one load, in emission order per table.

    A batch is committed to a sink in one atomic call.
    """

    map_id: Optional[int] = None
    rows: Dict[str, List[_Record]] = field(
        default_factory=lambda: {table: [] for table in TABLES}
    )

    def add(self, record: _Record) -> None:
        self.rows[record.TABLE].append(record)

    def __len__(self) -> int:
        return sum(len(records) for records in self.rows.values())

    def iter_records(self) -> Iterator[_Record]:
        """Records in commit order (parents before children)."""
        for table in TABLES:
            yield from self.rows[table]

    def counts(self) -> Dict[str, int]:
        return {table: len(records) for table, records in self.rows.items()}

    @property
    def maps(self) -> List[MapRecord]:
        return self.rows[MAP_TABLE]  # type: ignore[return-value]

    @property
    def layers(self) -> List[LayerRecord]:
        return self.rows[LAYER_TABLE]  # type: ignore[return-value]

    @property
    def tilesets(self) -> List[TilesetRecord]:
        return self.rows[TILESET_TABLE]  # type: ignore[return-value]

    @property
    def tiles(self) -> List[TileRecord]:
        return self.rows[TILE_TABLE]  # type: ignore[return-value]

    @property
    def objects(self) -> List[ObjectRecord]:
        return self.rows[OBJECT_TABLE]  # type: ignore[return-value]

    @property
    def properties(self) -> List[PropertyRecord]:
        return self.rows[PROPERTY_TABLE]  # type: ignore[return-value]
