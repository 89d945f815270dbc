"""
Tile-grid decoding.

A TMX grid cell stores a "GID with flags": the top three bits are flip
flags and the lower 29 bits reference a tile.

    bit 31  flip_h
    bit 30  flip_v
    bit 29  flip_d
    0..28   gid

A raw value of 0 means "no tile" and never yields a record.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from tiled_tables.core.exceptions import (
    AttributeValueError,
    NegativeCoordinateError,
    TmxFormatError,
)
from tiled_tables.core.policies import MalformedAttributePolicy, NegativeCoordinatePolicy
from tiled_tables.loader.elements import CHUNK_SIZE
from tiled_tables.loader.nodes import TmxChunk, TmxTileData
from tiled_tables.logging import get_logger

log = get_logger("build_tiles")

FLIP_H_FLAG = 0x80000000
FLIP_V_FLAG = 0x40000000
FLIP_D_FLAG = 0x20000000
GID_MASK = 0x1FFFFFFF
MAX_RAW_GID = 0xFFFFFFFF


@dataclass(frozen=True)
class DecodedGid:
    gid: int
    flip_h: bool = False
    flip_v: bool = False
    flip_d: bool = False


@dataclass(frozen=True)
class PlacedTile:
    """A decoded, non-empty cell at its grid (or world) coordinate."""

    x: int
    y: int
    gid: int
    flip_h: bool
    flip_v: bool
    flip_d: bool


def decode_gid(raw: int) -> DecodedGid:
    return DecodedGid(
        gid=raw & GID_MASK,
        flip_h=bool(raw & FLIP_H_FLAG),
        flip_v=bool(raw & FLIP_V_FLAG),
        flip_d=bool(raw & FLIP_D_FLAG),
    )


def split_csv(
    text: Optional[str],
    policy: MalformedAttributePolicy = MalformedAttributePolicy.USE_DEFAULT,
) -> List[int]:
    """
    Split CSV tile data into raw unsigned 32-bit values.

    Empty fields (line breaks, trailing commas) are not cells. A field that
    is not an unsigned 32-bit integer becomes 0 so later cells keep their
    position, or raises under the strict policy.
    """
    if not text:
        return []

    values: List[int] = []
    for field in text.split(","):
        field = field.strip()
        if not field:
            continue
        try:
            value = int(field)
        except ValueError:
            value = -1
        if 0 <= value <= MAX_RAW_GID:
            values.append(value)
            continue
        if policy is MalformedAttributePolicy.STRICT:
            raise AttributeValueError(f"Tile data cell {len(values)}: not a 32-bit GID: {field!r}")
        values.append(0)
    return values


def _placed(x: int, y: int, raw: int) -> PlacedTile:
    decoded = decode_gid(raw)
    return PlacedTile(x, y, decoded.gid, decoded.flip_h, decoded.flip_v, decoded.flip_d)


def decode_finite(
    raw_values: List[int],
    width: int,
    height: Optional[int] = None,
) -> Iterator[PlacedTile]:
    """
    Lay out a row-major grid: index i -> (i % width, i // width).

    Raises:
        TmxFormatError: when there is tile data but the map width is 0.
    """
    if not raw_values:
        return
    if width <= 0:
        raise TmxFormatError("Tile data present but the map width is 0")

    if height is not None and len(raw_values) != width * height:
        log.warning(
            "Tile data has %d cells, expected %d (%dx%d); rows wrap on the map width",
            len(raw_values),
            width * height,
            width,
            height,
        )

    for index, raw in enumerate(raw_values):
        if raw == 0:
            continue
        yield _placed(index % width, index // width, raw)


def chunk_world_coordinates(origin_x: int, origin_y: int, local_x: int, local_y: int) -> Tuple[int, int]:
    """World tile coordinate of a chunk-local cell; origins are in chunk units."""
    return origin_x * CHUNK_SIZE + local_x, origin_y * CHUNK_SIZE + local_y


def decode_chunk(
    chunk: TmxChunk,
    policy: NegativeCoordinatePolicy = NegativeCoordinatePolicy.REJECT,
    attribute_policy: MalformedAttributePolicy = MalformedAttributePolicy.USE_DEFAULT,
) -> Iterator[PlacedTile]:
    """
    Decode one 16x16 chunk into world-positioned tiles.

    Raises:
        NegativeCoordinateError: for a non-empty cell at a negative world
            coordinate under ``NegativeCoordinatePolicy.REJECT``.
        TmxFormatError: when the chunk holds more than 16x16 cells.
    """
    raw_values = split_csv(chunk.csv, attribute_policy)
    if len(raw_values) > CHUNK_SIZE * CHUNK_SIZE:
        raise TmxFormatError(
            f"Chunk ({chunk.origin_x}, {chunk.origin_y}) has {len(raw_values)} cells, "
            f"at most {CHUNK_SIZE * CHUNK_SIZE} fit"
        )

    for index, raw in enumerate(raw_values):
        if raw == 0:
            continue
        local_x, local_y = index % CHUNK_SIZE, index // CHUNK_SIZE
        world_x, world_y = chunk_world_coordinates(chunk.origin_x, chunk.origin_y, local_x, local_y)

        if world_x < 0 or world_y < 0:
            if policy is NegativeCoordinatePolicy.REJECT:
                raise NegativeCoordinateError(
                    f"Chunk ({chunk.origin_x}, {chunk.origin_y}) places a tile at "
                    f"negative world coordinate ({world_x}, {world_y})"
                )
            if policy is NegativeCoordinatePolicy.SKIP:
                log.debug("Skipping tile at negative coordinate (%d, %d)", world_x, world_y)
                continue

        yield _placed(world_x, world_y, raw)


def decode_tile_data(
    data: TmxTileData,
    width: int,
    height: Optional[int] = None,
    negative_policy: NegativeCoordinatePolicy = NegativeCoordinatePolicy.REJECT,
    attribute_policy: MalformedAttributePolicy = MalformedAttributePolicy.USE_DEFAULT,
) -> Iterator[PlacedTile]:
    """Decode the ``<data>`` of one tile layer, finite or chunked."""
    if data.is_chunked:
        for chunk in data.chunks:
            yield from decode_chunk(chunk, negative_policy, attribute_policy)
        return

    yield from decode_finite(split_csv(data.csv, attribute_policy), width, height)
