# tests/test_build_tiles.py

from __future__ import annotations

import pytest

from tiled_tables.core.exceptions import AttributeValueError, NegativeCoordinateError, TmxFormatError
from tiled_tables.core.policies import MalformedAttributePolicy, NegativeCoordinatePolicy
from tiled_tables.loader import TmxChunk, TmxTileData
from tiled_tables.projection.build_tiles import (
    chunk_world_coordinates,
    decode_chunk,
    decode_finite,
    decode_gid,
    decode_tile_data,
    split_csv,
)


def _chunk_csv(cells: dict) -> str:
    values = [str(cells.get(i, 0)) for i in range(256)]
    return ",\n".join(",".join(values[r * 16 : r * 16 + 16]) for r in range(16))


def test_decode_gid_flags_and_mask() -> None:
    decoded = decode_gid(0xA0000005)
    assert decoded.gid == 5
    assert decoded.flip_h is True
    assert decoded.flip_v is False
    assert decoded.flip_d is True


def test_decode_gid_plain() -> None:
    decoded = decode_gid(7)
    assert (decoded.gid, decoded.flip_h, decoded.flip_v, decoded.flip_d) == (7, False, False, False)


def test_split_csv_skips_empty_fields() -> None:
    assert split_csv("1,2,\n0,3,\n") == [1, 2, 0, 3]
    assert split_csv("") == []
    assert split_csv(None) == []


def test_split_csv_malformed_cell_keeps_position() -> None:
    assert split_csv("1,x,3") == [1, 0, 3]
    assert split_csv("1,-4,3") == [1, 0, 3]
    assert split_csv("4294967296,2") == [0, 2]


def test_split_csv_strict_raises() -> None:
    with pytest.raises(AttributeValueError):
        split_csv("1,x,3", MalformedAttributePolicy.STRICT)


def test_decode_finite_row_major_layout_skips_zero() -> None:
    tiles = list(decode_finite([1, 2, 0, 3], width=2, height=2))
    assert [(t.x, t.y, t.gid) for t in tiles] == [(0, 0, 1), (1, 0, 2), (1, 1, 3)]


def test_decode_finite_zero_width_with_data_is_format_error() -> None:
    with pytest.raises(TmxFormatError):
        list(decode_finite([1], width=0))


def test_decode_finite_zero_width_without_data_is_fine() -> None:
    assert list(decode_finite([], width=0)) == []


def test_decode_finite_count_mismatch_still_wraps() -> None:
    tiles = list(decode_finite([1, 1, 1], width=2, height=2))
    assert [(t.x, t.y) for t in tiles] == [(0, 0), (1, 0), (0, 1)]


def test_chunk_world_coordinates() -> None:
    assert chunk_world_coordinates(1, 2, 3, 4) == (19, 36)
    assert chunk_world_coordinates(-1, 0, 0, 0) == (-16, 0)


def test_decode_chunk_places_tiles_in_world_space() -> None:
    chunk = TmxChunk(origin_x=1, origin_y=2, csv=_chunk_csv({4 * 16 + 3: 0x80000002}))
    tiles = list(decode_chunk(chunk))

    assert len(tiles) == 1
    tile = tiles[0]
    assert (tile.x, tile.y, tile.gid, tile.flip_h) == (19, 36, 2, True)


@pytest.fixture
def negative_chunk() -> TmxChunk:
    return TmxChunk(origin_x=-1, origin_y=0, csv=_chunk_csv({0: 3, 255: 1}))


def test_negative_chunk_rejected_by_default(negative_chunk) -> None:
    with pytest.raises(NegativeCoordinateError):
        list(decode_chunk(negative_chunk))


def test_negative_chunk_skipped(negative_chunk) -> None:
    assert list(decode_chunk(negative_chunk, NegativeCoordinatePolicy.SKIP)) == []


def test_negative_chunk_allowed(negative_chunk) -> None:
    tiles = list(decode_chunk(negative_chunk, NegativeCoordinatePolicy.ALLOW))
    assert [(t.x, t.y, t.gid) for t in tiles] == [(-16, 0, 3), (-1, 15, 1)]


def test_decode_tile_data_dispatches_on_chunks() -> None:
    finite = TmxTileData(csv="0,5")
    assert [(t.x, t.y) for t in decode_tile_data(finite, width=2)] == [(1, 0)]

    chunked = TmxTileData(chunks=[TmxChunk(0, 0, _chunk_csv({17: 4}))])
    assert [(t.x, t.y, t.gid) for t in decode_tile_data(chunked, width=0)] == [(1, 1, 4)]


def test_oversized_chunk_is_format_error() -> None:
    chunk = TmxChunk(origin_x=0, origin_y=0, csv=_chunk_csv({}) + ",7")
    with pytest.raises(TmxFormatError, match="257 cells"):
        list(decode_chunk(chunk))


def test_short_chunk_decodes_available_cells() -> None:
    chunk = TmxChunk(origin_x=0, origin_y=0, csv="0,2")
    assert [(t.x, t.y, t.gid) for t in decode_chunk(chunk)] == [(1, 0, 2)]
