# tests/test_attributes.py

from __future__ import annotations

import pytest

from tiled_tables.core.exceptions import AttributeValueError
from tiled_tables.core.policies import MalformedAttributePolicy
from tiled_tables.loader import AttributeReader, TmxColor, parse_color

STRICT = MalformedAttributePolicy.STRICT


def test_missing_attributes_use_caller_defaults() -> None:
    reader = AttributeReader({})
    assert reader.get_str("name") == ""
    assert reader.get_int("width") == 0
    assert reader.get_float("opacity", 1.0) == 1.0
    assert reader.get_bool("visible") is True
    assert reader.get_optional_str("source") is None
    assert reader.get_optional_int("width") is None
    assert reader.get_color("backgroundcolor") is None


def test_missing_attributes_are_not_errors_in_strict_mode() -> None:
    reader = AttributeReader({}, STRICT)
    assert reader.get_int("width", 7) == 7
    assert reader.get_float("x") == 0.0


def test_bool_is_true_unless_literal_zero() -> None:
    reader = AttributeReader({"a": "0", "b": "true", "c": "1", "d": "false"})
    assert reader.get_bool("a") is False
    assert reader.get_bool("b") is True
    assert reader.get_bool("c") is True
    # Only the literal "0" is false.
    assert reader.get_bool("d") is True


def test_malformed_numbers_fall_back_to_defaults() -> None:
    reader = AttributeReader({"width": "abc", "opacity": "abc", "x": "nan"})
    assert reader.get_int("width") == 0
    assert reader.get_float("opacity", 1.0) == 1.0
    assert reader.get_float("x") == 0.0


def test_strict_policy_raises_on_malformed_int() -> None:
    reader = AttributeReader({"width": "abc"}, STRICT, element="map")
    with pytest.raises(AttributeValueError) as excinfo:
        reader.get_int("width")
    assert "<map>" in str(excinfo.value)


def test_truncated_int_reads_decimals() -> None:
    reader = AttributeReader({"offsetx": "12.7", "offsety": "-3.9"})
    assert reader.get_truncated_int("offsetx") == 12
    assert reader.get_truncated_int("offsety") == -3


def test_parse_color_argb_and_rgb() -> None:
    assert parse_color("#80336699") == TmxColor(red=0x33, green=0x66, blue=0x99, alpha=0x80)
    assert parse_color("336699") == TmxColor(red=0x33, green=0x66, blue=0x99, alpha=255)
    assert parse_color("#80336699").to_hex() == "#33669980"


def test_parse_color_rejects_other_lengths() -> None:
    with pytest.raises(ValueError):
        parse_color("#123")


def test_malformed_color_is_none_or_strict_error() -> None:
    assert AttributeReader({"c": "#zz"}).get_color("c") is None
    with pytest.raises(AttributeValueError):
        AttributeReader({"c": "#zz"}, STRICT).get_color("c")
