# tests/test_build_properties.py

from __future__ import annotations

import pytest

from tiled_tables.core.exceptions import AttributeValueError
from tiled_tables.loader import TmxColor, TmxPropertyNode
from tiled_tables.loader.properties import property_from_attrs
from tiled_tables.projection.build_properties import (
    build_property,
    decode_property_value,
    encode_property,
)


@pytest.mark.parametrize(
    "node, expected",
    [
        (TmxPropertyNode("a", "bool", True), ("true", "bool")),
        (TmxPropertyNode("a", "bool", False), ("false", "bool")),
        (TmxPropertyNode("a", "float", 0.1), ("0.1", "float")),
        (TmxPropertyNode("a", "int", -42), ("-42", "int")),
        (TmxPropertyNode("a", "color", TmxColor(0x33, 0x66, 0x99, 0x80)), ("#33669980", "color")),
        (TmxPropertyNode("a", "color", None), ("", "color")),
        (TmxPropertyNode("a", "string", "hello world"), ("hello world", "string")),
        (TmxPropertyNode("a", "file", "../sfx/jump.wav"), ("../sfx/jump.wav", "file")),
        (TmxPropertyNode("a", "object", 12), ("12", "object")),
        (TmxPropertyNode("a", "class", None), ("", "class")),
    ],
)
def test_encode_property(node, expected) -> None:
    assert encode_property(node) == expected


def test_encodings_round_trip() -> None:
    nodes = [
        TmxPropertyNode("a", "bool", True),
        TmxPropertyNode("a", "float", 1.0 / 3.0),
        TmxPropertyNode("a", "int", 7),
        TmxPropertyNode("a", "color", TmxColor(1, 2, 3, 4)),
        TmxPropertyNode("a", "color", None),
        TmxPropertyNode("a", "string", "x,y"),
        TmxPropertyNode("a", "object", 3),
        TmxPropertyNode("a", "class", None),
    ]
    for node in nodes:
        value, value_type = encode_property(node)
        assert decode_property_value(value, value_type) == node.value


def test_decode_rejects_mismatched_value() -> None:
    with pytest.raises(AttributeValueError):
        decode_property_value("abc", "int")


def test_property_from_attrs_kinds() -> None:
    assert property_from_attrs({"name": "n", "type": "bool", "value": "true"}).value is True
    assert property_from_attrs({"name": "n", "type": "int", "value": "oops"}).value == 0
    assert property_from_attrs({"name": "n", "type": "color", "value": "#ff102030"}).value == TmxColor(
        0x10, 0x20, 0x30, 0xFF
    )
    assert property_from_attrs({"name": "n", "type": "color", "value": ""}).value is None


def test_unknown_kind_is_string() -> None:
    node = property_from_attrs({"name": "n", "type": "vector3", "value": "1,2,3"})
    assert (node.kind, node.value) == ("string", "1,2,3")


def test_build_property_record() -> None:
    record = build_property(TmxPropertyNode("hp", "int", 10), 4, "object", 9)
    assert (record.property_id, record.parent_type, record.parent_id) == (4, "object", 9)
    assert (record.key, record.value, record.value_type) == ("hp", "10", "int")


def test_build_property_rejects_unknown_parent() -> None:
    with pytest.raises(ValueError):
        build_property(TmxPropertyNode("x"), 0, "chunk", 0)
