from __future__ import annotations

from typing import Any, Optional, Tuple

from tiled_tables.core.exceptions import AttributeValueError
from tiled_tables.loader.attributes import parse_color
from tiled_tables.loader.nodes import TmxColor, TmxPropertyNode
from tiled_tables.projection.records import PropertyRecord

PARENT_TYPES = ("map", "layer", "tile", "object", "tileset")


def encode_property(node: TmxPropertyNode) -> Tuple[str, str]:
    """
    Encode a typed property node as ``(value_string, value_type)``.

        bool    -> "true" / "false"
        float   -> repr(float)
        int     -> decimal
        color   -> "#rrggbbaa", "" when unset
        string  -> verbatim
        file    -> verbatim
        object  -> decimal id
        class   -> ""
    """
    kind = node.kind
    value = node.value

    if kind == "bool":
        return ("true" if value else "false"), kind

    if kind == "float":
        return repr(float(value or 0.0)), kind

    if kind in ("int", "object"):
        return str(int(value or 0)), kind

    if kind == "color":
        if isinstance(value, TmxColor):
            return value.to_hex(), kind
        return "", kind

    if kind == "class":
        return "", kind

    # string, file
    return ("" if value is None else str(value)), kind


def decode_property_value(value: str, value_type: str) -> Any:
    """
    Reverse ``encode_property``: turn a stored value string back into a
    Python value.

    Colors come back as ``TmxColor`` (``None`` when unset); class
    properties decode to ``None``.

    Raises:
        AttributeValueError: when ``value`` does not match ``value_type``.
    """
    try:
        if value_type == "bool":
            return value == "true"
        if value_type == "float":
            return float(value)
        if value_type in ("int", "object"):
            return int(value)
        if value_type == "color":
            return _decode_color(value)
    except ValueError as exc:
        raise AttributeValueError(f"Cannot decode {value!r} as {value_type}") from exc

    if value_type == "class":
        return None
    return value


def _decode_color(value: str) -> Optional[TmxColor]:
    if not value:
        return None
    text = value.lstrip("#")
    if len(text) != 8:
        raise ValueError(value)
    # Stored as #rrggbbaa; parse_color reads TMX's #aarrggbb.
    return parse_color("#" + text[6:8] + text[0:6])


def build_property(
    node: TmxPropertyNode,
    property_id: int,
    parent_type: str,
    parent_id: int,
) -> PropertyRecord:
    """Build a PropertyRecord. PURE FUNCTION (no id allocation)."""
    if parent_type not in PARENT_TYPES:
        raise ValueError(f"Unknown property parent type: {parent_type}")

    value, value_type = encode_property(node)
    return PropertyRecord(
        property_id=property_id,
        parent_type=parent_type,
        parent_id=parent_id,
        key=node.name,
        value=value,
        value_type=value_type,
    )
