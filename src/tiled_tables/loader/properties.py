# src/tiled_tables/loader/properties.py

from __future__ import annotations

from typing import Optional

from tiled_tables.core.policies import MalformedAttributePolicy
from tiled_tables.loader.attributes import AttributeReader
from tiled_tables.loader.nodes import TmxPropertyNode

PROPERTY_KINDS = ("string", "int", "float", "bool", "color", "file", "object", "class")


def build_property_node(
    reader: AttributeReader,
    text: Optional[str] = None,
) -> TmxPropertyNode:
    """
    Convert the attributes (and optional text body) of a ``<property>``
    element into a typed TmxPropertyNode.

    Multi-line string properties carry their value as element text instead
    of a ``value`` attribute; ``text`` is used when ``value`` is absent.
    Class properties keep ``value=None``; their members are not expanded.
    """
    name = reader.get_str("name")
    kind = reader.get_str("type", "string") or "string"
    if kind not in PROPERTY_KINDS:
        kind = "string"

    raw = reader.get_optional_str("value")
    if raw is None:
        raw = text or ""

    if kind == "class":
        return TmxPropertyNode(name=name, kind=kind, value=None)

    if kind in ("string", "file"):
        return TmxPropertyNode(name=name, kind=kind, value=raw)

    if kind == "bool":
        return TmxPropertyNode(name=name, kind=kind, value=raw.strip().lower() in ("true", "1"))

    # Re-use the reader's tolerant numeric parsing on the resolved value.
    value_reader = AttributeReader({"value": raw}, reader.policy, element="property")

    if kind in ("int", "object"):
        return TmxPropertyNode(name=name, kind=kind, value=value_reader.get_int("value", 0))

    if kind == "float":
        return TmxPropertyNode(name=name, kind=kind, value=value_reader.get_float("value", 0.0))

    # color
    if not raw.strip():
        return TmxPropertyNode(name=name, kind=kind, value=None)
    return TmxPropertyNode(name=name, kind=kind, value=value_reader.get_color("value"))


def property_from_attrs(
    attrs,
    policy: MalformedAttributePolicy = MalformedAttributePolicy.USE_DEFAULT,
    text: Optional[str] = None,
) -> TmxPropertyNode:
    return build_property_node(AttributeReader(attrs, policy, element="property"), text)


__all__ = ["PROPERTY_KINDS", "build_property_node", "property_from_attrs"]
