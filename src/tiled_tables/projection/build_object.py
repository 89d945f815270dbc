from __future__ import annotations

from tiled_tables.loader.nodes import TmxObjectNode
from tiled_tables.projection.records import ObjectRecord

SHAPES = ("rectangle", "ellipse", "point", "polygon", "polyline", "text")

# Shapes whose extent is carried by a point list (or nothing), not width/height.
_SIZELESS_SHAPES = ("point", "polygon", "polyline")


def infer_shape(node: TmxObjectNode) -> str:
    """
    Explicit shape elements win; otherwise an object without size is a
    point and anything else a rectangle.
    """
    if node.shape in SHAPES:
        return node.shape  # type: ignore[return-value]
    if node.width == 0.0 and node.height == 0.0:
        return "point"
    return "rectangle"


def build_object(node: TmxObjectNode, object_id: int, layer_id: int) -> ObjectRecord:
    """
    Build an ObjectRecord from an object node.

    PURE FUNCTION:
      - no id allocation
      - no property handling
    """
    shape = infer_shape(node)
    width, height = node.width, node.height
    if shape in _SIZELESS_SHAPES:
        width, height = 0.0, 0.0

    return ObjectRecord(
        object_id=object_id,
        layer_id=layer_id,
        name=node.name,
        obj_type=node.obj_type,
        x=node.x,
        y=node.y,
        width=width,
        height=height,
        rotation=node.rotation,
        visible=node.visible,
        shape=shape,
    )
