from __future__ import annotations

from typing import Optional

from tiled_tables.loader.nodes import TmxLayerNode
from tiled_tables.projection.records import LayerRecord

LAYER_KINDS = ("tile", "object", "image", "group")


def build_layer(
    node: TmxLayerNode,
    layer_id: int,
    map_id: int,
    z_order: int,
    parent_layer_id: Optional[int] = None,
) -> LayerRecord:
    """
    Build a LayerRecord.

    PURE FUNCTION:
      - z_order is decided by the caller (see ZOrderPolicy)
      - tiles and objects are emitted separately
    """
    if node.kind not in LAYER_KINDS:
        raise ValueError(f"Unknown layer kind: {node.kind}")

    return LayerRecord(
        layer_id=layer_id,
        map_id=map_id,
        name=node.name,
        kind=node.kind,
        visible=node.visible,
        opacity=node.opacity,
        offset_x=node.offset_x,
        offset_y=node.offset_y,
        z_order=z_order,
        parent_layer_id=parent_layer_id,
    )
