from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from tiled_tables.core.policies import LoadOptions, ZOrderPolicy
from tiled_tables.loader.nodes import TmxDocument, TmxLayerNode, TmxPropertyNode
from tiled_tables.logging import get_logger
from tiled_tables.projection.build_layer import build_layer
from tiled_tables.projection.build_map import build_map
from tiled_tables.projection.build_object import build_object
from tiled_tables.projection.build_properties import build_property
from tiled_tables.projection.build_tileset import build_tileset
from tiled_tables.projection.build_tiles import decode_tile_data
from tiled_tables.projection.records import RecordBatch, TileRecord

if TYPE_CHECKING:
    from tiled_tables.identity.allocators import IdAllocator

log = get_logger("build_records")


class _Projection:
    """
    One projection run. Holds the allocator, the policies and the batch
    being filled; ids are requested in document order.
    """

    def __init__(
        self,
        document: TmxDocument,
        allocator: IdAllocator,
        options: LoadOptions,
        z_order: ZOrderPolicy,
    ):
        self.document = document
        self.allocator = allocator
        self.options = options
        self.z_order = z_order
        self.batch = RecordBatch()
        self.map_id: int = -1
        self._layer_index = 0

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _properties(self, nodes: List[TmxPropertyNode], parent_type: str, parent_id: int) -> None:
        for node in nodes:
            property_id = self.allocator.next_id("property")
            self.batch.add(build_property(node, property_id, parent_type, parent_id))

    # ------------------------------------------------------------------
    # Entities
    # ------------------------------------------------------------------

    def _map(self, map_name: str) -> None:
        self.map_id = self.allocator.next_id("map")
        self.batch.map_id = self.map_id
        self.batch.add(build_map(self.document, self.map_id, map_name))
        self._properties(self.document.properties, "map", self.map_id)

    def _tilesets(self) -> None:
        for node in self.document.tilesets:
            tileset_id = self.allocator.next_id("tileset")
            self.batch.add(build_tileset(node, tileset_id, self.map_id))
            self._properties(node.properties, "tileset", tileset_id)

            # Tile properties join on the global id (TileRecord.gid).
            for tile_def in node.tiles:
                self._properties(tile_def.properties, "tile", node.first_gid + tile_def.local_id)

    def _tiles(self, node: TmxLayerNode, layer_id: int) -> None:
        if node.data is None:
            return

        placed = decode_tile_data(
            node.data,
            self.document.width,
            self.document.height,
            negative_policy=self.options.negative_coordinates,
            attribute_policy=self.options.malformed_attribute,
        )
        for tile in placed:
            self.batch.add(
                TileRecord(
                    tile_id=self.allocator.next_id("tile"),
                    layer_id=layer_id,
                    x=tile.x,
                    y=tile.y,
                    gid=tile.gid,
                    flip_h=tile.flip_h,
                    flip_v=tile.flip_v,
                    flip_d=tile.flip_d,
                )
            )

    def _objects(self, node: TmxLayerNode, layer_id: int) -> None:
        for obj in node.objects:
            object_id = self.allocator.next_id("object")
            self.batch.add(build_object(obj, object_id, layer_id))
            self._properties(obj.properties, "object", object_id)

    def _layer(self, node: TmxLayerNode, parent_layer_id: Optional[int]) -> None:
        layer_id = self.allocator.next_id("layer")
        if self.z_order is ZOrderPolicy.LAYER_ID:
            z_order = layer_id
        else:
            z_order = self._layer_index
        self._layer_index += 1

        self.batch.add(build_layer(node, layer_id, self.map_id, z_order, parent_layer_id))
        self._properties(node.properties, "layer", layer_id)

        if node.kind == "tile":
            self._tiles(node, layer_id)
        elif node.kind == "object":
            self._objects(node, layer_id)
        elif node.kind == "group":
            for child in node.children:
                self._layer(child, layer_id)

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------

    def run(self, map_name: str) -> RecordBatch:
        self._map(map_name)
        self._tilesets()
        for layer in self.document.layers:
            self._layer(layer, None)
        return self.batch


def project_document(
    map_name: str,
    document: TmxDocument,
    allocator: IdAllocator,
    options: Optional[LoadOptions] = None,
    default_z_order: ZOrderPolicy = ZOrderPolicy.DOCUMENT_ORDER,
) -> RecordBatch:
    """
    Project a TmxDocument into a RecordBatch.

    The map id is allocated first and the MapRecord is the first record
    emitted; every other record references it directly or through a layer.
    Nothing is written anywhere: the caller commits the batch.

    Args:
        map_name: Stored as ``MapRecord.name``.
        document: Output of either front-end.
        allocator: Source of primary keys.
        options: Policies; ``options.z_order`` overrides ``default_z_order``.
        default_z_order: The calling front-end's z-order default.
    """
    options = options or LoadOptions()
    z_order = options.resolve_z_order(default_z_order)

    batch = _Projection(document, allocator, options, z_order).run(map_name)

    log.debug("Projected map %r (id=%s): %s", map_name, batch.map_id, batch.counts())
    return batch
