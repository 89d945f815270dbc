"""
parser_core.py
Central loading engine: TMX text -> TmxDocument -> RecordBatch -> sink.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from tiled_tables.config import get_config
from tiled_tables.core.policies import LoadOptions, ZOrderPolicy
from tiled_tables.identity.allocators import CounterAllocator, IdAllocator
from tiled_tables.loader.nodes import TmxDocument
from tiled_tables.loader.stream_parser import parse_tmx_stream
from tiled_tables.loader.tree_builder import TreeBuilder, build_tree
from tiled_tables.logging import get_logger
from tiled_tables.projection.build_records import project_document
from tiled_tables.projection.records import RecordBatch
from tiled_tables.store.base import Sink
from tiled_tables.store.memory import MemorySink


class TmxLoader:
    """
    High-level loader:
      - parses TMX text (streaming state machine or element tree)
      - projects the document into records, ids from the allocator
      - commits the records to the sink in one atomic batch

    Nothing is written when parsing or projection fails.

    Example:
        sink = MemorySink()
        loader = TmxLoader(sink)
        map_id = loader.load("overworld", tmx_text)
    """

    def __init__(
        self,
        sink: Optional[Sink] = None,
        allocator: Optional[IdAllocator] = None,
        options: Optional[LoadOptions] = None,
        config=None,
    ):
        self.cfg = config if config is not None else get_config()
        self.log = get_logger("parser_core")

        self.sink = sink if sink is not None else MemorySink()
        self.allocator = allocator if allocator is not None else CounterAllocator.from_sink(self.sink)
        self.options = options if options is not None else LoadOptions.from_config(self.cfg.loader)

    # ---------------------------------------------------------
    # Parse / project
    # ---------------------------------------------------------
    def parse(
        self,
        tmx_text: Union[str, bytes],
        *,
        streaming: bool = True,
        base_dir: Optional[Union[str, Path]] = None,
    ) -> TmxDocument:
        """Run one front-end over ``tmx_text``."""
        if not streaming:
            return build_tree(tmx_text, self.options, base_dir=base_dir)

        document = parse_tmx_stream(tmx_text, self.options)
        if base_dir is not None:
            resolver = TreeBuilder(self.options, base_dir=base_dir)
            for tileset in document.tilesets:
                if tileset.source:
                    resolver.load_external_tileset(tileset)
        return document

    def project(
        self,
        map_name: str,
        document: TmxDocument,
        default_z_order: ZOrderPolicy = ZOrderPolicy.LAYER_ID,
    ) -> RecordBatch:
        return project_document(map_name, document, self.allocator, self.options, default_z_order)

    def _commit(self, batch: RecordBatch) -> int:
        self.sink.insert_batch(batch)
        self.log.info("Loaded map %s: %s", batch.map_id, batch.counts())
        return batch.map_id  # type: ignore[return-value]

    # ---------------------------------------------------------
    # Load
    # ---------------------------------------------------------
    def load(self, map_name: str, tmx_text: Union[str, bytes]) -> int:
        """
        Load ``tmx_text`` with the streaming front-end.

        Returns:
            The new map id.
        """
        self.log.info("Loading map %r (streaming)", map_name)
        try:
            document = self.parse(tmx_text, streaming=True)
            batch = self.project(map_name, document, ZOrderPolicy.LAYER_ID)
        except Exception:
            self.log.exception("Load of map %r failed; nothing was written.", map_name)
            raise
        return self._commit(batch)

    def load_tree(
        self,
        map_name: str,
        tmx_text: Union[str, bytes],
        base_dir: Optional[Union[str, Path]] = None,
    ) -> int:
        """Load ``tmx_text`` with the element-tree front-end."""
        self.log.info("Loading map %r (tree)", map_name)
        try:
            document = self.parse(tmx_text, streaming=False, base_dir=base_dir)
            batch = self.project(map_name, document, ZOrderPolicy.DOCUMENT_ORDER)
        except Exception:
            self.log.exception("Load of map %r failed; nothing was written.", map_name)
            raise
        return self._commit(batch)

    def load_file(
        self,
        map_name: Optional[str],
        path: Union[str, Path],
        *,
        streaming: bool = False,
    ) -> int:
        """
        Load a ``.tmx`` file. External tilesets resolve relative to it.

        ``map_name`` defaults to the file stem.
        """
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"TMX file not found: {path}")

        name = map_name or path.stem
        text = path.read_bytes()

        if not streaming:
            return self.load_tree(name, text, base_dir=path.parent)

        self.log.info("Loading map %r (streaming) from %s", name, path)
        try:
            document = self.parse(text, streaming=True, base_dir=path.parent)
            batch = self.project(name, document, ZOrderPolicy.LAYER_ID)
        except Exception:
            self.log.exception("Load of map %r failed; nothing was written.", name)
            raise
        return self._commit(batch)


def load(
    map_name: str,
    tmx_text: Union[str, bytes],
    sink: Optional[Sink] = None,
    allocator: Optional[IdAllocator] = None,
) -> int:
    """Load one map with the streaming front-end and return its map id."""
    return TmxLoader(sink, allocator).load(map_name, tmx_text)
