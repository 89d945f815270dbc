from __future__ import annotations

from tiled_tables.core.context import LoadContext
from tiled_tables.core.exceptions import ParseExecutionError
from tiled_tables.exporter import export_tables_to_json
from tiled_tables.parser_core import TmxLoader
from tiled_tables.projection.records import TABLES
from tiled_tables.store.memory import MemorySink


class Pipeline:
    """
    Orchestrates load -> export.
    No business logic lives here.
    """

    def __init__(self, context: LoadContext):
        self.ctx = context
        self.log = context.logger

    def run(self) -> int:
        self.log.info("Pipeline starting")

        try:
            sink = MemorySink()
            loader = TmxLoader(sink, config=self.ctx.config)
            map_id = loader.load_file(
                self.ctx.map_name,
                self.ctx.input_path,
                streaming=self.ctx.streaming,
            )

            export_tables_to_json(sink, self.ctx.output_path)
            self.ctx.stats = {table: sink.count(table) for table in TABLES}

            self.log.info("Pipeline completed successfully")

            return map_id

        except Exception as exc:
            self.log.exception("Pipeline execution failed")
            raise ParseExecutionError(str(exc)) from exc
