"""
tiled_tables: load Tiled TMX maps into relational tables.

    from tiled_tables.parser_core import TmxLoader
    from tiled_tables.store import MemorySink

    sink = MemorySink()
    map_id = TmxLoader(sink).load("overworld", tmx_text)
"""

__version__ = "0.1.0"
