"""
CLI command modules for tiled_tables.

Each command module defines a single Typer-compatible command function.
"""

from tiled_tables.cli.commands.export import export_command
from tiled_tables.cli.commands.layers import layers_command
from tiled_tables.cli.commands.load import load_command
from tiled_tables.cli.commands.spawns import spawns_command
from tiled_tables.cli.commands.stats import stats_command

__all__ = [
    "export_command",
    "layers_command",
    "load_command",
    "spawns_command",
    "stats_command",
]
