from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from tiled_tables.cli.utils import load_tmx
from tiled_tables.projection.records import TABLES

console = Console()


def stats_command(
    tmx: Path = typer.Argument(..., exists=True, readable=True),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable rich logging",
    ),
):
    """
    Show per-table row counts for a TMX map.
    """
    _, sink = load_tmx(tmx, verbose=verbose)

    table = Table(title="TMX Statistics")
    table.add_column("Table", style="bold")
    table.add_column("Rows", justify="right")

    for name in TABLES:
        table.add_row(name, str(sink.count(name)))

    console.print(table)
