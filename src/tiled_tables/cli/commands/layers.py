from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from tiled_tables.cli.utils import load_tmx
from tiled_tables.queries import layer_summaries

console = Console()


def layers_command(
    tmx: Path = typer.Argument(..., exists=True, readable=True),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable rich logging"),
):
    """
    List the layers of a TMX map with their tile and object counts.
    """
    map_id, sink = load_tmx(tmx, verbose=verbose)

    table = Table(title=f"Layers of {tmx.name}")
    table.add_column("ID", justify="right")
    table.add_column("Name", style="bold")
    table.add_column("Kind")
    table.add_column("Z", justify="right")
    table.add_column("Parent", justify="right")
    table.add_column("Tiles", justify="right")
    table.add_column("Objects", justify="right")

    for summary in layer_summaries(sink, map_id):
        layer = summary.layer
        table.add_row(
            str(layer.layer_id),
            layer.name,
            layer.kind,
            str(layer.z_order),
            "" if layer.parent_layer_id is None else str(layer.parent_layer_id),
            str(summary.tiles),
            str(summary.objects),
        )

    console.print(table)
