from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from tiled_tables.cli.utils import load_tmx
from tiled_tables.queries import objects_of_type

console = Console()


def spawns_command(
    tmx: Path = typer.Argument(..., exists=True, readable=True),
    obj_type: str = typer.Option(
        "spawn",
        "--type",
        "-t",
        help="Object type (or class) to list",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable rich logging"),
):
    """
    List objects of one type with their position and properties.
    """
    map_id, sink = load_tmx(tmx, verbose=verbose)
    matches = objects_of_type(sink, obj_type, map_id)

    if not matches:
        console.print(f"No objects of type {obj_type!r}")
        return

    table = Table(title=f"{obj_type} objects")
    table.add_column("ID", justify="right")
    table.add_column("Name", style="bold")
    table.add_column("X", justify="right")
    table.add_column("Y", justify="right")
    table.add_column("Properties")

    for match in matches:
        obj = match.object
        props = ", ".join(f"{k}={v}" for k, v in sorted(match.properties.items()))
        table.add_row(str(obj.object_id), obj.name, f"{obj.x:g}", f"{obj.y:g}", props)

    console.print(table)
