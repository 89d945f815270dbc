from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from tiled_tables.cli.utils import load_tmx, write_json
from tiled_tables.exporter import build_tables_dict

console = Console()


def export_command(
    tmx: Path = typer.Argument(..., exists=True, readable=True),
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        "-o",
        help="Write output to file instead of stdout",
    ),
    pretty: bool = typer.Option(
        False,
        "--pretty",
        help="Pretty-print JSON",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable rich logging",
    ),
):
    """
    Export the tables of a TMX map to JSON (stdout by default).
    """
    _, sink = load_tmx(tmx, verbose=verbose)

    if verbose:
        console.log("Exporting JSON")

    write_json(build_tables_dict(sink), out=out, pretty=pretty)

    if verbose:
        console.log("Export complete")
