from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from sqlalchemy.exc import SQLAlchemyError

from tiled_tables.cli.utils import load_tmx
from tiled_tables.config import get_config
from tiled_tables.core.exceptions import TiledTablesError
from tiled_tables.store.sql import DEFAULT_DATABASE_URL, SqlSink

console = Console()


def load_command(
    tmx: Path = typer.Argument(..., exists=True, readable=True),
    name: Optional[str] = typer.Option(
        None,
        "--name",
        "-n",
        help="Map name (default: file stem)",
    ),
    db: Optional[str] = typer.Option(
        None,
        "--db",
        help="SQLAlchemy database URL (default: loader.database_url from config)",
    ),
    streaming: bool = typer.Option(
        False,
        "--streaming",
        help="Use the streaming front-end",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable rich logging",
    ),
):
    """
    Load a TMX map into a SQL database and print the new map id.
    """
    url = db or get_config().loader.get("database_url") or DEFAULT_DATABASE_URL
    sink = None
    try:
        sink = SqlSink(url)
        map_id, _ = load_tmx(tmx, name=name, sink=sink, streaming=streaming, verbose=verbose)
    except (TiledTablesError, SQLAlchemyError) as exc:
        console.print(f"[red]Load failed:[/red] {exc}")
        raise typer.Exit(code=1)
    finally:
        if sink is not None:
            sink.dispose()

    console.print(f"Loaded [bold]{tmx.name}[/bold] as map_id={map_id}")
