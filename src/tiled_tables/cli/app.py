from __future__ import annotations

import typer

from tiled_tables.cli.commands.export import export_command
from tiled_tables.cli.commands.layers import layers_command
from tiled_tables.cli.commands.load import load_command
from tiled_tables.cli.commands.spawns import spawns_command
from tiled_tables.cli.commands.stats import stats_command

app = typer.Typer(
    name="tiled-tables",
    help="Tiled TMX loader, inspector, and exporter",
    add_completion=False,
)

app.command("load")(load_command)
app.command("stats")(stats_command)
app.command("export")(export_command)
app.command("layers")(layers_command)
app.command("spawns")(spawns_command)


def main():
    app()


if __name__ == "__main__":
    main()
