"""
CLI package for tiled_tables.

Provides the Typer application entrypoint and shared CLI utilities.
"""

from tiled_tables.cli.app import app, main

__all__ = [
    "app",
    "main",
]
