"""
Exporter package.

Re-exports the JSON export entry points used by the pipeline and the CLI.
"""

from __future__ import annotations

from .json_exporter import build_tables_dict, export_tables_to_json, serialize_tables_to_json_string

__all__ = ["build_tables_dict", "export_tables_to_json", "serialize_tables_to_json_string"]
