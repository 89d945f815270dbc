# src/tiled_tables/utils/__init__.py

from .pathing import (
    default_export_path,
    mock_file_path,
    project_root,
    resolve_project_path,
)

__all__ = [
    "default_export_path",
    "mock_file_path",
    "project_root",
    "resolve_project_path",
]
