# src/tiled_tables/utils/pathing.py

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Union

# src/tiled_tables/utils/pathing.py -> repository root
_PROJECT_ROOT = Path(__file__).resolve().parents[3]

EXPORT_FILENAME = "tables.json"


def project_root() -> Path:
    """Repository root: the directory holding config/ and mock_files/."""
    return _PROJECT_ROOT


def resolve_project_path(path: Union[str, Path]) -> Path:
    """Anchor a relative path at the repository root; absolute paths pass through."""
    path = Path(path)
    return path if path.is_absolute() else project_root() / path


def mock_file_path(filename: Union[str, Path]) -> Path:
    """Sample map or tileset under mock_files/."""
    return resolve_project_path(Path("mock_files") / filename)


def default_export_path(paths: Mapping[str, str]) -> Path:
    """Where the tables JSON goes when no output is given: ``<outputs_dir>/tables.json``."""
    return resolve_project_path(paths.get("outputs_dir", "outputs")) / EXPORT_FILENAME
