import sys
from pathlib import Path

import pytest

# Ensure the project src directory is on sys.path for test imports
PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))


@pytest.fixture
def finite_tmx() -> str:
    from tiled_tables.utils import mock_file_path

    return mock_file_path("finite.tmx").read_text(encoding="utf-8")


@pytest.fixture
def infinite_tmx() -> str:
    from tiled_tables.utils import mock_file_path

    return mock_file_path("infinite.tmx").read_text(encoding="utf-8")
