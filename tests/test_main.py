# tests/test_main.py

from __future__ import annotations

import json

import pytest

from tiled_tables.core.exceptions import ParseExecutionError
from tiled_tables.main import build_arg_parser, main
from tiled_tables.utils import mock_file_path


def test_arg_parser_defaults() -> None:
    args = build_arg_parser().parse_args(["-i", "map.tmx"])
    assert args.output is None
    assert args.name is None
    assert args.streaming is False
    assert args.debug is False


def test_main_loads_and_exports(tmp_path) -> None:
    out = tmp_path / "out.json"
    main(["-i", str(mock_file_path("finite.tmx")), "-o", str(out), "--name", "overworld"])

    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["tables"]["tiled_map"][0]["name"] == "overworld"
    assert payload["counts"]["tiled_property"] == 9


def test_main_wraps_failures(tmp_path) -> None:
    broken = tmp_path / "broken.tmx"
    broken.write_text("<map><layer></map>", encoding="utf-8")

    with pytest.raises(ParseExecutionError):
        main(["-i", str(broken), "-o", str(tmp_path / "out.json")])
