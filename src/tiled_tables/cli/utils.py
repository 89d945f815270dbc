from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from rich.console import Console

from tiled_tables.logging import set_console_level
from tiled_tables.parser_core import TmxLoader
from tiled_tables.store.base import Sink
from tiled_tables.store.memory import MemorySink

console = Console()


def load_tmx(
    path: Path,
    *,
    name: Optional[str] = None,
    sink: Optional[Sink] = None,
    streaming: bool = False,
    verbose: bool = False,
) -> Tuple[int, Sink]:
    """
    Load one .tmx file into ``sink`` (a fresh MemorySink by default).

    Returns:
        (map_id, sink)
    """
    if not path.exists():
        raise FileNotFoundError(path)

    if verbose:
        set_console_level(logging.INFO)

    sink = sink if sink is not None else MemorySink()

    t0 = time.perf_counter()
    map_id = TmxLoader(sink).load_file(name, path, streaming=streaming)
    elapsed = time.perf_counter() - t0

    if verbose:
        console.log(f"Loaded {path.name} as map {map_id} in {elapsed:.2f}s")

    return map_id, sink


def write_json(
    data: Dict[str, Any],
    *,
    out: Path | None,
    pretty: bool,
):
    """
    Write JSON to stdout or file.
    """
    if pretty:
        payload = json.dumps(data, indent=2, ensure_ascii=False)
    else:
        payload = json.dumps(data, separators=(",", ":"), ensure_ascii=False)

    if out:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(payload, encoding="utf-8")
    else:
        print(payload)
