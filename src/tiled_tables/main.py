"""
Main runner for tiled_tables.

This module is intentionally thin:
- argument parsing
- configuration setup
- pipeline orchestration

No parsing or projection logic lives here.
"""

from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from tiled_tables.config import get_config
from tiled_tables.core.context import LoadContext
from tiled_tables.core.pipeline import Pipeline
from tiled_tables.logging import get_logger, set_console_level
from tiled_tables.utils import default_export_path

log = get_logger("main")


# ---------------------------------------------------------
# CLI Argument Parsing
# ---------------------------------------------------------
def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Load a Tiled TMX map into relational tables and export them as JSON"
    )
    parser.add_argument(
        "-i",
        "--input",
        required=True,
        help="Path to the .tmx input file",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output JSON path (default: <outputs_dir>/tables.json)",
    )
    parser.add_argument(
        "--name",
        default=None,
        help="Map name stored in tiled_map (default: file stem)",
    )
    parser.add_argument(
        "--streaming",
        action="store_true",
        help="Use the streaming front-end instead of the element tree",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output",
    )
    return parser


# ---------------------------------------------------------
# Pipeline Runner
# ---------------------------------------------------------
def run(
    input_path: str,
    output_path: Optional[str],
    debug_flag: bool,
    map_name: Optional[str] = None,
    streaming: bool = False,
) -> int:
    """
    Prepare context and execute the load pipeline. Returns the map id.
    """
    cfg = get_config()
    if debug_flag:
        cfg.debug = True
        set_console_level(logging.DEBUG)

    if output_path is None:
        output_path = str(default_export_path(cfg.paths))

    log.info("Loading TMX: %s", input_path)

    ctx = LoadContext(
        config=cfg,
        logger=log,
        input_path=input_path,
        output_path=output_path,
        map_name=map_name,
        streaming=streaming,
        debug=cfg.debug,
    )

    map_id = Pipeline(ctx).run()

    log.info("Main pipeline complete. map_id=%s output=%s", map_id, output_path)
    return map_id


# ---------------------------------------------------------
# Program Entry Point
# ---------------------------------------------------------
def main(argv: Optional[List[str]] = None) -> None:
    ap = build_arg_parser()
    args = ap.parse_args(argv)

    try:
        run(
            input_path=args.input,
            output_path=args.output,
            debug_flag=args.debug,
            map_name=args.name,
            streaming=args.streaming,
        )
    except Exception as exc:
        log.exception("Unhandled exception in main: %s", exc)
        raise


if __name__ == "__main__":
    main()
