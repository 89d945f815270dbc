# tests/test_logging.py

from __future__ import annotations

import logging

from tiled_tables.logging import get_logger, list_active_loggers, set_console_level


def test_loggers_are_namespaced() -> None:
    log = get_logger("stream_parser")
    assert log.name == "tiled_tables.stream_parser"
    assert get_logger("tiled_tables.stream_parser") is log
    assert log.propagate is True


def test_base_logger_for_empty_name() -> None:
    assert get_logger().name == "tiled_tables"
    assert get_logger("tiled_tables") is get_logger()


def test_list_active_loggers_tracks_requests() -> None:
    get_logger("queries_check")
    assert "tiled_tables.queries_check" in list_active_loggers()


def test_set_console_level_only_touches_console_handler() -> None:
    base = get_logger()
    console = [h for h in base.handlers if getattr(h, "is_console_handler", False)]
    assert len(console) == 1

    original = console[0].level
    try:
        set_console_level(logging.ERROR)
        assert console[0].level == logging.ERROR
    finally:
        set_console_level(original)
