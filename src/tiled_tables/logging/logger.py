"""
Centralized logging configuration for tiled_tables.

Key behaviors
-------------
* Single entry point via ``get_logger`` so every module shares one handler set.
* Module loggers live under the ``tiled_tables`` namespace
  (``get_logger("stream_parser")`` -> ``tiled_tables.stream_parser``) and
  propagate to the base logger.
* Master log file (default: ``logs/tiled_tables.log``) plus optional
  per-module log files.
* Console output through ``rich`` when available on the terminal.
* Level, rotation and file layout come from ``config/tiled_tables.yml``.
"""

from __future__ import annotations

import logging
from logging import Logger
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, List, Optional

from rich.logging import RichHandler

from tiled_tables.config import get_config

BASE_LOGGER_NAME = "tiled_tables"
PROJECT_ROOT = Path(__file__).resolve().parents[3]
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_logger_cache: Dict[str, Logger] = {}
_base_configured: bool = False
_effective_level: int = logging.INFO
_rotate_logs: bool = False
_per_module_files: bool = False


# -----------------------------------------------------------------------------
# Internal helpers
# -----------------------------------------------------------------------------

def _resolve_log_dir() -> Optional[Path]:
    """Resolve the log directory; ``None`` disables file logging."""
    cfg = get_config()

    log_dir_cfg = cfg.logging.get("dir") or cfg.paths.get("logs_dir")
    if not log_dir_cfg:
        return None

    log_dir = Path(log_dir_cfg)
    if not log_dir.is_absolute():
        log_dir = PROJECT_ROOT / log_dir

    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError:
        return None
    return log_dir


def _build_file_handler(path: Path, level: int) -> logging.Handler:
    if _rotate_logs:
        handler: logging.Handler = RotatingFileHandler(
            path,
            maxBytes=5 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
    else:
        handler = logging.FileHandler(path, encoding="utf-8")

    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _configure_base_logger() -> Logger:
    """Configure the shared base logger once."""
    global _base_configured, _effective_level, _rotate_logs, _per_module_files

    base_logger = logging.getLogger(BASE_LOGGER_NAME)
    if _base_configured:
        return base_logger

    cfg = get_config()
    _rotate_logs = bool(cfg.logging.get("rotate", False))
    _per_module_files = bool(cfg.logging.get("per_module_files", False))

    level_name = str(cfg.logging.get("level", "INFO")).upper()
    base_level = getattr(logging, level_name, logging.INFO)
    debug_enabled = bool(getattr(cfg, "debug", False))
    _effective_level = logging.DEBUG if debug_enabled else base_level

    base_logger.setLevel(_effective_level)
    base_logger.propagate = False

    log_dir = _resolve_log_dir()
    if log_dir is not None:
        master_name = cfg.logging.get("file", "tiled_tables.log")
        base_logger.addHandler(_build_file_handler(log_dir / master_name, _effective_level))

    console = RichHandler(show_path=False, rich_tracebacks=False)
    console.setLevel(logging.DEBUG if debug_enabled else logging.WARNING)
    console.is_console_handler = True  # type: ignore[attr-defined]
    base_logger.addHandler(console)

    _base_configured = True
    return base_logger


def _attach_module_handler(logger: Logger, module_name: str) -> None:
    if any(getattr(h, "is_module_handler", False) for h in logger.handlers):
        return

    log_dir = _resolve_log_dir()
    if log_dir is None:
        return

    handler = _build_file_handler(log_dir / f"{module_name.replace('.', '_')}.log", _effective_level)
    handler.is_module_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)


# -----------------------------------------------------------------------------
# Public API
# -----------------------------------------------------------------------------

def get_logger(name: str | None = None) -> Logger:
    """Return a namespaced logger that shares the project-wide handlers.

    ``name`` may be a bare module name ("projector") or an already-qualified
    one ("tiled_tables.projector"); both resolve to the same logger.
    """
    base_logger = _configure_base_logger()

    if not name or name == BASE_LOGGER_NAME:
        return base_logger

    qualified = name if name.startswith(BASE_LOGGER_NAME + ".") else f"{BASE_LOGGER_NAME}.{name}"
    logger = logging.getLogger(qualified)
    logger.propagate = True

    if _per_module_files:
        _attach_module_handler(logger, qualified)

    _logger_cache[qualified] = logger
    return logger


def set_console_level(level: int) -> None:
    """Adjust console verbosity at runtime (used by ``--verbose`` flags)."""
    global _effective_level

    base_logger = _configure_base_logger()
    for handler in base_logger.handlers:
        if getattr(handler, "is_console_handler", False):
            handler.setLevel(level)

    if level < base_logger.level:
        _effective_level = level
        base_logger.setLevel(level)


def list_active_loggers() -> List[str]:
    """Helper for debugging configuration issues in tests."""
    return list(_logger_cache.keys())
