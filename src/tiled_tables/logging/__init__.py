"""
Logging package for ``tiled_tables``.

Use ``get_logger("<module>")`` in modules; loggers are namespaced under
``tiled_tables`` and share the console and master-file handlers.
"""

from .logger import (
    get_logger,
    list_active_loggers,
    set_console_level,
)

__all__ = [
    "get_logger",
    "list_active_loggers",
    "set_console_level",
]
