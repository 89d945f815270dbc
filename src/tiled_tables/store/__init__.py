from .base import Sink
from .memory import MemorySink
from .sql import DEFAULT_DATABASE_URL, SqlSink

__all__ = ["DEFAULT_DATABASE_URL", "MemorySink", "Sink", "SqlSink"]
