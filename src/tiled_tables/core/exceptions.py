class TiledTablesError(Exception):
    """Base exception for every failure raised by tiled_tables."""


class TmxSyntaxError(TiledTablesError, ValueError):
    """Raised when the TMX text is not well-formed XML."""

    def __init__(self, message: str, lineno: int | None = None):
        super().__init__(message if lineno is None else f"Line {lineno}: {message}")
        self.lineno = lineno


class TmxStructureError(TiledTablesError):
    """Raised when elements appear where they are not allowed (strict mode only)."""


class TmxFormatError(TiledTablesError):
    """Raised when well-formed TMX describes data that cannot be projected."""


class UnsupportedEncodingError(TmxFormatError):
    """Raised for tile data that is not plain CSV (base64, zlib, gzip, zstd)."""


class NegativeCoordinateError(TmxFormatError):
    """Raised when a chunk places a tile at a negative world coordinate."""


class AttributeValueError(TiledTablesError, ValueError):
    """Raised for unparsable attribute values when the strict policy is active."""


class DuplicateKeyError(TiledTablesError):
    """Raised by a sink when a primary key already exists."""

    def __init__(self, table: str, key: int | None = None):
        where = f" {key}" if key is not None else ""
        super().__init__(f"Duplicate primary key{where} in table {table!r}")
        self.table = table
        self.key = key


class MapNotFoundError(TiledTablesError, LookupError):
    """Raised by read-side queries for an unknown map id or name."""


class PipelineError(TiledTablesError):
    """Base exception for runner failures."""


class ParseExecutionError(PipelineError):
    """Raised when the runner pipeline fails."""
