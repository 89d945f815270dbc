# src/tiled_tables/loader/attributes.py

from __future__ import annotations

import math
from typing import Mapping, Optional

from tiled_tables.core.exceptions import AttributeValueError
from tiled_tables.core.policies import MalformedAttributePolicy
from tiled_tables.loader.nodes import TmxColor


def parse_color(text: str) -> TmxColor:
    """
    Parse a TMX color.

    Accepted forms (leading ``#`` optional):
        ``AARRGGBB`` -> alpha first, as Tiled writes it
        ``RRGGBB``   -> alpha 255

    Raises:
        ValueError: for anything else.
    """
    raw = text.strip()
    if raw.startswith("#"):
        raw = raw[1:]

    if len(raw) == 8:
        alpha, red, green, blue = (int(raw[i : i + 2], 16) for i in range(0, 8, 2))
    elif len(raw) == 6:
        alpha = 255
        red, green, blue = (int(raw[i : i + 2], 16) for i in range(0, 6, 2))
    else:
        raise ValueError(f"Not a TMX color: {text!r}")

    return TmxColor(red=red, green=green, blue=blue, alpha=alpha)


class AttributeReader:
    """
    Typed, tolerant access to the attributes of one XML element.

    Missing attributes always yield the caller's default. Unparsable values
    yield the default under ``MalformedAttributePolicy.USE_DEFAULT`` and raise
    ``AttributeValueError`` under ``MalformedAttributePolicy.STRICT``.

    Example:
        reader = AttributeReader({"width": "10", "visible": "0"})
        reader.get_int("width")        -> 10
        reader.get_bool("visible")     -> False
        reader.get_float("opacity", 1.0) -> 1.0
    """

    def __init__(
        self,
        attrs: Mapping[str, str],
        policy: MalformedAttributePolicy = MalformedAttributePolicy.USE_DEFAULT,
        element: str = "",
    ):
        self.attrs = attrs
        self.policy = policy
        self.element = element

    def _malformed(self, key: str, raw: str, expected: str, default):
        if self.policy is MalformedAttributePolicy.STRICT:
            where = f"<{self.element}> " if self.element else ""
            raise AttributeValueError(
                f"{where}attribute {key!r}: expected {expected}, got {raw!r}"
            )
        return default

    def get_str(self, key: str, default: str = "") -> str:
        value = self.attrs.get(key)
        return default if value is None else value

    def get_optional_str(self, key: str) -> Optional[str]:
        return self.attrs.get(key)

    def get_int(self, key: str, default: int = 0) -> int:
        raw = self.attrs.get(key)
        if raw is None:
            return default
        try:
            return int(raw.strip())
        except ValueError:
            return self._malformed(key, raw, "an integer", default)

    def get_optional_int(self, key: str) -> Optional[int]:
        if key not in self.attrs:
            return None
        return self.get_int(key, None)  # type: ignore[arg-type]

    def get_float(self, key: str, default: float = 0.0) -> float:
        raw = self.attrs.get(key)
        if raw is None:
            return default
        try:
            value = float(raw.strip())
        except ValueError:
            return self._malformed(key, raw, "a number", default)
        if math.isnan(value) or math.isinf(value):
            return self._malformed(key, raw, "a finite number", default)
        return value

    def get_truncated_int(self, key: str, default: int = 0) -> int:
        """Read a number that may be written as a decimal and truncate it."""
        return int(self.get_float(key, float(default)))

    def get_bool(self, key: str, default: bool = True) -> bool:
        """True unless the literal value is exactly ``"0"``."""
        raw = self.attrs.get(key)
        if raw is None:
            return default
        return raw != "0"

    def get_color(self, key: str) -> Optional[TmxColor]:
        raw = self.attrs.get(key)
        if raw is None or not raw.strip():
            return None
        try:
            return parse_color(raw)
        except ValueError:
            return self._malformed(key, raw, "a #AARRGGBB color", None)
