"""
Named policies for the tolerant parts of the loader.

Every lenient behavior of the loader is selected through one of these enums
so a stricter mode can be chosen per call without touching parser code.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional


class MalformedAttributePolicy(str, Enum):
    """What to do with an attribute whose value does not parse."""

    USE_DEFAULT = "use_default"
    STRICT = "strict"


class OrphanPolicy(str, Enum):
    """What to do with an object or tile data outside an open layer."""

    DROP = "drop"
    STRICT = "strict"


class NegativeCoordinatePolicy(str, Enum):
    """What to do with chunk cells that land on negative world coordinates."""

    REJECT = "reject"
    SKIP = "skip"
    ALLOW = "allow"


class ZOrderPolicy(str, Enum):
    """How ``LayerRecord.z_order`` is derived."""

    LAYER_ID = "layer_id"
    DOCUMENT_ORDER = "document_order"


def _enum_value(enum_cls, raw: Any, default):
    if raw is None:
        return default
    if isinstance(raw, enum_cls):
        return raw
    return enum_cls(str(raw).strip().lower())


@dataclass(frozen=True)
class LoadOptions:
    """
    Bundle of policies for one load call.

    ``z_order`` left as ``None`` means "use the front-end's default":
    allocated layer ids for the streaming front-end, document order for the
    tree front-end.
    """

    malformed_attribute: MalformedAttributePolicy = MalformedAttributePolicy.USE_DEFAULT
    orphan: OrphanPolicy = OrphanPolicy.DROP
    negative_coordinates: NegativeCoordinatePolicy = NegativeCoordinatePolicy.REJECT
    z_order: Optional[ZOrderPolicy] = None

    @classmethod
    def from_config(cls, loader_cfg: Optional[Mapping[str, Any]]) -> "LoadOptions":
        cfg = loader_cfg or {}
        return cls(
            malformed_attribute=_enum_value(
                MalformedAttributePolicy,
                cfg.get("malformed_attribute"),
                MalformedAttributePolicy.USE_DEFAULT,
            ),
            orphan=_enum_value(OrphanPolicy, cfg.get("orphan"), OrphanPolicy.DROP),
            negative_coordinates=_enum_value(
                NegativeCoordinatePolicy,
                cfg.get("negative_coordinates"),
                NegativeCoordinatePolicy.REJECT,
            ),
            z_order=_enum_value(ZOrderPolicy, cfg.get("z_order"), None),
        )

    def resolve_z_order(self, front_end_default: ZOrderPolicy) -> ZOrderPolicy:
        return self.z_order if self.z_order is not None else front_end_default
