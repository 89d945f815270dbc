from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class LoadContext:
    """
    Shared runner context.
    This object is passed between orchestration layers.
    """

    config: Any
    logger: Any

    input_path: Optional[str] = None
    output_path: Optional[str] = None
    map_name: Optional[str] = None
    streaming: bool = False

    stats: Dict[str, Any] = field(default_factory=dict)

    debug: bool = False
