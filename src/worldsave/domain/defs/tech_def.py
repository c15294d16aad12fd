"""Technology definition structures."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(slots=True)
class TechDef:
    """Advance that players can research."""

    id: str
    name: str
    requires: Tuple[str, ...] = field(default_factory=tuple)
