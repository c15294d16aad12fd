"""Plain named ruleset entries."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class RuleDef:
    """A ruleset entry that is referenced only by its rule name.

    Traits, tile specials, base types, road types and specialists are all
    of this shape.
    """

    id: str
    name: str
