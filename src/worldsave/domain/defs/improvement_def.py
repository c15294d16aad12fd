"""City improvement definition structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ImprovementGenus = Literal["GreatWonder", "SmallWonder", "Improvement", "Special"]
IMPROVEMENT_GENUSES: tuple[str, ...] = ("GreatWonder", "SmallWonder", "Improvement", "Special")


@dataclass(slots=True)
class ImprovementDef:
    """Building or wonder that a city can hold."""

    id: str
    name: str
    genus: ImprovementGenus = "Improvement"

    @property
    def is_great_wonder(self) -> bool:
        return self.genus == "GreatWonder"

    @property
    def is_wonder(self) -> bool:
        return self.genus in ("GreatWonder", "SmallWonder")
