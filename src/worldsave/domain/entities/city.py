"""City models."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Set

MAX_TRADE_ROUTES = 4
CITY_OPTION_COUNT = 3
MAX_WORKLIST_LENGTH = 64


@dataclass(frozen=True, slots=True)
class ProductionTarget:
    """Something a city can build, named by kind and rule name."""

    kind: str
    name: str


@dataclass
class City:
    id: int
    x: int
    y: int
    name: str
    original: int = 0
    size: int = 1
    specialists: Dict[str, int] = field(default_factory=dict)
    trade_routes: List[int] = field(default_factory=lambda: [0] * MAX_TRADE_ROUTES)
    food_stock: int = 0
    shield_stock: int = 0
    airlift: int = 0
    was_happy: bool = False
    turn_plague: int = 0
    anarchy: int = 0
    rapture: int = 0
    steal: int = 0
    turn_founded: int = 0
    did_buy: bool = False
    did_sell: bool = False
    turn_last_built: int = 0
    production: ProductionTarget = ProductionTarget("Building", "Coinage")
    changed_from: ProductionTarget = ProductionTarget("Building", "Coinage")
    before_change_shields: int = 0
    caravan_shields: int = 0
    disbanded_shields: int = 0
    last_turns_shield_surplus: int = 0
    city_radius_sq: int = 5
    improvements: Set[str] = field(default_factory=set)
    worklist: List[ProductionTarget] = field(default_factory=list)
    options: Set[int] = field(default_factory=set)
    citizens: Dict[int, int] = field(default_factory=dict)
    supported_units: List[int] = field(default_factory=list)
