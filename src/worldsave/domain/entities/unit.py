"""Unit models and their order queues."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from worldsave.domain.enums import Activity, ActivityTargetKind, Direction, OrderKind


@dataclass(frozen=True, slots=True)
class ActivityTarget:
    """Tile extra an activity works on (a special, base or road by name)."""

    kind: ActivityTargetKind
    name: str


@dataclass(slots=True)
class UnitOrder:
    kind: OrderKind
    direction: Direction | None = None
    activity: Activity | None = None
    base: str | None = None
    road: str | None = None


@dataclass(slots=True)
class UnitOrders:
    """Queued orders and the cursor into them."""

    orders: List[UnitOrder] = field(default_factory=list)
    index: int = 0
    repeat: bool = False
    vigilant: bool = False
    last_move_safe: bool = False


@dataclass
class Unit:
    id: int
    x: int
    y: int
    type_name: str
    facing: Direction = Direction.SOUTH
    nationality: int | None = None
    veteran: int = 0
    hp: int = 10
    homecity: int = 0
    activity: Activity = Activity.IDLE
    activity_count: int = 0
    activity_target: ActivityTarget | None = None
    changed_from: Activity = Activity.IDLE
    changed_from_count: int = 0
    changed_from_target: ActivityTarget | None = None
    done_moving: bool = False
    moves_left: int = 0
    fuel: int = 0
    birth_turn: int = 0
    battlegroup: int = -1
    goto: Tuple[int, int] | None = None
    ai_controlled: bool = False
    moved: bool = False
    paradropped: bool = False
    transported_by: int | None = None
    orders: UnitOrders | None = None
    # Save-time ordinals; recomputed on every save.
    ord_map: int = 0
    ord_city: int = 0
