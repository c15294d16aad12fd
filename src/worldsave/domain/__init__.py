"""World model for the save engine."""

from .enums import (
    Activity,
    ActivityTargetKind,
    Direction,
    DiplomaticState,
    OrderKind,
    Resource,
    ServerState,
    SpaceshipState,
    Terrain,
)
from .state import GameInfo, ScenarioInfo, WorldState
from .world_map import StartPosition, Tile, WorldMap

__all__ = [
    "Activity",
    "ActivityTargetKind",
    "Direction",
    "DiplomaticState",
    "GameInfo",
    "OrderKind",
    "Resource",
    "ScenarioInfo",
    "ServerState",
    "SpaceshipState",
    "StartPosition",
    "Terrain",
    "Tile",
    "WorldMap",
    "WorldState",
]
