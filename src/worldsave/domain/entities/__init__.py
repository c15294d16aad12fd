"""Runtime entity exports."""

from .city import CITY_OPTION_COUNT, MAX_TRADE_ROUTES, MAX_WORKLIST_LENGTH, City, ProductionTarget
from .player import NUM_SS_STRUCTURALS, DiplState, Player, PlayerColor, Research, Spaceship
from .unit import ActivityTarget, Unit, UnitOrder, UnitOrders

__all__ = [
    "ActivityTarget",
    "CITY_OPTION_COUNT",
    "City",
    "DiplState",
    "MAX_TRADE_ROUTES",
    "MAX_WORKLIST_LENGTH",
    "NUM_SS_STRUCTURALS",
    "Player",
    "PlayerColor",
    "ProductionTarget",
    "Research",
    "Spaceship",
    "Unit",
    "UnitOrder",
    "UnitOrders",
]
