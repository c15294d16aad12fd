"""Enumerations shared by the world model and the document codecs."""
from __future__ import annotations

from enum import Enum, IntEnum


class Terrain(Enum):
    """Terrain kinds, valued by their rule names."""

    INACCESSIBLE = "Inaccessible"
    LAKE = "Lake"
    OCEAN = "Ocean"
    DEEP_OCEAN = "Deep Ocean"
    GLACIER = "Glacier"
    DESERT = "Desert"
    FOREST = "Forest"
    GRASSLAND = "Grassland"
    HILLS = "Hills"
    JUNGLE = "Jungle"
    MOUNTAINS = "Mountains"
    PLAINS = "Plains"
    SWAMP = "Swamp"
    TUNDRA = "Tundra"
    UNKNOWN = "Unknown"


class Resource(Enum):
    """Tile resources, valued by their rule names."""

    GOLD = "Gold"
    IRON = "Iron"
    GAME = "Game"
    FURS = "Furs"
    COAL = "Coal"
    FISH = "Fish"
    FRUIT = "Fruit"
    GEMS = "Gems"
    BUFFALO = "Buffalo"
    WHEAT = "Wheat"
    OASIS = "Oasis"
    PEAT = "Peat"
    PHEASANT = "Pheasant"
    RESOURCES = "Resources"
    IVORY = "Ivory"
    SILK = "Silk"
    SPICE = "Spice"
    WHALES = "Whales"
    WINE = "Wine"
    OIL = "Oil"


class Direction(Enum):
    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"
    NORTHEAST = "northeast"
    NORTHWEST = "northwest"
    SOUTHEAST = "southeast"
    SOUTHWEST = "southwest"


class OrderKind(Enum):
    MOVE = "move"
    FULL_MP = "full_mp"
    ACTIVITY = "activity"
    BUILD_CITY = "build_city"
    DISBAND = "disband"
    BUILD_WONDER = "build_wonder"
    TRADE_ROUTE = "trade_route"
    HOMECITY = "homecity"


class Activity(Enum):
    """Unit activities in their persisted index order."""

    IDLE = "Idle"
    POLLUTION = "Pollution"
    OLD_ROAD = "OldRoad"
    MINE = "Mine"
    IRRIGATE = "Irrigate"
    FORTIFIED = "Fortified"
    FORTRESS = "Fortress"
    SENTRY = "Sentry"
    OLD_RAILROAD = "OldRailroad"
    PILLAGE = "Pillage"
    GOTO = "Goto"
    EXPLORE = "Explore"
    TRANSFORM = "Transform"
    UNKNOWN = "Unknown"
    AIRBASE = "Airbase"
    FORTIFYING = "Fortifying"
    FALLOUT = "Fallout"
    PATROL_UNUSED = "Patrol"
    BASE = "Base"
    GEN_ROAD = "Road"
    CONVERT = "Convert"


class ActivityTargetKind(Enum):
    SPECIAL = "special"
    BASE = "base"
    ROAD = "road"


class DiplomaticState(IntEnum):
    ARMISTICE = 0
    WAR = 1
    CEASEFIRE = 2
    PEACE = 3
    ALLIANCE = 4
    NO_CONTACT = 5
    TEAM = 6


class SpaceshipState(IntEnum):
    NONE = 0
    STARTED = 1
    LAUNCHED = 2
    ARRIVED = 3


class ServerState(Enum):
    INITIAL = "S_S_INITIAL"
    RUNNING = "S_S_RUNNING"
    OVER = "S_S_OVER"
