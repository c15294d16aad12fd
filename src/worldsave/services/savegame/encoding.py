"""Single-character encodings used by the document format."""
from __future__ import annotations

from typing import Callable, Dict, Generic, Hashable, Iterator, List, Mapping, Optional, Sequence, TypeVar

from worldsave.domain.enums import Activity, Direction, OrderKind, Resource, Terrain
from worldsave.services.errors import UnknownSymbol

E = TypeVar("E", bound=Hashable)

HEX_CHARS = "0123456789abcdef"
NUM_CHARS = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_-+"
NIBBLE_WIDTH = 4


class SymbolTable(Generic[E]):
    """Bijective mapping between values of one family and single characters."""

    def __init__(self, family: str, symbols: Mapping[E, str]) -> None:
        self.family = family
        self._encode: Dict[E, str] = dict(symbols)
        self._decode: Dict[str, E] = {}
        for value, char in self._encode.items():
            if len(char) != 1:
                raise ValueError(f"{family}: symbol for {value!r} must be one character.")
            if char in self._decode:
                raise ValueError(
                    f"{family}: symbol {char!r} used by {self._decode[char]!r} and {value!r}."
                )
            self._decode[char] = value

    def encode(self, value: E) -> str:
        try:
            return self._encode[value]
        except KeyError as exc:
            raise UnknownSymbol(self.family, repr(value)) from exc

    def decode(self, char: str) -> E:
        try:
            return self._decode[char]
        except KeyError as exc:
            raise UnknownSymbol(self.family, char) from exc

    def symbols(self) -> str:
        return "".join(self._encode.values())

    def __len__(self) -> int:
        return len(self._encode)


def _table_for(family: str, enum_type, symbols: Mapping) -> SymbolTable:
    missing = [member for member in enum_type if member not in symbols]
    if missing:
        raise ValueError(f"{family}: no symbol for {missing!r}.")
    return SymbolTable(family, symbols)


TERRAIN = _table_for(
    "terrain",
    Terrain,
    {
        Terrain.INACCESSIBLE: "i",
        Terrain.LAKE: "+",
        Terrain.OCEAN: " ",
        Terrain.DEEP_OCEAN: ":",
        Terrain.GLACIER: "a",
        Terrain.DESERT: "d",
        Terrain.FOREST: "f",
        Terrain.GRASSLAND: "g",
        Terrain.HILLS: "h",
        Terrain.JUNGLE: "j",
        Terrain.MOUNTAINS: "m",
        Terrain.PLAINS: "p",
        Terrain.SWAMP: "s",
        Terrain.TUNDRA: "t",
        Terrain.UNKNOWN: "u",
    },
)

RESOURCE: SymbolTable[Optional[Resource]] = SymbolTable(
    "resource",
    {
        None: " ",
        Resource.GOLD: "$",
        Resource.IRON: "/",
        Resource.GAME: "e",
        Resource.FURS: "u",
        Resource.COAL: "c",
        Resource.FISH: "y",
        Resource.FRUIT: "f",
        Resource.GEMS: "g",
        Resource.BUFFALO: "b",
        Resource.WHEAT: "j",
        Resource.OASIS: "o",
        Resource.PEAT: "a",
        Resource.PHEASANT: "p",
        Resource.RESOURCES: "r",
        Resource.IVORY: "i",
        Resource.SILK: "s",
        Resource.SPICE: "t",
        Resource.WHALES: "v",
        Resource.WINE: "w",
        Resource.OIL: "x",
    },
)
if len(RESOURCE) != len(Resource) + 1:
    raise ValueError("resource: every resource needs a symbol.")

ORDER_KIND = _table_for(
    "order",
    OrderKind,
    {
        OrderKind.MOVE: "m",
        OrderKind.FULL_MP: "w",
        OrderKind.ACTIVITY: "a",
        OrderKind.BUILD_CITY: "b",
        OrderKind.DISBAND: "d",
        OrderKind.BUILD_WONDER: "u",
        OrderKind.TRADE_ROUTE: "t",
        OrderKind.HOMECITY: "h",
    },
)

# Numeric keypad layout.
DIRECTION = _table_for(
    "direction",
    Direction,
    {
        Direction.NORTH: "8",
        Direction.SOUTH: "2",
        Direction.EAST: "6",
        Direction.WEST: "4",
        Direction.NORTHEAST: "9",
        Direction.NORTHWEST: "7",
        Direction.SOUTHEAST: "3",
        Direction.SOUTHWEST: "1",
    },
)

ACTIVITY = _table_for(
    "activity",
    Activity,
    {
        Activity.IDLE: "w",
        Activity.POLLUTION: "p",
        Activity.OLD_ROAD: "r",
        Activity.MINE: "m",
        Activity.IRRIGATE: "i",
        Activity.FORTIFIED: "f",
        Activity.FORTRESS: "t",
        Activity.SENTRY: "s",
        Activity.OLD_RAILROAD: "l",
        Activity.PILLAGE: "e",
        Activity.GOTO: "g",
        Activity.EXPLORE: "x",
        Activity.TRANSFORM: "o",
        Activity.UNKNOWN: "?",
        Activity.AIRBASE: "a",
        Activity.FORTIFYING: "y",
        Activity.FALLOUT: "u",
        Activity.PATROL_UNUSED: "P",
        Activity.BASE: "b",
        Activity.GEN_ROAD: "R",
        Activity.CONVERT: "c",
    },
)


def num2char(number: int) -> str:
    """Encode a small non-negative integer; out of range values become '?'."""
    if 0 <= number < len(NUM_CHARS):
        return NUM_CHARS[number]
    return "?"


def char2num(char: str) -> int:
    index = NUM_CHARS.find(char) if len(char) == 1 else -1
    if index < 0:
        raise UnknownSymbol("number", char)
    return index


def nibble_windows(size: int) -> Iterator[List[int | None]]:
    """Yield groups of four consecutive indices covering ``0..size-1``.

    The last group is padded with None when ``size`` is not a multiple of 4.
    """
    for start in range(0, size, NIBBLE_WIDTH):
        yield [
            start + offset if start + offset < size else None
            for offset in range(NIBBLE_WIDTH)
        ]


def nibble_group_count(size: int) -> int:
    return (size + NIBBLE_WIDTH - 1) // NIBBLE_WIDTH


def pack_nibble(window: Sequence[int | None], predicate: Callable[[int], bool]) -> str:
    """Return the hex char whose bit i is set iff slot i exists and matches."""
    bits = 0
    for bit, slot in enumerate(window):
        if slot is not None and predicate(slot):
            bits |= 1 << bit
    return HEX_CHARS[bits]


def unpack_nibble(char: str, window: Sequence[int | None]) -> List[int]:
    """Return the slots of ``window`` whose bit is set in ``char``."""
    bits = HEX_CHARS.find(char) if len(char) == 1 else -1
    if bits < 0:
        raise UnknownSymbol("hex", char)
    members: List[int] = []
    for bit, slot in enumerate(window):
        if bits & (1 << bit):
            if slot is None:
                raise UnknownSymbol("hex", char)
            members.append(slot)
    return members


def encode_bits(size: int, predicate: Callable[[int], bool]) -> str:
    """Render a ``0``/``1`` string of length ``size``."""
    return "".join("1" if predicate(index) else "0" for index in range(size))


def decode_bits(text: str, size: int) -> List[int]:
    """Return the indices set in a ``0``/``1`` string.

    Raises ValueError when the length differs from ``size`` or other
    characters appear.
    """
    if len(text) != size:
        raise ValueError(f"expected {size} bits, found {len(text)}")
    members: List[int] = []
    for index, char in enumerate(text):
        if char == "1":
            members.append(index)
        elif char != "0":
            raise ValueError(f"invalid bit {char!r} at position {index}")
    return members
