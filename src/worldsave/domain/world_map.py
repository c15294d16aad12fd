"""Tile grid structures."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Set, Tuple

from .enums import Resource, Terrain


@dataclass(slots=True)
class Tile:
    """One map position. Coordinates are implicit in the grid."""

    terrain: Terrain = Terrain.UNKNOWN
    specials: Set[str] = field(default_factory=set)
    bases: Set[str] = field(default_factory=set)
    roads: Set[str] = field(default_factory=set)
    resource: Resource | None = None
    owner: int | None = None
    claimer: int | None = None
    worked_by: int | None = None
    known_by: Set[int] = field(default_factory=set)
    units: List[int] = field(default_factory=list)
    spec_sprite: str | None = None
    label: str | None = None


@dataclass(slots=True)
class StartPosition:
    """Start position with the nations allowed (or excluded) there."""

    x: int
    y: int
    exclude: bool = False
    nations: List[str] = field(default_factory=list)


@dataclass
class WorldMap:
    """Row-major grid of tiles."""

    xsize: int
    ysize: int
    tiles: List[Tile] = field(default_factory=list)
    startpos: List[StartPosition] = field(default_factory=list)
    have_huts: bool = True

    def __post_init__(self) -> None:
        if self.xsize <= 0 or self.ysize <= 0:
            raise ValueError("Map dimensions must be positive.")
        if not self.tiles:
            self.tiles = [Tile() for _ in range(self.xsize * self.ysize)]
        elif len(self.tiles) != self.xsize * self.ysize:
            raise ValueError(
                f"Expected {self.xsize * self.ysize} tiles, got {len(self.tiles)}."
            )

    def index_of(self, x: int, y: int) -> int:
        if not self.contains(x, y):
            raise IndexError(f"Position ({x}, {y}) is outside the map.")
        return y * self.xsize + x

    def position_of(self, index: int) -> Tuple[int, int]:
        if not 0 <= index < len(self.tiles):
            raise IndexError(f"Tile index {index} is outside the map.")
        return index % self.xsize, index // self.xsize

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.xsize and 0 <= y < self.ysize

    def tile_at(self, x: int, y: int) -> Tile:
        return self.tiles[self.index_of(x, y)]

    def iterate(self) -> Iterator[Tuple[int, int, Tile]]:
        """Yield (x, y, tile) in row-major order."""
        for index, tile in enumerate(self.tiles):
            yield index % self.xsize, index // self.xsize, tile
