"""World-level state tracking."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Set, Tuple

from worldsave.core.random_state import RandomState
from worldsave.core.types import SettingValue
from worldsave.domain.entities import City, DiplState, Player, Unit
from worldsave.domain.enums import ServerState
from worldsave.domain.world_map import WorldMap


@dataclass
class GameInfo:
    """Global game counters and metadata."""

    version: int = 20400
    server_state: ServerState = ServerState.RUNNING
    meta_patches: str = ""
    meta_usermessage: bool = False
    meta_server: str = ""
    id: str = ""
    server_id: str = ""
    skill_level: int = 3
    phase_mode: int = 0
    phase_mode_stored: int = 0
    phase: int = 0
    scoreturn: int = 20
    turn: int = 1
    year: int = -4000
    year_0_hack: bool = False
    globalwarming: int = 0
    heating: int = 0
    warminglevel: int = 8
    nuclearwinter: int = 0
    cooling: int = 0
    coolinglevel: int = 8
    global_advances: Set[str] = field(default_factory=set)
    citizen_nationality: bool = True
    save_known: bool = True
    started: bool = True
    is_new_game: bool = False


@dataclass
class ScenarioInfo:
    is_scenario: bool = False
    name: str = ""
    description: str = ""
    players: bool = True
    startpos_nations: bool = False


@dataclass
class WorldState:
    """Everything the save engine reads and writes.

    Cities and units are owned by their players; the id indexes below are
    kept in step by ``add_city`` / ``add_unit`` and rebuilt by ``reindex``.
    """

    game: GameInfo = field(default_factory=GameInfo)
    scenario: ScenarioInfo = field(default_factory=ScenarioInfo)
    map: WorldMap | None = None
    players: List[Player] = field(default_factory=list)
    shuffled_players: List[int] = field(default_factory=list)
    destroyed_wonders: Set[str] = field(default_factory=set)
    identity_number_used: int = 0
    settings: Dict[str, SettingValue] = field(default_factory=dict)
    random_state: RandomState | None = None
    script_state: bytes | None = None
    mapimg_defs: List[str] = field(default_factory=list)
    ruleset_name: str = "classic"
    _cities: Dict[int, Tuple[Player, City]] = field(default_factory=dict, repr=False, compare=False)
    _units: Dict[int, Tuple[Player, Unit]] = field(default_factory=dict, repr=False, compare=False)

    def player_by_number(self, number: int) -> Player | None:
        for player in self.players:
            if player.number == number:
                return player
        return None

    def add_player(self, player: Player) -> Player:
        """Register ``player`` and give every pair of players a relationship entry."""
        if self.player_by_number(player.number) is not None:
            raise ValueError(f"Player number {player.number} is already taken.")
        self.players.append(player)
        for other in self.players:
            other.diplstates.setdefault(player.number, DiplState())
            other.ai_love.setdefault(player.number, 0)
            player.diplstates.setdefault(other.number, DiplState())
            player.ai_love.setdefault(other.number, 0)
        if player.number not in self.shuffled_players:
            self.shuffled_players.append(player.number)
        for city in player.cities:
            self._cities[city.id] = (player, city)
        for unit in player.units:
            self._units[unit.id] = (player, unit)
        return player

    def add_city(self, owner: Player | int, city: City) -> City:
        player = self._owner(owner)
        if city.id in self._cities:
            raise ValueError(f"City id {city.id} is already taken.")
        player.cities.append(city)
        self._cities[city.id] = (player, city)
        return city

    def add_unit(self, owner: Player | int, unit: Unit) -> Unit:
        """Attach ``unit`` to its owner, its tile and its home city."""
        player = self._owner(owner)
        if unit.id in self._units:
            raise ValueError(f"Unit id {unit.id} is already taken.")
        player.units.append(unit)
        self._units[unit.id] = (player, unit)
        if self.map is not None and self.map.contains(unit.x, unit.y):
            self.map.tile_at(unit.x, unit.y).units.append(unit.id)
        if unit.homecity:
            home = self.city_by_id(unit.homecity)
            if home is not None:
                home.supported_units.append(unit.id)
        return unit

    def city_by_id(self, city_id: int) -> City | None:
        entry = self._lookup("city", city_id)
        return entry[1] if entry else None

    def unit_by_id(self, unit_id: int) -> Unit | None:
        entry = self._lookup("unit", unit_id)
        return entry[1] if entry else None

    def city_owner(self, city_id: int) -> Player | None:
        entry = self._lookup("city", city_id)
        return entry[0] if entry else None

    def unit_owner(self, unit_id: int) -> Player | None:
        entry = self._lookup("unit", unit_id)
        return entry[0] if entry else None

    def all_cities(self) -> Iterator[City]:
        for player in self.players:
            yield from player.cities

    def all_units(self) -> Iterator[Unit]:
        for player in self.players:
            yield from player.units

    def reindex(self) -> None:
        self._cities = {city.id: (player, city) for player in self.players for city in player.cities}
        self._units = {unit.id: (player, unit) for player in self.players for unit in player.units}

    def _lookup(self, kind: str, key: int):
        entry = self._index(kind).get(key)
        if entry is None:
            # Entities appended directly to a player's lists are picked up here.
            self.reindex()
            entry = self._index(kind).get(key)
        return entry

    def _index(self, kind: str) -> Dict[int, tuple]:
        return self._cities if kind == "city" else self._units

    def _owner(self, owner: Player | int) -> Player:
        if isinstance(owner, Player):
            return owner
        player = self.player_by_number(owner)
        if player is None:
            raise KeyError(f"Unknown player number {owner}.")
        return player
