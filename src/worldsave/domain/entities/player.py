"""Player-level models: diplomacy, research and space program."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Set

from worldsave.domain.enums import DiplomaticState, SpaceshipState

from .city import City
from .unit import Unit

NUM_SS_STRUCTURALS = 32


@dataclass(slots=True)
class PlayerColor:
    r: int
    g: int
    b: int


@dataclass(slots=True)
class DiplState:
    """Relationship of one player towards another."""

    type: DiplomaticState = DiplomaticState.NO_CONTACT
    max_state: DiplomaticState = DiplomaticState.NO_CONTACT
    first_contact_turn: int = 0
    turns_left: int = 0
    has_reason_to_cancel: int = 0
    contact_turns_left: int = 0
    embassy: bool = False
    gives_shared_vision: bool = False


@dataclass(slots=True)
class Research:
    """Research progress. Tech references are rule names.

    ``A_NONE``, ``A_UNSET`` and ``A_FUTURE`` are placeholders understood by
    the document format; an empty string means "unknown".
    """

    goal: str = "A_UNSET"
    researching: str = "A_UNSET"
    researching_saved: str = ""
    bulbs_researched: int = 0
    bulbs_before: int = 0
    bulbs_last_turn: int = 0
    techs_researched: int = 1
    future_tech: int = 0
    got_tech: bool = False
    known: Set[str] = field(default_factory=lambda: {"A_NONE"})


@dataclass(slots=True)
class Spaceship:
    state: SpaceshipState = SpaceshipState.NONE
    structurals: int = 0
    components: int = 0
    modules: int = 0
    fuel: int = 0
    propulsion: int = 0
    habitation: int = 0
    life_support: int = 0
    solar_panels: int = 0
    structure: Set[int] = field(default_factory=set)
    launch_year: int = 0


@dataclass
class Player:
    """A participant in the game with everything it owns."""

    number: int
    name: str
    username: str = ""
    ranked_username: str = ""
    delegation_username: str = ""
    ai_type: str = "classic"
    nation: str = ""
    team_no: int = -1
    government: str = "Despotism"
    target_government: str | None = None
    city_style: str = "European"
    is_male: bool = True
    is_alive: bool = True
    ai_controlled: bool = False
    color: PlayerColor | None = None
    diplstates: Dict[int, DiplState] = field(default_factory=dict)
    ai_love: Dict[int, int] = field(default_factory=dict)
    ai_skill_level: int = 0
    barbarian_type: int = 0
    gold: int = 0
    tax: int = 30
    science: int = 40
    luxury: int = 30
    research: Research = field(default_factory=Research)
    trait_mods: Dict[str, int] = field(default_factory=dict)
    got_first_city: bool = False
    revolution_finishes: int = -1
    units_built: int = 0
    units_killed: int = 0
    units_lost: int = 0
    spaceship: Spaceship = field(default_factory=Spaceship)
    lost_wonders: Set[str] = field(default_factory=set)
    cities: List[City] = field(default_factory=list)
    units: List[Unit] = field(default_factory=list)
    attribute_block: bytes | None = None
