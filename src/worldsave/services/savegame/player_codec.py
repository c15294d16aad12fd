"""Player records: ``player<N>`` sections and everything nested in them."""
from __future__ import annotations

import logging
from typing import List

from worldsave.domain.entities import (
    NUM_SS_STRUCTURALS,
    DiplState,
    Player,
    PlayerColor,
    Research,
    Spaceship,
)
from worldsave.domain.enums import DiplomaticState, SpaceshipState
from worldsave.services.errors import MalformedField

from .blocks import read_block, write_block
from .city_codec import load_cities, save_cities
from .context import TECH_NONE
from .encoding import decode_bits, encode_bits
from .fields import (
    bool_field,
    enum_field,
    int_field,
    optional_int,
    optional_str,
    read_name_bits,
    read_record,
    require_int,
    require_str,
    str_field,
    write_name_bits,
    write_record,
)
from .session import LoadSession, SaveSession
from .unit_codec import load_units, save_units

logger = logging.getLogger(__name__)

TECH_PSEUDO_NAMES = frozenset({TECH_NONE, "A_UNSET", "A_FUTURE", ""})

_IDENTITY_FIELDS = (
    str_field("ai_type"),
    str_field("name"),
    str_field("username", required=False, default=""),
)

_PROFILE_FIELDS = (
    str_field("ranked_username", required=False, default=""),
    str_field("delegation_username", required=False, default=""),
    str_field("nation"),
    int_field("team_no", required=False, default=-1),
    str_field("government_name", "government"),
)

_FLAG_FIELDS = (
    str_field("city_style_by_name", "city_style"),
    bool_field("is_male", required=False, default=True),
    bool_field("is_alive"),
    bool_field("ai.control", "ai_controlled", required=False, default=False),
)

_DIPLSTATE_FIELDS = (
    enum_field("type", DiplomaticState),
    enum_field("max_state", DiplomaticState),
    int_field("first_contact_turn"),
    int_field("turns_left"),
    int_field("has_reason_to_cancel"),
    int_field("contact_turns_left"),
    bool_field("embassy"),
    bool_field("gives_shared_vision"),
)

_ECONOMY_FIELDS = (
    int_field("ai.skill_level", "ai_skill_level", required=False, default=0),
    int_field("ai.is_barbarian", "barbarian_type", required=False, default=0),
    int_field("gold"),
    int_field("rates.tax", "tax"),
    int_field("rates.science", "science"),
    int_field("rates.luxury", "luxury"),
)

_RESEARCH_FIELDS = (
    str_field("goal_name", "goal"),
    int_field("bulbs_last_turn", required=False, default=0),
    int_field("techs", "techs_researched"),
    int_field("futuretech", "future_tech", required=False, default=0),
    int_field("bulbs_before", required=False, default=0),
    str_field("saved_name", "researching_saved", required=False, default=""),
    int_field("bulbs", "bulbs_researched"),
    str_field("now_name", "researching"),
    bool_field("got_tech", required=False, default=False),
)

_SCORE_FIELDS = (
    bool_field("capital", "got_first_city", required=False, default=False),
    int_field("revolution_finishes", required=False, default=-1),
    int_field("units_built", required=False, default=0),
    int_field("units_killed", required=False, default=0),
    int_field("units_lost", required=False, default=0),
)

_SPACESHIP_PART_FIELDS = (
    int_field("structurals"),
    int_field("components"),
    int_field("modules"),
    int_field("fuel"),
    int_field("propulsion"),
    int_field("habitation"),
    int_field("life_support"),
    int_field("solar_panels"),
)


# -- saving ------------------------------------------------------------


def save_player(session: SaveSession, player: Player) -> None:
    _save_player_main(session, player)
    save_cities(session, player)
    save_units(session, player)
    if player.attribute_block is not None:
        write_block(
            session.document,
            f"player{player.number}",
            player.attribute_block,
            session.options.attribute_part_size,
        )


def _save_player_main(session: SaveSession, player: Player) -> None:
    document = session.document
    world = session.world
    context = session.context
    prefix = f"player{player.number}"

    write_record(document, prefix, player, _IDENTITY_FIELDS)
    if player.color is not None:
        document.set_int(f"{prefix}.color.r", player.color.r)
        document.set_int(f"{prefix}.color.g", player.color.g)
        document.set_int(f"{prefix}.color.b", player.color.b)
    elif world.game.started:
        session.report.warn("PLAYER_COLOR_MISSING", "Game has started, yet the player has no color.", player=player.number)
    write_record(document, prefix, player, _PROFILE_FIELDS)
    if player.target_government is not None:
        document.set_str(f"{prefix}.target_government_name", player.target_government)
    write_record(document, prefix, player, _FLAG_FIELDS)

    for other in world.players:
        state = player.diplstates.get(other.number) or DiplState()
        write_record(document, f"{prefix}.diplstate{other.number}", state, _DIPLSTATE_FIELDS)
    for other in world.players:
        document.set_int(f"{prefix}.ai{other.number}.love", player.ai_love.get(other.number, 0))

    write_record(document, prefix, player, _ECONOMY_FIELDS)

    research = player.research
    technologies = context.technology
    for name in (research.goal, research.researching_saved, research.researching):
        if name not in TECH_PSEUDO_NAMES:
            technologies.require_index(name)
    write_record(document, f"{prefix}.research", research, _RESEARCH_FIELDS)
    write_name_bits(document, f"{prefix}.research.done", technologies, research.known)

    for index, trait in enumerate(context.trait):
        document.set_int(f"{prefix}.trait.mod{index}", player.trait_mods.get(trait, 0))

    write_record(document, prefix, player, _SCORE_FIELDS)
    _save_spaceship(document, f"{prefix}.spaceship", player.spaceship)

    wonders = set(session.ruleset.wonders())
    lost = {name for name in player.lost_wonders if name in wonders}
    write_name_bits(document, f"{prefix}.lost_wonders", context.improvement, lost)


def _save_spaceship(document, prefix: str, ship: Spaceship) -> None:
    document.set_int(f"{prefix}.state", int(ship.state))
    if ship.state is SpaceshipState.NONE:
        return
    write_record(document, prefix, ship, _SPACESHIP_PART_FIELDS)
    document.set_str(
        f"{prefix}.structure",
        encode_bits(NUM_SS_STRUCTURALS, lambda index: index in ship.structure),
    )
    if ship.state >= SpaceshipState.LAUNCHED:
        document.set_int(f"{prefix}.launch_year", ship.launch_year)


# -- loading -----------------------------------------------------------


def load_player(session: LoadSession, number: int, player_numbers: List[int]) -> Player:
    player = _load_player_main(session, number, player_numbers)
    load_cities(session, player, player_numbers)
    load_units(session, player)
    player.attribute_block = read_block(session.document, f"player{number}", session.report)
    return player


def _load_player_main(session: LoadSession, number: int, player_numbers: List[int]) -> Player:
    document = session.document
    context = session.context
    prefix = f"player{number}"

    values = read_record(
        document, prefix, _IDENTITY_FIELDS + _PROFILE_FIELDS + _FLAG_FIELDS + _ECONOMY_FIELDS + _SCORE_FIELDS
    )
    player = Player(number=number, **values)
    player.target_government = optional_str(document, f"{prefix}.target_government_name", None)
    if document.has(f"{prefix}.color.r"):
        player.color = PlayerColor(
            r=require_int(document, f"{prefix}.color.r"),
            g=require_int(document, f"{prefix}.color.g"),
            b=require_int(document, f"{prefix}.color.b"),
        )

    for other in player_numbers:
        state_values = read_record(document, f"{prefix}.diplstate{other}", _DIPLSTATE_FIELDS)
        player.diplstates[other] = DiplState(**state_values)
        player.ai_love[other] = optional_int(document, f"{prefix}.ai{other}.love", 0)

    research = Research(**read_record(document, f"{prefix}.research", _RESEARCH_FIELDS))
    for key, name in (
        ("goal_name", research.goal),
        ("saved_name", research.researching_saved),
        ("now_name", research.researching),
    ):
        if name not in TECH_PSEUDO_NAMES and context.technology.index_of(name) is None:
            raise MalformedField(f"{prefix}.research.{key}", f"unknown technology {name!r}")
    research.known = read_name_bits(document, f"{prefix}.research.done", context.technology.names)
    player.research = research

    for index, trait in enumerate(context.trait):
        modifier = optional_int(document, f"{prefix}.trait.mod{index}", 0)
        if modifier:
            player.trait_mods[trait] = modifier

    player.spaceship = _load_spaceship(document, f"{prefix}.spaceship")
    player.lost_wonders = read_name_bits(document, f"{prefix}.lost_wonders", context.improvement.names)
    logger.debug("Loaded player %d (%s).", number, player.name)
    return player


def _load_spaceship(document, prefix: str) -> Spaceship:
    state_path = f"{prefix}.state"
    try:
        state = SpaceshipState(optional_int(document, state_path, 0))
    except ValueError as exc:
        raise MalformedField(state_path, "unknown spaceship state") from exc
    if state is SpaceshipState.NONE:
        return Spaceship()
    ship = Spaceship(state=state, **read_record(document, prefix, _SPACESHIP_PART_FIELDS))
    structure_path = f"{prefix}.structure"
    try:
        ship.structure = set(decode_bits(require_str(document, structure_path), NUM_SS_STRUCTURALS))
    except ValueError as exc:
        raise MalformedField(structure_path, str(exc)) from exc
    if state >= SpaceshipState.LAUNCHED:
        ship.launch_year = require_int(document, f"{prefix}.launch_year")
    return ship
