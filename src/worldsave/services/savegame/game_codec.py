"""Sections outside the map and the player records."""
from __future__ import annotations

import logging
from typing import List

from worldsave.core.random_state import RANDOM_STATE_WORDS, RandomState
from worldsave.domain.enums import ServerState
from worldsave.domain.state import GameInfo, ScenarioInfo
from worldsave.services.errors import MalformedField
from worldsave.store import StoreTypeError

from .blocks import read_quoted, write_quoted
from .compat import CURRENT_VERSION
from .fields import (
    bool_field,
    int_field,
    optional_bool,
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

logger = logging.getLogger(__name__)

SAVEFILE_OPTIONS_DEFAULT = " +version2"
RANDOM_TABLE_ROWS = 8
RANDOM_WORDS_PER_ROW = RANDOM_STATE_WORDS // RANDOM_TABLE_ROWS
TIMEOUT_KEYS = ("timeoutint", "timeoutintinc", "timeoutinc", "timeoutincmult", "timeoutcounter")

_GAME_FIELDS = (
    int_field("version"),
    str_field("meta_patches", required=False, default=""),
    bool_field("meta_usermessage", required=False, default=False),
    str_field("meta_server", required=False, default=""),
    str_field("id", required=False, default=""),
    str_field("serverid", "server_id", required=False, default=""),
    int_field("skill_level"),
    int_field("phase_mode"),
    int_field("phase_mode_stored", required=False, default=0),
    int_field("phase"),
    int_field("scoreturn", required=False, default=0),
)

_GAME_COUNTER_FIELDS = (
    int_field("turn"),
    int_field("year"),
    bool_field("year_0_hack", required=False, default=False),
    int_field("globalwarming", required=False, default=0),
    int_field("heating", required=False, default=0),
    int_field("warminglevel", required=False, default=8),
    int_field("nuclearwinter", required=False, default=0),
    int_field("cooling", required=False, default=0),
    int_field("coolinglevel", required=False, default=8),
)


# -- [scenario] --------------------------------------------------------


def save_scenario(session: SaveSession) -> None:
    document = session.document
    scenario = session.world.scenario
    if not session.scenario or not scenario.is_scenario:
        document.set_bool("scenario.is_scenario", False)
        return
    document.set_bool("scenario.is_scenario", True)
    document.set_str("scenario.name", scenario.name)
    if scenario.description:
        document.set_str("scenario.description", scenario.description)
    document.set_bool("scenario.players", scenario.players)
    document.set_bool("scenario.startpos_nations", scenario.startpos_nations)


def load_scenario(session: LoadSession) -> None:
    document = session.document
    is_scenario = optional_bool(document, "scenario.is_scenario", False)
    if not is_scenario:
        session.world.scenario = ScenarioInfo(is_scenario=False)
        return
    session.world.scenario = ScenarioInfo(
        is_scenario=True,
        name=require_str(document, "scenario.name"),
        description=optional_str(document, "scenario.description", "") or "",
        players=optional_bool(document, "scenario.players", True),
        startpos_nations=optional_bool(document, "scenario.startpos_nations", False),
    )


# -- [savefile] --------------------------------------------------------


def save_savefile(session: SaveSession) -> None:
    session.add_savefile_option(SAVEFILE_OPTIONS_DEFAULT)
    document = session.document
    document.set_int("savefile.version", CURRENT_VERSION)
    document.set_str("savefile.reason", session.reason)
    document.set_str("savefile.rulesetdir", session.options.ruleset_dir)
    session.context.write_header(document)


def load_savefile(session: LoadSession) -> None:
    document = session.document
    options = optional_str(document, "savefile.options", "") or ""
    if "+version2" not in options.split():
        session.report.warn("SAVEFILE_OPTIONS", "Document does not declare the +version2 layout.", options=options)
    session.world.ruleset_name = optional_str(document, "savefile.rulesetdir", session.world.ruleset_name) or ""
    reason = optional_str(document, "savefile.reason", "")
    logger.debug("Loading document saved for %r with ruleset %s.", reason, session.world.ruleset_name)


# -- [game] ------------------------------------------------------------


def saved_server_state(session: SaveSession) -> ServerState:
    game = session.world.game
    if session.scenario and not session.world.scenario.players:
        return ServerState.INITIAL
    return game.server_state if game.is_new_game else ServerState.RUNNING


def decide_save_players(session: SaveSession) -> bool:
    if not session.world.game.started:
        return False
    if session.scenario:
        return session.world.scenario.players
    return True


def save_game(session: SaveSession) -> None:
    document = session.document
    game = session.world.game
    write_record(document, "game", game, _GAME_FIELDS[:1])
    document.set_str("game.server_state", saved_server_state(session).value)
    write_record(document, "game", game, _GAME_FIELDS[1:])
    for key in TIMEOUT_KEYS:
        document.set_int(f"game.{key}", 0)
    write_record(document, "game", game, _GAME_COUNTER_FIELDS)
    write_name_bits(document, "game.global_advances", session.context.technology, game.global_advances)
    document.set_bool("game.citizen_nationality", game.citizen_nationality)
    session.save_players = decide_save_players(session)
    document.set_bool("game.save_players", session.save_players)


def load_game(session: LoadSession) -> None:
    document = session.document
    values = read_record(document, "game", _GAME_FIELDS + _GAME_COUNTER_FIELDS)
    state_name = require_str(document, "game.server_state")
    try:
        server_state = ServerState(state_name)
    except ValueError as exc:
        raise MalformedField("game.server_state", f"unknown server state {state_name!r}") from exc
    save_players = optional_bool(document, "game.save_players", True)
    game = GameInfo(
        server_state=server_state,
        global_advances=read_name_bits(document, "game.global_advances", session.context.technology.names),
        citizen_nationality=optional_bool(document, "game.citizen_nationality", True),
        save_known=optional_bool(document, "game.save_known", False),
        started=save_players or server_state is not ServerState.INITIAL,
        **values,
    )
    session.world.game = game
    session.save_players = save_players


# -- [random] ----------------------------------------------------------


def save_random(session: SaveSession) -> None:
    document = session.document
    state = session.world.random_state
    if state is None or not session.options.save_random:
        document.set_bool("random.save", False)
        return
    document.set_bool("random.save", True)
    document.set_int("random.index_J", state.j)
    document.set_int("random.index_K", state.k)
    document.set_int("random.index_X", state.x)
    for row in range(RANDOM_TABLE_ROWS):
        words = state.v[row * RANDOM_WORDS_PER_ROW:(row + 1) * RANDOM_WORDS_PER_ROW]
        document.set_str(f"random.table{row}", " ".join(f"{word:8x}" for word in words))


def load_random(session: LoadSession) -> None:
    document = session.document
    if not optional_bool(document, "random.save", False):
        session.world.random_state = None
        return
    words: List[int] = []
    for row in range(RANDOM_TABLE_ROWS):
        path = f"random.table{row}"
        tokens = require_str(document, path).split()
        if len(tokens) != RANDOM_WORDS_PER_ROW:
            raise MalformedField(path, f"expected {RANDOM_WORDS_PER_ROW} words, found {len(tokens)}")
        try:
            words.extend(int(token, 16) for token in tokens)
        except ValueError as exc:
            raise MalformedField(path, "words must be hexadecimal") from exc
    try:
        session.world.random_state = RandomState(
            j=require_int(document, "random.index_J"),
            k=require_int(document, "random.index_K"),
            x=require_int(document, "random.index_X"),
            v=words,
        )
    except ValueError as exc:
        raise MalformedField("random.table0", str(exc)) from exc


# -- [script] ----------------------------------------------------------


def save_script(session: SaveSession) -> None:
    document = session.document
    document.add_section("script")
    provider = session.script_provider
    data = provider.serialize() if provider is not None else session.world.script_state
    if data is not None:
        write_quoted(document, "script.state", data)


def load_script(session: LoadSession) -> None:
    document = session.document
    if not document.has("script.state"):
        session.world.script_state = None
        return
    data = read_quoted(document, "script.state")
    session.world.script_state = data
    if session.script_provider is not None:
        session.script_provider.deserialize(data)


# -- [settings] --------------------------------------------------------


def save_settings(session: SaveSession) -> None:
    document = session.document
    settings = session.world.settings
    document.set_int("settings.set_count", len(settings))
    for number, (name, value) in enumerate(settings.items()):
        document.set_str(f"settings.set{number}.name", name)
        document.set_value(f"settings.set{number}.value", value)


def load_settings(session: LoadSession) -> None:
    document = session.document
    settings = session.world.settings
    settings.clear()
    for number in range(optional_int(document, "settings.set_count", 0)):
        name = require_str(document, f"settings.set{number}.name")
        path = f"settings.set{number}.value"
        value = document.lookup_value(path)
        if value is None or isinstance(value, list):
            raise MalformedField(path, "setting value must be an int, bool or string")
        settings[name] = value


# -- [players] ---------------------------------------------------------


def save_players_section(session: SaveSession) -> None:
    document = session.document
    world = session.world
    document.set_int("players.nplayers", len(world.players))
    great_wonders = set(session.ruleset.great_wonders())
    destroyed = {name for name in world.destroyed_wonders if name in great_wonders}
    write_name_bits(document, "players.destroyed_wonders", session.context.improvement, destroyed)
    document.set_int("players.identity_number_used", world.identity_number_used)
    for position, number in enumerate(world.shuffled_players):
        document.set_int(f"players.shuffled_player_{position}", number)


def load_players_section(session: LoadSession) -> int:
    """Read the global player entries and return the player count."""
    document = session.document
    world = session.world
    count = require_int(document, "players.nplayers")
    if count < 0:
        raise MalformedField("players.nplayers", "must not be negative")
    world.destroyed_wonders = read_name_bits(
        document, "players.destroyed_wonders", session.context.improvement.names
    )
    world.identity_number_used = optional_int(document, "players.identity_number_used", 0)
    world.shuffled_players = []
    position = 0
    while True:
        try:
            number = document.lookup_int(f"players.shuffled_player_{position}")
        except StoreTypeError as exc:
            raise MalformedField(f"players.shuffled_player_{position}", str(exc)) from exc
        if number is None:
            break
        world.shuffled_players.append(number)
        position += 1
    return count


# -- [mapimg] ----------------------------------------------------------


def save_mapimg(session: SaveSession) -> None:
    document = session.document
    definitions = session.world.mapimg_defs
    document.set_int("mapimg.count", len(definitions))
    for number, definition in enumerate(definitions):
        document.set_str(f"mapimg.mapdef{number}", definition)


def load_mapimg(session: LoadSession) -> None:
    document = session.document
    count = optional_int(document, "mapimg.count", 0)
    session.world.mapimg_defs = [require_str(document, f"mapimg.mapdef{number}") for number in range(count)]