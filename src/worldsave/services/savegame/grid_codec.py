"""Map section: per-row text lines for every tile attribute layer."""
from __future__ import annotations

import logging
import re
from typing import Callable, List, Set

from worldsave.domain.world_map import StartPosition, Tile, WorldMap
from worldsave.services.errors import MalformedField, SaveLoadError
from worldsave.store import SectionFile

from .context import OrderTable
from .encoding import (
    NIBBLE_WIDTH,
    RESOURCE,
    TERRAIN,
    nibble_windows,
    pack_nibble,
    unpack_nibble,
)
from .fields import optional_bool, optional_int, optional_str, require_int
from .session import LoadSession, SaveSession

logger = logging.getLogger(__name__)

MAX_PLAYER_SLOTS = 128
PLAYERS_PER_KNOWN_LINE = 32
NATION_SEPARATOR = "#"
NO_TOKEN = "-"

_SPRITE_KEY = re.compile(r"spec_sprite_(\d+)_(\d+)\Z")
_LABEL_KEY = re.compile(r"label_(\d+)_(\d+)\Z")


# -- saving ------------------------------------------------------------


def save_map(session: SaveSession) -> None:
    world_map = session.world.map
    if world_map is None:
        return
    logger.debug("Saving %dx%d map.", world_map.xsize, world_map.ysize)
    document = session.document
    document.set_int("map.xsize", world_map.xsize)
    document.set_int("map.ysize", world_map.ysize)
    document.set_bool("map.have_huts", world_map.have_huts)

    _write_char_lines(document, "map.t%04d", world_map, lambda tile: TERRAIN.encode(tile.terrain))
    _save_tile_decorations(document, world_map)
    if session.options.save_starts:
        _save_startpos(document, world_map)

    context = session.context
    _write_nibble_layers(document, "map.b%02d_%04d", world_map, context.bases, lambda tile: tile.bases)
    _write_nibble_layers(document, "map.r%02d_%04d", world_map, context.roads, lambda tile: tile.roads)
    session.add_savefile_option(" specials")
    _write_nibble_layers(
        document, "map.spe%02d_%04d", world_map, context.specials, lambda tile: tile.specials
    )
    _write_char_lines(document, "map.res%04d", world_map, lambda tile: RESOURCE.encode(tile.resource))

    if session.save_players:
        _write_token_lines(document, "map.owner%04d", world_map, lambda tile: tile.owner)
        _write_token_lines(document, "map.source%04d", world_map, lambda tile: tile.claimer)
        _write_token_lines(document, "map.worked%04d", world_map, lambda tile: tile.worked_by)
    _save_known(session, world_map)


def _write_char_lines(
    document: SectionFile, path: str, world_map: WorldMap, char_of: Callable[[Tile], str]
) -> None:
    for y in range(world_map.ysize):
        row = world_map.tiles[y * world_map.xsize:(y + 1) * world_map.xsize]
        document.set_str(path % y, "".join(char_of(tile) for tile in row))


def _write_nibble_layers(
    document: SectionFile,
    path: str,
    world_map: WorldMap,
    table: OrderTable,
    members_of: Callable[[Tile], Set[str]],
) -> None:
    indices = {
        id(tile): {table.require_index(name) for name in members_of(tile)} for tile in world_map.tiles
    }
    for group, window in enumerate(nibble_windows(table.size)):
        def char_of(tile: Tile, window=window) -> str:
            members = indices[id(tile)]
            return pack_nibble(window, lambda index: index in members)

        _write_char_lines(document, path.replace("%02d", f"{group:02d}", 1), world_map, char_of)


def _write_token_lines(
    document: SectionFile, path: str, world_map: WorldMap, value_of: Callable[[Tile], int | None]
) -> None:
    for y in range(world_map.ysize):
        row = world_map.tiles[y * world_map.xsize:(y + 1) * world_map.xsize]
        tokens = [NO_TOKEN if value_of(tile) is None else str(value_of(tile)) for tile in row]
        document.set_str(path % y, ",".join(tokens))


def _save_tile_decorations(document: SectionFile, world_map: WorldMap) -> None:
    for x, y, tile in world_map.iterate():
        if tile.spec_sprite is not None:
            document.set_str(f"map.spec_sprite_{x}_{y}", tile.spec_sprite)
        if tile.label is not None:
            document.set_str(f"map.label_{x}_{y}", tile.label)


def _save_startpos(document: SectionFile, world_map: WorldMap) -> None:
    document.set_int("map.startpos_count", len(world_map.startpos))
    for number, position in enumerate(world_map.startpos):
        prefix = f"map.startpos{number}"
        document.set_int(f"{prefix}.x", position.x)
        document.set_int(f"{prefix}.y", position.y)
        document.set_bool(f"{prefix}.exclude", position.exclude)
        document.set_str(f"{prefix}.nations", NATION_SEPARATOR.join(position.nations))


def _save_known(session: SaveSession, world_map: WorldMap) -> None:
    document = session.document
    if not session.save_players:
        document.set_bool("game.save_known", False)
        return
    document.set_bool("game.save_known", True)
    used = {player.number for player in session.world.players}
    if not used:
        return
    highest = max(used)
    if highest >= MAX_PLAYER_SLOTS:
        raise MalformedField(
            f"map.k{highest // NIBBLE_WIDTH:02d}_0000",
            f"player number {highest} exceeds the {MAX_PLAYER_SLOTS} known-tile slots",
        )
    lines = highest // PLAYERS_PER_KNOWN_LINE + 1
    groups = lines * PLAYERS_PER_KNOWN_LINE // NIBBLE_WIDTH
    for group, window in enumerate(nibble_windows(groups * NIBBLE_WIDTH)):
        if not any(slot in used for slot in window):
            continue

        def char_of(tile: Tile, window=window) -> str:
            return pack_nibble(window, lambda number: number in tile.known_by)

        _write_char_lines(document, "map.k%02d_%%04d" % group, world_map, char_of)


# -- loading -----------------------------------------------------------


def load_map(session: LoadSession) -> WorldMap | None:
    document = session.document
    if not document.has_section("map"):
        return None
    xsize = require_int(document, "map.xsize")
    ysize = require_int(document, "map.ysize")
    try:
        world_map = WorldMap(xsize=xsize, ysize=ysize)
    except ValueError as exc:
        raise MalformedField("map.xsize", str(exc)) from exc
    logger.debug("Loading %dx%d map.", xsize, ysize)
    world_map.have_huts = optional_bool(document, "map.have_huts", True)

    def set_terrain(tile: Tile, char: str) -> None:
        tile.terrain = TERRAIN.decode(char)

    def set_resource(tile: Tile, char: str) -> None:
        tile.resource = RESOURCE.decode(char)

    _read_char_lines(session, "map.t%04d", world_map, set_terrain)
    _load_tile_decorations(session, world_map)
    _load_startpos(document, world_map)

    context = session.context
    _read_nibble_layers(session, "map.b%02d_%04d", world_map, context.bases.require_name, len(context.bases), "bases")
    _read_nibble_layers(session, "map.r%02d_%04d", world_map, context.roads.require_name, len(context.roads), "roads")
    _read_nibble_layers(
        session, "map.spe%02d_%04d", world_map, context.specials.require_name, len(context.specials), "specials"
    )
    _read_char_lines(session, "map.res%04d", world_map, set_resource)

    if session.save_players:
        _read_token_lines(session, "map.owner%04d", world_map, _assign_owner)
        _load_claimer(session, world_map)
        _read_token_lines(session, "map.worked%04d", world_map, _assign_worked)
        if optional_bool(document, "game.save_known", False):
            _load_known(session, world_map)
    return world_map


def _row_tiles(world_map: WorldMap, y: int) -> List[Tile]:
    return world_map.tiles[y * world_map.xsize:(y + 1) * world_map.xsize]


def _read_line(session: LoadSession, path: str, width: int) -> str | None:
    line = optional_str(session.document, path, None)
    if line is None:
        session.report.warn("MAP_LINE_MISSING", "Map line is missing; tiles keep defaults.", path=path)
        return None
    if len(line) != width:
        session.report.warn(
            "MAP_LINE_LENGTH",
            f"Map line has {len(line)} chars, expected {width}.",
            path=path,
        )
    return line[:width]


def _read_char_lines(
    session: LoadSession, path: str, world_map: WorldMap, apply: Callable[[Tile, str], None]
) -> None:
    for y in range(world_map.ysize):
        row_path = path % y
        line = _read_line(session, row_path, world_map.xsize)
        if line is None:
            continue
        for x, (tile, char) in enumerate(zip(_row_tiles(world_map, y), line)):
            try:
                apply(tile, char)
            except SaveLoadError as exc:
                raise MalformedField(row_path, f"column {x}: {exc}") from exc


def _read_nibble_layers(
    session: LoadSession,
    path: str,
    world_map: WorldMap,
    name_at: Callable[[int], str],
    size: int,
    attr: str,
) -> None:
    for group, window in enumerate(nibble_windows(size)):
        def apply(tile: Tile, char: str, window=window) -> None:
            members = getattr(tile, attr)
            for index in unpack_nibble(char, window):
                members.add(name_at(index))

        _read_char_lines(session, path.replace("%02d", f"{group:02d}", 1), world_map, apply)


def _read_token_lines(
    session: LoadSession,
    path: str,
    world_map: WorldMap,
    apply: Callable[[LoadSession, WorldMap, Tile, int | None, str], None],
) -> None:
    for y in range(world_map.ysize):
        row_path = path % y
        line = optional_str(session.document, row_path, None)
        if line is None:
            session.report.warn("MAP_LINE_MISSING", "Map line is missing; tiles keep defaults.", path=row_path)
            continue
        tokens = line.split(",")
        if len(tokens) == world_map.xsize + 1 and tokens[-1] == "":
            tokens.pop()
        if len(tokens) != world_map.xsize:
            session.report.warn(
                "MAP_LINE_LENGTH",
                f"Map line has {len(tokens)} entries, expected {world_map.xsize}.",
                path=row_path,
            )
        for x, (tile, token) in enumerate(zip(_row_tiles(world_map, y), tokens)):
            token = token.strip()
            if token == NO_TOKEN:
                value = None
            else:
                try:
                    value = int(token)
                except ValueError as exc:
                    raise MalformedField(row_path, f"column {x}: invalid entry {token!r}") from exc
            apply(session, world_map, tile, value, row_path)


def _assign_owner(session: LoadSession, world_map: WorldMap, tile: Tile, value: int | None, path: str) -> None:
    # Checked against the loaded players once they exist.
    tile.owner = value


def _assign_worked(session: LoadSession, world_map: WorldMap, tile: Tile, value: int | None, path: str) -> None:
    tile.worked_by = value


def _load_claimer(session: LoadSession, world_map: WorldMap) -> None:
    size = len(world_map.tiles)

    def apply(session: LoadSession, world_map: WorldMap, tile: Tile, value: int | None, path: str) -> None:
        if value is not None and not 0 <= value < size:
            session.report.warn("INVALID_CLAIMER", f"Claiming tile {value} is off the map; cleared.", path=path)
            value = None
        tile.claimer = value

    _read_token_lines(session, "map.source%04d", world_map, apply)


def _load_known(session: LoadSession, world_map: WorldMap) -> None:
    groups = MAX_PLAYER_SLOTS // NIBBLE_WIDTH
    for group, window in enumerate(nibble_windows(groups * NIBBLE_WIDTH)):
        path = "map.k%02d_%%04d" % group
        # Groups without any used player slot are not written.
        if not session.document.has(path % 0):
            continue

        def apply(tile: Tile, char: str, window=window) -> None:
            tile.known_by.update(unpack_nibble(char, window))

        _read_char_lines(session, path, world_map, apply)


def _load_tile_decorations(session: LoadSession, world_map: WorldMap) -> None:
    for key, value in session.document.entries("map"):
        for pattern, attr in ((_SPRITE_KEY, "spec_sprite"), (_LABEL_KEY, "label")):
            match = pattern.match(key)
            if match is None:
                continue
            x, y = int(match.group(1)), int(match.group(2))
            if not isinstance(value, str) or not world_map.contains(x, y):
                session.report.warn("TILE_DECORATION_INVALID", "Tile decoration ignored.", path=f"map.{key}")
                continue
            setattr(world_map.tile_at(x, y), attr, value)


def _load_startpos(document: SectionFile, world_map: WorldMap) -> None:
    count = optional_int(document, "map.startpos_count", 0)
    for number in range(count):
        prefix = f"map.startpos{number}"
        nations = optional_str(document, f"{prefix}.nations", "") or ""
        world_map.startpos.append(
            StartPosition(
                x=require_int(document, f"{prefix}.x"),
                y=require_int(document, f"{prefix}.y"),
                exclude=optional_bool(document, f"{prefix}.exclude", False),
                nations=nations.split(NATION_SEPARATOR) if nations else [],
            )
        )
