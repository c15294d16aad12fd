"""Save and load orchestration for whole world documents."""
from __future__ import annotations

import logging
import re
from typing import Callable, List, Tuple

from worldsave.data.errors import DataError
from worldsave.data.ruleset import Ruleset
from worldsave.domain.state import WorldState
from worldsave.services.errors import LoadError, SaveLoadError, UnsupportedVersion
from worldsave.store import SectionFile, StoreError

from . import game_codec, grid_codec
from .compat import CompatRegistry, default_registry
from .context import LoadSaveContext
from .options import SaveOptions, ScriptStateProvider
from .player_codec import load_player, save_player
from .session import LoadSession, SaveSession
from .status import SaveReport

logger = logging.getLogger(__name__)

_PLAYER_SECTION = re.compile(r"player(\d+)\Z")


def unit_ordering_calc(world: WorldState) -> None:
    """Give every unit its position in its home city's and tile's unit lists."""
    for unit in world.all_units():
        unit.ord_city = 0
        unit.ord_map = 0
    for city in world.all_cities():
        for position, unit_id in enumerate(city.supported_units):
            unit = world.unit_by_id(unit_id)
            if unit is not None:
                unit.ord_city = position
    if world.map is not None:
        for tile in world.map.tiles:
            for position, unit_id in enumerate(tile.units):
                unit = world.unit_by_id(unit_id)
                if unit is not None:
                    unit.ord_map = position


class SavegameService:
    """Converts a ``WorldState`` to and from a ``SectionFile``.

    Saving never raises for engine problems; everything ends up in the
    returned report. ``load`` raises ``LoadError`` when a failure was
    recorded, ``load_with_report`` hands back the report instead.
    """

    def __init__(
        self,
        *,
        ruleset: Ruleset | None = None,
        options: SaveOptions | None = None,
        registry: CompatRegistry | None = None,
        script_provider: ScriptStateProvider | None = None,
    ) -> None:
        self._ruleset = ruleset
        self._options = options or SaveOptions()
        self._registry = registry or default_registry()
        self._script_provider = script_provider

    # -- save ----------------------------------------------------------

    def save(self, store: SectionFile, reason: str, is_scenario: bool, *, world: WorldState) -> SaveReport:
        report = SaveReport(operation="save")
        ruleset = self._ruleset or Ruleset(self._options.ruleset_dir)
        try:
            context = LoadSaveContext.from_ruleset(ruleset)
        except (DataError, ValueError) as exc:
            report.fail("RULESET_UNAVAILABLE", f"Cannot build order tables: {exc}")
            return report

        session = SaveSession(
            document=store,
            world=world,
            context=context,
            ruleset=ruleset,
            report=report,
            options=self._options,
            reason=reason,
            scenario=is_scenario,
            script_provider=self._script_provider,
        )
        stages: List[Tuple[str, Callable[[SaveSession], None]]] = [
            ("scenario", game_codec.save_scenario),
            ("savefile", game_codec.save_savefile),
            ("game", game_codec.save_game),
            ("random", game_codec.save_random),
            ("script", game_codec.save_script),
            ("settings", game_codec.save_settings),
            ("map", grid_codec.save_map),
            ("players", self._save_players),
            ("mapimg", game_codec.save_mapimg),
            ("sanitycheck", self._save_sanitycheck),
        ]
        for name, stage in stages:
            _run_stage(report, name, stage, session)
        if report.ok:
            logger.info("Saved world (%s) with %d warning(s).", reason, len(report.warnings()))
        else:
            logger.error("Failure saving world (%s).", reason)
        return report

    def _save_players(self, session: SaveSession) -> None:
        if not session.save_players:
            return
        game_codec.save_players_section(session)
        unit_ordering_calc(session.world)
        for player in session.world.players:
            save_player(session, player)

    def _save_sanitycheck(self, session: SaveSession) -> None:
        world = session.world
        if world.map is None:
            return
        for index, tile in enumerate(world.map.tiles):
            for unit_id in tile.units:
                if world.unit_by_id(unit_id) is None:
                    session.report.warn("DANGLING_TILE_UNIT", f"Tile lists unknown unit {unit_id}.", tile=index)

    # -- load ----------------------------------------------------------

    def load(self, store: SectionFile) -> WorldState:
        world, report = self.load_with_report(store)
        if world is None:
            raise LoadError(report)
        return world

    def load_with_report(self, store: SectionFile) -> Tuple[WorldState | None, SaveReport]:
        report = SaveReport(operation="load")
        try:
            applied = self._registry.upgrade(store)
            context = LoadSaveContext.from_header(store)
        except UnsupportedVersion as exc:
            report.fail("UNSUPPORTED_VERSION", str(exc), version=exc.version)
            return None, report
        except SaveLoadError as exc:
            report.fail("INVALID_HEADER", str(exc))
            return None, report
        if applied:
            logger.info("Upgraded document through schema versions %s.", applied)

        session = LoadSession(
            document=store,
            world=WorldState(),
            context=context,
            report=report,
            ruleset=self._ruleset,
            script_provider=self._script_provider,
        )
        stages: List[Tuple[str, Callable[[LoadSession], None]]] = [
            ("savefile", game_codec.load_savefile),
            ("ruleset", self._check_ruleset),
            ("scenario", game_codec.load_scenario),
            ("game", game_codec.load_game),
            ("random", game_codec.load_random),
            ("script", game_codec.load_script),
            ("settings", game_codec.load_settings),
            ("map", self._load_map),
            ("players", self._load_players),
            ("mapimg", game_codec.load_mapimg),
            ("references", self._resolve_references),
            ("sanitycheck", self._load_sanitycheck),
        ]
        for name, stage in stages:
            _run_stage(report, name, stage, session)
        if not report.ok:
            logger.error("Failure loading savegame.")
            return None, report
        return session.world, report

    def _check_ruleset(self, session: LoadSession) -> None:
        if session.ruleset is None:
            return
        unknown = session.context.unknown_to(session.ruleset)
        if unknown:
            listed = ", ".join(f"{table}:{name}" for table, name in unknown)
            session.report.fail(
                "UNKNOWN_RULE_NAME",
                f"Document uses names missing from ruleset '{session.ruleset.name}': {listed}.",
            )

    def _load_map(self, session: LoadSession) -> None:
        session.world.map = grid_codec.load_map(session)

    def _load_players(self, session: LoadSession) -> None:
        if not session.save_players:
            return
        document = session.document
        count = game_codec.load_players_section(session)
        numbers = [
            int(match.group(1))
            for match in map(_PLAYER_SECTION.match, document.section_names())
            if match is not None
        ]
        if len(numbers) != count:
            session.report.fail(
                "PLAYER_COUNT_MISMATCH",
                f"Document declares {count} players but holds {len(numbers)} player sections.",
            )
            return
        world = session.world
        for number in numbers:
            if not session.report.ok:
                return
            world.players.append(load_player(session, number, numbers))
        world.reindex()

    def _resolve_references(self, session: LoadSession) -> None:
        """Second pass: wire ids now that every city and unit exists."""
        world = session.world
        report = session.report
        world.reindex()
        numbers = {player.number for player in world.players}

        for player in world.players:
            for unit in player.units:
                if unit.homecity and world.city_by_id(unit.homecity) is None:
                    report.warn("DANGLING_HOMECITY", f"Home city {unit.homecity} does not exist; cleared.", unit=unit.id)
                    unit.homecity = 0
                if unit.transported_by is not None and world.unit_by_id(unit.transported_by) is None:
                    report.warn(
                        "DANGLING_TRANSPORTER",
                        f"Transporter {unit.transported_by} does not exist; cleared.",
                        unit=unit.id,
                    )
                    unit.transported_by = None

        by_homecity: dict[int, list] = {}
        for unit in world.all_units():
            by_homecity.setdefault(unit.homecity, []).append(unit)
        for city in world.all_cities():
            supported = sorted(by_homecity.get(city.id, []), key=lambda unit: unit.ord_city)
            city.supported_units = [unit.id for unit in supported]

        world_map = world.map
        if world_map is None:
            return
        placed: dict[int, list] = {}
        for unit in world.all_units():
            if not world_map.contains(unit.x, unit.y):
                report.warn("UNIT_OFF_MAP", f"Unit at ({unit.x}, {unit.y}) is outside the map.", unit=unit.id)
                continue
            placed.setdefault(world_map.index_of(unit.x, unit.y), []).append(unit)
        for index, tile in enumerate(world_map.tiles):
            occupants = sorted(placed.get(index, []), key=lambda unit: unit.ord_map)
            tile.units = [unit.id for unit in occupants]
            if tile.worked_by is not None and world.city_by_id(tile.worked_by) is None:
                report.warn("DANGLING_WORKED_CITY", f"Worked-by city {tile.worked_by} does not exist; cleared.", tile=index)
                tile.worked_by = None
            if tile.owner is not None and tile.owner not in numbers:
                report.warn("DANGLING_TILE_OWNER", f"Tile owner {tile.owner} is not a player; cleared.", tile=index)
                tile.owner = None

    def _load_sanitycheck(self, session: LoadSession) -> None:
        world = session.world
        for label, ids in (
            ("city", [city.id for city in world.all_cities()]),
            ("unit", [unit.id for unit in world.all_units()]),
        ):
            seen = set()
            for entity_id in ids:
                if entity_id in seen:
                    session.report.fail("DUPLICATE_ID", f"Duplicate {label} id {entity_id}.")
                seen.add(entity_id)
        if world.map is not None:
            for city in world.all_cities():
                if not world.map.contains(city.x, city.y):
                    session.report.warn("CITY_OFF_MAP", f"City {city.name} lies outside the map.", city=city.id)


def _run_stage(report: SaveReport, name: str, stage: Callable, session) -> None:
    if not report.ok:
        logger.debug("Skipping %s stage after earlier failure.", name)
        return
    try:
        stage(session)
    except SaveLoadError as exc:
        report.fail(_failure_code(exc), str(exc), stage=name)
    except StoreError as exc:
        report.fail("STORE_ERROR", str(exc), stage=name)
    except DataError as exc:
        report.fail("RULESET_UNAVAILABLE", str(exc), stage=name)


def _failure_code(exc: SaveLoadError) -> str:
    name = type(exc).__name__
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).upper()


def save_world(
    world: WorldState,
    *,
    reason: str = "manual",
    is_scenario: bool = False,
    ruleset: Ruleset | None = None,
    options: SaveOptions | None = None,
) -> Tuple[SectionFile, SaveReport]:
    """Save ``world`` into a fresh document."""
    document = SectionFile()
    report = SavegameService(ruleset=ruleset, options=options).save(
        document, reason, is_scenario, world=world
    )
    return document, report


def load_world(document: SectionFile, *, ruleset: Ruleset | None = None) -> WorldState:
    return SavegameService(ruleset=ruleset).load(document)
