"""Command line tools for inspecting and upgrading world documents."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Sequence

from worldsave.core.logging_config import configure_logging
from worldsave.data.errors import DataError
from worldsave.data.ruleset import Ruleset
from worldsave.domain.state import WorldState
from worldsave.presentation.cli import config
from worldsave.presentation.cli.save_slots import SaveSlotStore
from worldsave.services.errors import SaveLoadError
from worldsave.services.savegame import SavegameService, default_registry, format_issue
from worldsave.store import StoreError, read_document, write_document


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="worldsave", description="Inspect and upgrade world save documents.")
    parser.add_argument("--config", type=Path, default=None, help="Path to the CLI config file.")
    parser.add_argument("--log-level", default=None, help="Override the configured log level.")
    parser.add_argument(
        "--definitions",
        type=Path,
        default=None,
        help="Directory holding the ruleset definition files.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    info = commands.add_parser("info", help="Print a summary of a save document.")
    info.add_argument("file", type=Path)

    check = commands.add_parser("check", help="Load a document and list every issue.")
    check.add_argument("file", type=Path)

    upgrade = commands.add_parser("upgrade", help="Bring a document to the current schema version.")
    upgrade.add_argument("file", type=Path)
    upgrade.add_argument("out", type=Path)

    commands.add_parser("slots", help="List the save slots in the configured save directory.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = config.load_config(args.config)
    configure_logging(args.log_level or settings["log_level"])

    try:
        if args.command == "info":
            return _run_info(args.file)
        if args.command == "check":
            return _run_check(args.file, args.definitions)
        if args.command == "upgrade":
            return _run_upgrade(args.file, args.out)
        return _run_slots(Path(settings["save_dir"]))
    except StoreError as exc:
        print(f"error: {exc}")
        return 2


def _run_info(path: Path) -> int:
    document = read_document(path)
    world, report = SavegameService().load_with_report(document)
    if world is None:
        for issue in report.failures():
            print(format_issue(issue))
        return 1
    for line in summarize_world(world, document.lookup_int("savefile.version")):
        print(line)
    return 0


def summarize_world(world: WorldState, version: int | None) -> List[str]:
    lines = [
        f"schema version: {version}",
        f"ruleset: {world.ruleset_name}",
        f"turn: {world.game.turn} (year {world.game.year})",
    ]
    if world.map is not None:
        lines.append(f"map: {world.map.xsize}x{world.map.ysize}")
    else:
        lines.append("map: none")
    lines.append(f"players: {len(world.players)}")
    lines.append(f"cities: {sum(1 for _ in world.all_cities())}")
    lines.append(f"units: {sum(1 for _ in world.all_units())}")
    return lines


def _run_check(path: Path, definitions: Path | None) -> int:
    document = read_document(path)
    try:
        ruleset = Ruleset(base_path=definitions)
        ruleset.iterate_in_canonical_order("technologies")
    except DataError as exc:
        print(f"error: ruleset unavailable: {exc}")
        return 2
    _world, report = SavegameService(ruleset=ruleset).load_with_report(document)
    for issue in report.issues:
        print(format_issue(issue))
    print("OK" if report.ok else "FAILED")
    return 0 if report.ok else 1


def _run_upgrade(path: Path, out: Path) -> int:
    document = read_document(path)
    try:
        applied = default_registry().upgrade(document)
    except SaveLoadError as exc:
        print(f"error: {exc}")
        return 1
    write_document(document, out)
    if applied:
        print(f"upgraded through {', '.join(str(version) for version in applied)}")
    else:
        print("already current")
    return 0


def _run_slots(save_dir: Path) -> int:
    for slot in SaveSlotStore(save_dir).list_slots():
        if not slot.exists:
            print(f"{slot.slot}: empty")
        elif slot.is_corrupt:
            print(f"{slot.slot}: unreadable")
        else:
            details = ", ".join(f"{key}={value}" for key, value in (slot.metadata or {}).items())
            print(f"{slot.slot}: {details}")
    return 0
