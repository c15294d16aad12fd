"""Save and reload shortcuts shared by the codec tests."""
from __future__ import annotations

import shutil
from pathlib import Path
from typing import Tuple

from worldsave.data.paths import get_definitions_path
from worldsave.data.ruleset import Ruleset
from worldsave.domain import WorldState
from worldsave.services.savegame import SaveOptions, SaveReport, SavegameService, save_world
from worldsave.store import SectionFile


def saved_document(world: WorldState, **kwargs) -> SectionFile:
    document, report = save_world(world, **kwargs)
    assert report.ok, report.issues
    return document


def reload(document: SectionFile, ruleset: Ruleset | None = None) -> Tuple[WorldState | None, SaveReport]:
    return SavegameService(ruleset=ruleset).load_with_report(document)


def save_with(world: WorldState, options: SaveOptions) -> Tuple[SectionFile, SaveReport]:
    return save_world(world, options=options)


def copy_definitions(tmp_path: Path) -> Path:
    """Copy the bundled definition files so a test can edit them."""
    target = tmp_path / "definitions"
    shutil.copytree(get_definitions_path(), target)
    return target
