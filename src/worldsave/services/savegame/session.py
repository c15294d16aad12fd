"""Mutable bookkeeping shared by the stages of one save or load call."""
from __future__ import annotations

from dataclasses import dataclass

from worldsave.data.ruleset import Ruleset
from worldsave.domain.state import WorldState
from worldsave.store import SectionFile

from .context import LoadSaveContext
from .options import SaveOptions, ScriptStateProvider
from .status import SaveReport


@dataclass
class SaveSession:
    document: SectionFile
    world: WorldState
    context: LoadSaveContext
    ruleset: Ruleset
    report: SaveReport
    options: SaveOptions
    reason: str
    scenario: bool
    script_provider: ScriptStateProvider | None = None
    save_players: bool = False
    secfile_options: str = ""

    def add_savefile_option(self, option: str) -> None:
        self.secfile_options += option
        self.document.set_str("savefile.options", self.secfile_options)


@dataclass
class LoadSession:
    document: SectionFile
    world: WorldState
    context: LoadSaveContext
    report: SaveReport
    ruleset: Ruleset | None = None
    script_provider: ScriptStateProvider | None = None
    save_players: bool = True
