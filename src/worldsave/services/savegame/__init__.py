"""World document save engine."""

from .compat import CURRENT_VERSION, CompatRegistry, UpgradeStep, default_registry, select_chain
from .context import LoadSaveContext, OrderTable
from .engine import SavegameService, load_world, save_world, unit_ordering_calc
from .options import SaveOptions, ScriptStateProvider
from .status import FAILURE, WARNING, Issue, SaveReport, format_issue

__all__ = [
    "CURRENT_VERSION",
    "CompatRegistry",
    "FAILURE",
    "Issue",
    "LoadSaveContext",
    "OrderTable",
    "SaveOptions",
    "SaveReport",
    "SavegameService",
    "ScriptStateProvider",
    "UpgradeStep",
    "WARNING",
    "default_registry",
    "format_issue",
    "load_world",
    "save_world",
    "select_chain",
    "unit_ordering_calc",
]
