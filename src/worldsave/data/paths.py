"""Where ruleset definition files live."""
from __future__ import annotations

from pathlib import Path

RULESET_SUFFIX = ".json"


def get_repo_root() -> Path:
    return Path(__file__).resolve().parents[3]


def get_definitions_path(base_path: Path | str | None = None) -> Path:
    """Directory of the ruleset files; the bundled ruleset unless ``base_path`` is given."""
    if base_path is not None:
        return Path(base_path)
    return get_repo_root() / "data" / "definitions"


def get_ruleset_file(rule_class: str, base_path: Path | str | None = None) -> Path:
    """File holding one rule class, e.g. ``specialists`` -> ``specialists.json``."""
    return get_definitions_path(base_path) / f"{rule_class}{RULESET_SUFFIX}"
