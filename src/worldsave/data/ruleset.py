"""Read-only view over the rule database used by the save engine."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Literal

from worldsave.data.repositories import (
    BasesRepository,
    ImprovementsRepository,
    RoadsRepository,
    SpecialistsRepository,
    SpecialsRepository,
    TechsRepository,
    TraitsRepository,
)
from worldsave.data.repositories.base import RepositoryBase

RuleClass = Literal[
    "improvements",
    "technologies",
    "traits",
    "specials",
    "bases",
    "roads",
    "specialists",
]
RULE_CLASSES: tuple[str, ...] = (
    "improvements",
    "technologies",
    "traits",
    "specials",
    "bases",
    "roads",
    "specialists",
)

DEFAULT_RULESET_NAME = "classic"


class Ruleset:
    """Bundles the per-class repositories behind name lookups.

    Canonical order for every class is the order of the definition file.
    """

    def __init__(
        self,
        name: str = DEFAULT_RULESET_NAME,
        *,
        base_path: Path | str | None = None,
        techs_repo: TechsRepository | None = None,
        improvements_repo: ImprovementsRepository | None = None,
        traits_repo: TraitsRepository | None = None,
        specials_repo: SpecialsRepository | None = None,
        bases_repo: BasesRepository | None = None,
        roads_repo: RoadsRepository | None = None,
        specialists_repo: SpecialistsRepository | None = None,
    ) -> None:
        self.name = name
        self._repos: Dict[str, RepositoryBase] = {
            "technologies": techs_repo or TechsRepository(base_path),
            "improvements": improvements_repo or ImprovementsRepository(base_path),
            "traits": traits_repo or TraitsRepository(base_path),
            "specials": specials_repo or SpecialsRepository(base_path),
            "bases": bases_repo or BasesRepository(base_path),
            "roads": roads_repo or RoadsRepository(base_path),
            "specialists": specialists_repo or SpecialistsRepository(base_path),
        }

    def iterate_in_canonical_order(self, rule_class: RuleClass) -> List[str]:
        """Return the rule names of a class in canonical order."""
        return [definition.id for definition in self._repo(rule_class).ordered()]

    def lookup_by_name(self, rule_class: RuleClass, name: str):
        """Return the definition called ``name`` or None when it does not exist."""
        repo = self._repo(rule_class)
        if not repo.has(name):
            return None
        return repo.get(name)

    def great_wonders(self) -> List[str]:
        return [
            improvement.id
            for improvement in self._repos["improvements"].ordered()
            if improvement.is_great_wonder
        ]

    def wonders(self) -> List[str]:
        return [
            improvement.id
            for improvement in self._repos["improvements"].ordered()
            if improvement.is_wonder
        ]

    def _repo(self, rule_class: str) -> RepositoryBase:
        try:
            return self._repos[rule_class]
        except KeyError as exc:
            raise KeyError(f"Unknown rule class '{rule_class}'.") from exc
