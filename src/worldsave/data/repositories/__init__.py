"""Repository exports."""

from .improvements_repo import ImprovementsRepository
from .named_rules_repo import (
    BasesRepository,
    NamedRulesRepository,
    RoadsRepository,
    SpecialistsRepository,
    SpecialsRepository,
    TraitsRepository,
)
from .techs_repo import RESERVED_TECH_NAMES, TechsRepository

__all__ = [
    "BasesRepository",
    "ImprovementsRepository",
    "NamedRulesRepository",
    "RESERVED_TECH_NAMES",
    "RoadsRepository",
    "SpecialistsRepository",
    "SpecialsRepository",
    "TechsRepository",
    "TraitsRepository",
]
