"""Ruleset definition exports."""

from .improvement_def import IMPROVEMENT_GENUSES, ImprovementDef
from .rule_def import RuleDef
from .tech_def import TechDef

__all__ = [
    "IMPROVEMENT_GENUSES",
    "ImprovementDef",
    "RuleDef",
    "TechDef",
]
