"""Repository for ruleset entries that carry only a name."""
from __future__ import annotations

from typing import Dict

from worldsave.data.repositories.base import RepositoryBase
from worldsave.domain.defs import RuleDef


class NamedRulesRepository(RepositoryBase[RuleDef]):
    """Loads one of the name-only rule classes from its own file."""

    def __init__(self, rule_class: str, base_path=None) -> None:
        super().__init__(rule_class, base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, RuleDef]:
        rules: Dict[str, RuleDef] = {}
        context_prefix = self._rule_class
        for raw_id, payload in raw.items():
            context = f"{context_prefix} '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_known_fields(data, {"name"}, context)
            name = self._require_str(data.get("name", raw_id), f"{context} name")
            rules[raw_id] = RuleDef(id=raw_id, name=name)
        return rules


class TraitsRepository(NamedRulesRepository):
    def __init__(self, base_path=None) -> None:
        super().__init__("traits", base_path)


class SpecialsRepository(NamedRulesRepository):
    def __init__(self, base_path=None) -> None:
        super().__init__("specials", base_path)


class BasesRepository(NamedRulesRepository):
    def __init__(self, base_path=None) -> None:
        super().__init__("bases", base_path)


class RoadsRepository(NamedRulesRepository):
    def __init__(self, base_path=None) -> None:
        super().__init__("roads", base_path)


class SpecialistsRepository(NamedRulesRepository):
    def __init__(self, base_path=None) -> None:
        super().__init__("specialists", base_path)
