"""Technologies repository."""
from __future__ import annotations

from typing import Dict, List

from worldsave.data.errors import DataReferenceError, DataValidationError
from worldsave.data.repositories.base import RepositoryBase
from worldsave.domain.defs import TechDef

# Reserved by the document format for "no advance" and research placeholders.
RESERVED_TECH_NAMES = frozenset({"A_NONE", "A_UNSET", "A_FUTURE"})


class TechsRepository(RepositoryBase[TechDef]):
    """Loads and validates technology definitions."""

    def __init__(self, base_path=None) -> None:
        super().__init__("techs", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, TechDef]:
        techs: Dict[str, TechDef] = {}
        for raw_id, payload in raw.items():
            if raw_id in RESERVED_TECH_NAMES:
                raise DataValidationError(f"Tech id '{raw_id}' is reserved.")
            tech_data = self._require_mapping(payload, f"tech '{raw_id}'")
            self._assert_known_fields(tech_data, {"name", "requires"}, f"tech '{raw_id}'")
            name = self._require_str(tech_data.get("name", raw_id), f"tech '{raw_id}' name")
            requires = self._parse_requires(tech_data.get("requires", []), raw_id)
            techs[raw_id] = TechDef(id=raw_id, name=name, requires=tuple(requires))

        for tech in techs.values():
            for required in tech.requires:
                if required not in techs:
                    raise DataReferenceError(
                        f"tech '{tech.id}' requires unknown tech '{required}'."
                    )
        return techs

    def _parse_requires(self, value: object, tech_id: str) -> List[str]:
        if not isinstance(value, list):
            raise DataValidationError(f"tech '{tech_id}' requires must be a list.")
        return [
            self._require_str(entry, f"tech '{tech_id}' requires[{index}]")
            for index, entry in enumerate(value)
        ]
