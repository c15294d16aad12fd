"""City improvements repository."""
from __future__ import annotations

from typing import Dict

from worldsave.data.errors import DataValidationError
from worldsave.data.repositories.base import RepositoryBase
from worldsave.domain.defs import IMPROVEMENT_GENUSES, ImprovementDef


class ImprovementsRepository(RepositoryBase[ImprovementDef]):
    """Loads and validates building and wonder definitions."""

    def __init__(self, base_path=None) -> None:
        super().__init__("improvements", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, ImprovementDef]:
        improvements: Dict[str, ImprovementDef] = {}
        for raw_id, payload in raw.items():
            data = self._require_mapping(payload, f"improvement '{raw_id}'")
            self._assert_known_fields(data, {"name", "genus"}, f"improvement '{raw_id}'")
            name = self._require_str(data.get("name", raw_id), f"improvement '{raw_id}' name")
            genus = self._require_str(data.get("genus", "Improvement"), f"improvement '{raw_id}' genus")
            if genus not in IMPROVEMENT_GENUSES:
                raise DataValidationError(
                    f"improvement '{raw_id}' genus must be one of {list(IMPROVEMENT_GENUSES)}."
                )
            improvements[raw_id] = ImprovementDef(id=raw_id, name=name, genus=genus)  # type: ignore[arg-type]
        return improvements
