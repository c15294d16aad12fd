"""Per-operation order tables mapping rule names to stable indices."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Sequence, Tuple

from worldsave.data.ruleset import Ruleset
from worldsave.domain.enums import Activity
from worldsave.services.errors import MalformedField, OrderTableError
from worldsave.store import SectionFile, StoreTypeError

TECH_NONE = "A_NONE"

# Header key prefix, ruleset class (None for classes not kept in the ruleset).
HEADER_TABLES: Tuple[Tuple[str, str | None], ...] = (
    ("improvement", "improvements"),
    ("technology", "technologies"),
    ("activities", None),
    ("trait", "traits"),
    ("specials", "specials"),
    ("bases", "bases"),
    ("roads", "roads"),
)


class OrderTable:
    """Immutable bidirectional name/index mapping for one rule class."""

    __slots__ = ("name", "_names", "_indices")

    def __init__(self, name: str, names: Sequence[str]) -> None:
        self.name = name
        self._names: Tuple[str, ...] = tuple(names)
        self._indices: Dict[str, int] = {}
        for index, entry in enumerate(self._names):
            if entry in self._indices:
                raise ValueError(f"{name}: duplicate entry {entry!r}.")
            self._indices[entry] = index

    @property
    def size(self) -> int:
        return len(self._names)

    @property
    def names(self) -> Tuple[str, ...]:
        return self._names

    def index_of(self, entry: str) -> int | None:
        return self._indices.get(entry)

    def name_at(self, index: int) -> str | None:
        if 0 <= index < len(self._names):
            return self._names[index]
        return None

    def require_index(self, entry: str) -> int:
        index = self._indices.get(entry)
        if index is None:
            raise OrderTableError(f"'{entry}' is not in the {self.name} table.")
        return index

    def require_name(self, index: int) -> str:
        if not 0 <= index < len(self._names):
            raise OrderTableError(
                f"Index {index} is outside the {self.name} table (size {len(self._names)})."
            )
        return self._names[index]

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OrderTable):
            return NotImplemented
        return self.name == other.name and self._names == other._names

    def __repr__(self) -> str:
        return f"OrderTable({self.name!r}, size={len(self._names)})"


@dataclass(frozen=True, slots=True)
class LoadSaveContext:
    """Order tables for one save or load call.

    Codecs resolve every persisted index through these tables, never
    through the ruleset directly.
    """

    improvement: OrderTable
    technology: OrderTable
    activities: OrderTable
    trait: OrderTable
    specials: OrderTable
    bases: OrderTable
    roads: OrderTable

    @classmethod
    def from_ruleset(cls, ruleset: Ruleset) -> "LoadSaveContext":
        tables: Dict[str, OrderTable] = {}
        for key, rule_class in HEADER_TABLES:
            if rule_class is None:
                names = [activity.value for activity in Activity]
            else:
                names = ruleset.iterate_in_canonical_order(rule_class)  # type: ignore[arg-type]
                if key == "technology":
                    names = [TECH_NONE, *names]
            tables[key] = OrderTable(key, names)
        return cls(**tables)

    @classmethod
    def from_header(cls, document: SectionFile) -> "LoadSaveContext":
        """Rebuild the tables exactly as the saving side wrote them."""
        tables: Dict[str, OrderTable] = {}
        for key, _rule_class in HEADER_TABLES:
            size_path = f"savefile.{key}_size"
            vector_path = f"savefile.{key}_vector"
            try:
                size = document.lookup_int(size_path)
                names = document.lookup_str_vec(vector_path) or []
            except StoreTypeError as exc:
                raise MalformedField(vector_path, str(exc)) from exc
            if size is None:
                raise MalformedField(size_path, "missing order table size")
            if len(names) != size:
                raise MalformedField(
                    vector_path, f"declares {size} entries but lists {len(names)}"
                )
            try:
                tables[key] = OrderTable(key, names)
            except ValueError as exc:
                raise MalformedField(vector_path, str(exc)) from exc
        return cls(**tables)

    def write_header(self, document: SectionFile) -> None:
        for key, table in self.tables():
            document.set_int(f"savefile.{key}_size", table.size)
            if table.size > 0:
                document.set_str_vec(f"savefile.{key}_vector", table.names)

    def tables(self) -> List[Tuple[str, OrderTable]]:
        return [(key, getattr(self, key)) for key, _rule_class in HEADER_TABLES]

    def unknown_to(self, ruleset: Ruleset) -> List[Tuple[str, str]]:
        """List (table, name) pairs the ruleset does not define."""
        unknown: List[Tuple[str, str]] = []
        for key, rule_class in HEADER_TABLES:
            table: OrderTable = getattr(self, key)
            for entry in table:
                if rule_class is None:
                    if entry not in _ACTIVITY_NAMES:
                        unknown.append((key, entry))
                    continue
                if key == "technology" and entry == TECH_NONE:
                    continue
                if ruleset.lookup_by_name(rule_class, entry) is None:  # type: ignore[arg-type]
                    unknown.append((key, entry))
        return unknown


_ACTIVITY_NAMES = frozenset(activity.value for activity in Activity)
