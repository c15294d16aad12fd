"""In-memory keyed document: ordered sections of typed entries."""
from __future__ import annotations

from typing import Dict, Iterator, List, Sequence, Tuple

from worldsave.core.types import DocumentValue

from .errors import StoreTypeError


def split_path(path: str) -> Tuple[str, str]:
    """Split ``"section.key.sub"`` into ``("section", "key.sub")``."""
    section, sep, key = path.partition(".")
    if not sep or not section or not key:
        raise ValueError(f"Entry path '{path}' must look like 'section.key'.")
    return section, key


class SectionFile:
    """Ordered sections mapping entry keys to int, bool, str or list of str.

    Sections and entries keep insertion order so identical inputs render to
    identical text.
    """

    def __init__(self) -> None:
        self._sections: Dict[str, Dict[str, DocumentValue]] = {}

    # -- writing -------------------------------------------------------

    def add_section(self, name: str) -> None:
        self._sections.setdefault(name, {})

    def set_int(self, path: str, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise StoreTypeError(f"{path}: expected int, got {type(value).__name__}.")
        self._set(path, value)

    def set_bool(self, path: str, value: bool) -> None:
        if not isinstance(value, bool):
            raise StoreTypeError(f"{path}: expected bool, got {type(value).__name__}.")
        self._set(path, value)

    def set_str(self, path: str, value: str) -> None:
        if not isinstance(value, str):
            raise StoreTypeError(f"{path}: expected str, got {type(value).__name__}.")
        self._set(path, value)

    def set_str_vec(self, path: str, values: Sequence[str]) -> None:
        items = list(values)
        if not all(isinstance(item, str) for item in items):
            raise StoreTypeError(f"{path}: expected a list of strings.")
        self._set(path, items)

    def set_value(self, path: str, value: DocumentValue) -> None:
        """Store ``value`` with the typed setter matching its type."""
        if isinstance(value, bool):
            self.set_bool(path, value)
        elif isinstance(value, int):
            self.set_int(path, value)
        elif isinstance(value, str):
            self.set_str(path, value)
        else:
            self.set_str_vec(path, value)

    def remove(self, path: str) -> None:
        section, key = split_path(path)
        self._sections.get(section, {}).pop(key, None)

    def remove_section(self, name: str) -> None:
        self._sections.pop(name, None)

    # -- reading -------------------------------------------------------

    def has(self, path: str) -> bool:
        section, key = split_path(path)
        return key in self._sections.get(section, {})

    def has_section(self, name: str) -> bool:
        return name in self._sections

    def lookup_value(self, path: str) -> DocumentValue | None:
        section, key = split_path(path)
        return self._sections.get(section, {}).get(key)

    def lookup_int(self, path: str, default: int | None = None) -> int | None:
        value = self.lookup_value(path)
        if value is None:
            return default
        if isinstance(value, bool) or not isinstance(value, int):
            raise StoreTypeError(f"{path}: expected int, found {value!r}.")
        return value

    def lookup_bool(self, path: str, default: bool | None = None) -> bool | None:
        value = self.lookup_value(path)
        if value is None:
            return default
        if not isinstance(value, bool):
            raise StoreTypeError(f"{path}: expected bool, found {value!r}.")
        return value

    def lookup_str(self, path: str, default: str | None = None) -> str | None:
        value = self.lookup_value(path)
        if value is None:
            return default
        if not isinstance(value, str):
            raise StoreTypeError(f"{path}: expected str, found {value!r}.")
        return value

    def lookup_str_vec(self, path: str) -> List[str] | None:
        """Return a list of strings; a single string reads as a one-item list."""
        value = self.lookup_value(path)
        if value is None:
            return None
        if isinstance(value, str):
            return [value]
        if not isinstance(value, list):
            raise StoreTypeError(f"{path}: expected a list of strings, found {value!r}.")
        return list(value)

    def section_names(self) -> List[str]:
        return list(self._sections)

    def entries(self, section: str) -> Iterator[Tuple[str, DocumentValue]]:
        yield from self._sections.get(section, {}).items()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SectionFile):
            return NotImplemented
        return list(self._sections.items()) == list(other._sections.items())

    def __repr__(self) -> str:
        return f"SectionFile(sections={self.section_names()!r})"

    def _set(self, path: str, value: DocumentValue) -> None:
        section, key = split_path(path)
        self._sections.setdefault(section, {})[key] = value
