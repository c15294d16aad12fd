"""Service-layer exceptions."""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from worldsave.services.savegame.status import SaveReport


class SaveLoadError(Exception):
    """Raised when save or load operations fail."""


class LoadError(SaveLoadError):
    """Raised by ``load`` when the document could not be restored."""

    def __init__(self, report: "SaveReport") -> None:
        self.report = report
        failures = report.failures()
        summary = failures[0].message if failures else "unknown failure"
        extra = f" (+{len(failures) - 1} more)" if len(failures) > 1 else ""
        super().__init__(f"Failed to load savegame: {summary}{extra}")


class UnsupportedVersion(SaveLoadError):
    """Raised when no upgrade path exists for a document's schema version."""

    def __init__(self, version: int | None, message: str) -> None:
        self.version = version
        super().__init__(message)


class UnknownSymbol(SaveLoadError, ValueError):
    """Raised when a character has no meaning in its encoding table."""

    def __init__(self, family: str, symbol: str) -> None:
        self.family = family
        self.symbol = symbol
        super().__init__(f"Unknown {family} symbol {symbol!r}.")


class OrderTableError(SaveLoadError, LookupError):
    """Raised when an index or name is outside its order table."""


class MalformedField(SaveLoadError):
    """Raised when a mandatory entry is missing or has an invalid shape."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"{path}: {message}")
