"""Exceptions raised while reading ruleset definitions."""
from __future__ import annotations

from pathlib import Path


class DataError(Exception):
    """Base exception for the ruleset data layer."""


class DataLoadError(DataError):
    """A ruleset file could not be read or parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Ruleset file {path.name} ({path.parent}): {reason}")


class DataValidationError(DataError):
    """Raised when ruleset content has the wrong shape."""


class DataReferenceError(DataError):
    """Raised when a rule names another rule the ruleset does not define."""
