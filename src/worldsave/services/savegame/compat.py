"""Schema version registry and the upgrade chain for older documents."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List

from worldsave.services.errors import UnsupportedVersion
from worldsave.store import SectionFile, StoreTypeError

logger = logging.getLogger(__name__)

VERSION_PATH = "savefile.version"

UpgradeFn = Callable[[SectionFile], None]


@dataclass(frozen=True, slots=True)
class UpgradeStep:
    """Brings a document from the previous registered version to ``version``.

    The first registered step has no predecessor and no body.
    """

    version: int
    description: str
    apply: UpgradeFn | None = None


def _unchanged_since_previous(document: SectionFile) -> None:
    """Content-preserving step; only the version stamp moves forward."""


class CompatRegistry:
    """Ordered schema versions with their upgrade bodies."""

    def __init__(self, steps: Iterable[UpgradeStep] = ()) -> None:
        self._steps: List[UpgradeStep] = []
        for step in steps:
            self.register(step)

    def register(self, step: UpgradeStep) -> None:
        if self._steps and step.version <= self._steps[-1].version:
            raise ValueError(
                f"Version {step.version} must be greater than {self._steps[-1].version}."
            )
        self._steps.append(step)

    @property
    def current_version(self) -> int:
        if not self._steps:
            raise ValueError("No schema versions registered.")
        return self._steps[-1].version

    @property
    def versions(self) -> List[int]:
        return [step.version for step in self._steps]

    def select_chain(self, declared_version: int | None) -> List[UpgradeStep]:
        """Return the steps that bring ``declared_version`` up to current."""
        if declared_version is None:
            raise UnsupportedVersion(None, "Document does not declare a schema version.")
        current = self.current_version
        if declared_version > current:
            raise UnsupportedVersion(
                declared_version,
                f"Schema version {declared_version} is newer than supported version {current}.",
            )
        if declared_version not in self.versions:
            raise UnsupportedVersion(
                declared_version,
                f"No upgrade path from schema version {declared_version} to {current}.",
            )
        return [step for step in self._steps if step.version > declared_version]

    def upgrade(self, document: SectionFile) -> List[int]:
        """Apply the chain in place and return the versions passed through."""
        try:
            declared = document.lookup_int(VERSION_PATH)
        except StoreTypeError as exc:
            raise UnsupportedVersion(None, f"Unreadable schema version: {exc}") from exc
        applied: List[int] = []
        for step in self.select_chain(declared):
            logger.info("Upgrading document to schema version %d (%s).", step.version, step.description)
            if step.apply is not None:
                step.apply(document)
            document.set_int(VERSION_PATH, step.version)
            applied.append(step.version)
        return applied


def default_registry() -> CompatRegistry:
    """Build a fresh registry with every known schema version."""
    return CompatRegistry(
        [
            UpgradeStep(3, "first format of this family"),
            UpgradeStep(10, "2.4 series layout", _unchanged_since_previous),
            UpgradeStep(20, "2.5 series layout", _unchanged_since_previous),
        ]
    )


CURRENT_VERSION = default_registry().current_version


def select_chain(declared_version: int | None) -> List[UpgradeStep]:
    return default_registry().select_chain(declared_version)
