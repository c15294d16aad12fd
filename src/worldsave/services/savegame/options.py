"""Knobs and collaborators for a save or load call."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from worldsave.data.ruleset import DEFAULT_RULESET_NAME

from .blocks import PART_SIZE


@dataclass(frozen=True, slots=True)
class SaveOptions:
    save_random: bool = True
    save_starts: bool = True
    attribute_part_size: int = PART_SIZE
    ruleset_dir: str = DEFAULT_RULESET_NAME

    def __post_init__(self) -> None:
        if self.attribute_part_size <= 0 or self.attribute_part_size % 3:
            raise ValueError("attribute_part_size must be a positive multiple of 3.")


@runtime_checkable
class ScriptStateProvider(Protocol):
    """Scripting engine hook; its state is opaque to the save engine."""

    def serialize(self) -> bytes:
        ...

    def deserialize(self, data: bytes) -> None:
        ...
