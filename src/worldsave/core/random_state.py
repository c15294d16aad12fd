"""Snapshot of the game's random generator state."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

RANDOM_STATE_WORDS = 56


@dataclass(slots=True)
class RandomState:
    """Index registers and state table of the game's lagged generator.

    The generator itself lives outside this package; the engine only moves
    its state in and out of documents.
    """

    j: int = 0
    k: int = 0
    x: int = 0
    v: List[int] = field(default_factory=lambda: [0] * RANDOM_STATE_WORDS)

    def __post_init__(self) -> None:
        if len(self.v) != RANDOM_STATE_WORDS:
            raise ValueError(f"Random state table must hold {RANDOM_STATE_WORDS} words.")
        for word in self.v:
            if not 0 <= word <= 0xFFFFFFFF:
                raise ValueError("Random state words must be unsigned 32-bit values.")
