"""File-system helpers for save slot storage."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

from worldsave.presentation.cli import config
from worldsave.store import SectionFile, StoreError, read_document, write_document


@dataclass(slots=True)
class SlotMetadata:
    """Describes the contents of a save slot for listings."""

    slot: int
    exists: bool
    metadata: Dict[str, object] | None = None
    is_corrupt: bool = False


class SaveSlotStore:
    """Numbered ``.sav`` documents in one directory."""

    def __init__(self, base_dir: Path | str | None = None, slot_count: int = 10) -> None:
        self._base_dir = Path(base_dir) if base_dir is not None else config.get_save_dir()
        self._slot_count = slot_count

    def list_slots(self) -> List[SlotMetadata]:
        slots: List[SlotMetadata] = []
        for slot_index in range(1, self._slot_count + 1):
            path = self.slot_path(slot_index)
            if not path.exists():
                slots.append(SlotMetadata(slot=slot_index, exists=False))
                continue
            try:
                document = read_document(path)
            except StoreError:
                slots.append(SlotMetadata(slot=slot_index, exists=True, is_corrupt=True))
                continue
            slots.append(SlotMetadata(slot=slot_index, exists=True, metadata=_summarize(document)))
        return slots

    def slot_exists(self, slot: int) -> bool:
        self._validate_slot(slot)
        return self.slot_path(slot).exists()

    def read_slot(self, slot: int) -> SectionFile:
        self._validate_slot(slot)
        return read_document(self.slot_path(slot))

    def write_slot(self, slot: int, document: SectionFile) -> Path:
        self._validate_slot(slot)
        return write_document(document, self.slot_path(slot))

    def delete_slot(self, slot: int) -> None:
        self._validate_slot(slot)
        try:
            self.slot_path(slot).unlink()
        except FileNotFoundError:
            return

    def slot_path(self, slot: int) -> Path:
        return self._base_dir / f"slot_{slot}.sav"

    def _validate_slot(self, slot: int) -> None:
        if not 1 <= slot <= self._slot_count:
            raise ValueError(f"Slot index must be between 1 and {self._slot_count}.")


def _summarize(document: SectionFile) -> Dict[str, object]:
    summary: Dict[str, object] = {}
    for key, path in (("version", "savefile.version"), ("reason", "savefile.reason"), ("turn", "game.turn")):
        value = document.lookup_value(path)
        if value is not None:
            summary[key] = value
    return summary
