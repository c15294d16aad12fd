from pathlib import Path

import pytest

from worldsave.presentation.cli.save_slots import SaveSlotStore

from tests.helpers.documents import saved_document
from tests.helpers.world_builders import build_minimal_world


def test_write_read_and_delete_slot(tmp_path: Path) -> None:
    store = SaveSlotStore(tmp_path, slot_count=3)
    document = saved_document(build_minimal_world())

    path = store.write_slot(2, document)

    assert path == tmp_path / "slot_2.sav"
    assert store.slot_exists(2)
    assert store.read_slot(2) == document
    store.delete_slot(2)
    assert not store.slot_exists(2)
    store.delete_slot(2)


def test_list_slots_summarizes_documents(tmp_path: Path) -> None:
    store = SaveSlotStore(tmp_path, slot_count=3)
    store.write_slot(1, saved_document(build_minimal_world(), reason="autosave"))
    (tmp_path / "slot_3.sav").write_text("not a document", encoding="utf-8")

    slots = store.list_slots()

    assert [slot.exists for slot in slots] == [True, False, True]
    assert slots[0].metadata == {"version": 20, "reason": "autosave", "turn": 1}
    assert slots[2].is_corrupt


def test_slot_index_is_validated(tmp_path: Path) -> None:
    store = SaveSlotStore(tmp_path, slot_count=3)
    with pytest.raises(ValueError):
        store.slot_exists(0)
    with pytest.raises(ValueError):
        store.read_slot(4)
