import json
from pathlib import Path

import pytest

from worldsave.data.ruleset import Ruleset
from worldsave.services.errors import LoadError
from worldsave.services.savegame import SaveOptions, SavegameService, load_world, save_world
from worldsave.store import SectionFile, dumps, loads

from tests.helpers.documents import copy_definitions, reload, saved_document
from tests.helpers.world_builders import build_world


def test_world_survives_save_and_load() -> None:
    world = build_world()
    document = saved_document(world)

    assert load_world(document) == world


def test_world_survives_text_form() -> None:
    world = build_world()
    text = dumps(saved_document(world))

    assert load_world(loads(text)) == world


def test_saving_twice_gives_identical_text() -> None:
    assert dumps(saved_document(build_world())) == dumps(saved_document(build_world()))


def test_section_order() -> None:
    document = saved_document(build_world())

    assert document.section_names() == [
        "scenario",
        "savefile",
        "game",
        "random",
        "script",
        "settings",
        "map",
        "players",
        "player0",
        "player1",
        "mapimg",
    ]


def test_header_entries() -> None:
    document = saved_document(build_world())

    assert document.lookup_int("savefile.version") == 20
    assert document.lookup_str("savefile.options") == " +version2 specials"
    assert document.lookup_str("savefile.reason") == "manual"
    assert document.lookup_int("savefile.technology_size") == 19
    assert document.lookup_str_vec("savefile.technology_vector")[0] == "A_NONE"


def test_indices_resolve_through_saved_header(tmp_path: Path) -> None:
    definitions = copy_definitions(tmp_path)
    roads_path = definitions / "roads.json"
    roads = json.loads(roads_path.read_text(encoding="utf-8"))
    roads_path.write_text(json.dumps(dict(reversed(list(roads.items())))), encoding="utf-8")
    world = build_world()

    document, report = save_world(world, ruleset=Ruleset(base_path=definitions))

    assert report.ok
    assert document.lookup_str_vec("savefile.roads_vector") == ["Maglev", "Railroad", "Road"]
    loaded = load_world(document, ruleset=Ruleset())
    assert loaded.map.tile_at(2, 1).roads == {"Road", "Railroad"}
    assert loaded.unit_by_id(2002).activity_target == world.unit_by_id(2002).activity_target
    assert loaded.unit_by_id(1001).orders == world.unit_by_id(1001).orders


def test_name_missing_from_ruleset_fails_load() -> None:
    document = saved_document(build_world())
    document.set_str_vec("savefile.roads_vector", ["Road", "Railroad", "Hyperloop"])

    loaded, report = reload(document, ruleset=Ruleset())

    assert loaded is None
    assert report.codes() == ["UNKNOWN_RULE_NAME"]
    # Without a ruleset the header alone decides.
    assert reload(document)[0] is not None


def test_unsupported_version_fails() -> None:
    document = saved_document(build_world())
    document.set_int("savefile.version", 99)

    loaded, report = reload(document)

    assert loaded is None
    assert report.codes() == ["UNSUPPORTED_VERSION"]
    with pytest.raises(LoadError) as excinfo:
        load_world(document)
    assert excinfo.value.report.codes() == ["UNSUPPORTED_VERSION"]


def test_old_version_is_upgraded_on_load() -> None:
    world = build_world()
    document = saved_document(world)
    document.set_int("savefile.version", 3)

    assert load_world(document) == world
    assert document.lookup_int("savefile.version") == 20


def test_missing_header_fails() -> None:
    document = saved_document(build_world())
    document.remove("savefile.bases_size")

    loaded, report = reload(document)

    assert loaded is None
    assert report.codes() == ["INVALID_HEADER"]


def test_empty_document_fails() -> None:
    loaded, report = reload(SectionFile())

    assert loaded is None
    assert report.codes() == ["UNSUPPORTED_VERSION"]


def test_random_state_can_be_left_out() -> None:
    world = build_world()
    document, report = save_world(world, options=SaveOptions(save_random=False))

    assert report.ok
    assert document.lookup_bool("random.save") is False
    assert load_world(document).random_state is None


def test_random_state_table_rows() -> None:
    world = build_world()
    document = saved_document(world)

    assert document.lookup_int("random.index_J") == 24
    assert len(document.lookup_str("random.table0").split()) == 7
    assert load_world(document).random_state == world.random_state


def test_settings_round_trip() -> None:
    world = build_world()
    document = saved_document(world)

    assert document.lookup_int("settings.set_count") == 3
    assert load_world(loads(dumps(document))).settings == world.settings


class _RecordingScript:
    def __init__(self, state: bytes) -> None:
        self.state = state
        self.received: bytes | None = None

    def serialize(self) -> bytes:
        return self.state

    def deserialize(self, data: bytes) -> None:
        self.received = data


def test_script_provider_state_is_passed_through() -> None:
    saving = _RecordingScript(b"\x00lua\xff")
    document = SectionFile()
    report = SavegameService(script_provider=saving).save(document, "autosave", False, world=build_world())
    loading = _RecordingScript(b"")

    world = SavegameService(script_provider=loading).load(document)

    assert report.ok
    assert document.lookup_str("savefile.reason") == "autosave"
    assert loading.received == b"\x00lua\xff"
    assert world.script_state == b"\x00lua\xff"


def test_world_without_map_or_players() -> None:
    world = build_world()
    world.map = None
    world.players = []
    world.shuffled_players = []
    world.destroyed_wonders = set()
    world.reindex()
    document = saved_document(world)

    assert not document.has_section("map")
    loaded = load_world(document)
    assert loaded.map is None
    assert loaded.players == []


def test_missing_ruleset_files_fail_save(tmp_path: Path) -> None:
    _document, report = save_world(build_world(), ruleset=Ruleset(base_path=tmp_path))

    assert report.codes() == ["RULESET_UNAVAILABLE"]


def test_corrupt_ruleset_file_fails_save_without_raising(tmp_path: Path) -> None:
    definitions = copy_definitions(tmp_path)
    (definitions / "specialists.json").write_text("{broken", encoding="utf-8")

    _document, report = save_world(build_world(), ruleset=Ruleset(base_path=definitions))

    assert [issue.code for issue in report.failures()] == ["RULESET_UNAVAILABLE"]
    assert "specialists.json" in report.failures()[0].message
