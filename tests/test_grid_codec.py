from worldsave.domain import Terrain
from worldsave.domain.entities import Player, PlayerColor
from worldsave.services.savegame import SaveOptions

from tests.helpers.documents import reload, save_with, saved_document
from tests.helpers.world_builders import build_minimal_world, build_world


def test_terrain_lines_are_one_char_per_tile() -> None:
    document = saved_document(build_minimal_world())

    assert document.lookup_int("map.xsize") == 3
    assert document.lookup_int("map.ysize") == 2
    assert document.lookup_str("map.t0000") == "ggg"
    assert document.lookup_str("map.t0001") == "ggg"
    assert document.lookup_str("map.res0000") == "   "
    assert document.lookup_str("map.owner0000") == "-,-,-"


def test_nibble_layers_cover_every_table_entry() -> None:
    document = saved_document(build_world())

    # 7 specials, 5 bases and 3 roads in the bundled ruleset.
    assert document.has("map.spe01_0000")
    assert not document.has("map.spe02_0000")
    assert document.has("map.b01_0000")
    assert document.has("map.r00_0000")
    assert not document.has("map.r01_0000")
    assert " specials" in document.lookup_str("savefile.options")


def test_tile_layers_round_trip() -> None:
    world = build_world()
    loaded, report = reload(saved_document(world))

    assert report.ok
    assert loaded is not None
    assert loaded.map == world.map
    assert loaded.map.tile_at(4, 3).bases == {"Fortress", "Buoy"}
    assert loaded.map.tile_at(2, 2).label == world.map.tile_at(2, 2).label


def test_short_line_keeps_defaults_with_warning() -> None:
    document = saved_document(build_minimal_world())
    document.set_str("map.t0001", "gg")

    loaded, report = reload(document)

    assert loaded is not None
    assert "MAP_LINE_LENGTH" in report.codes()
    row = [loaded.map.tile_at(x, 1).terrain for x in range(3)]
    assert row == [Terrain.GRASSLAND, Terrain.GRASSLAND, Terrain.UNKNOWN]


def test_long_line_is_truncated_with_warning() -> None:
    document = saved_document(build_minimal_world())
    document.set_str("map.t0000", "gggpp")

    loaded, report = reload(document)

    assert loaded is not None
    assert report.ok
    assert "MAP_LINE_LENGTH" in report.codes()


def test_missing_line_warns() -> None:
    document = saved_document(build_minimal_world())
    document.remove("map.res0001")

    loaded, report = reload(document)

    assert loaded is not None
    assert "MAP_LINE_MISSING" in report.codes()


def test_unknown_terrain_symbol_fails() -> None:
    document = saved_document(build_minimal_world())
    document.set_str("map.t0000", "gZg")

    loaded, report = reload(document)

    assert loaded is None
    assert not report.ok
    assert report.failures()[0].context["stage"] == "map"


def test_bit_on_padding_slot_fails() -> None:
    document = saved_document(build_minimal_world())
    # Second specials group covers entries 4..6; bit 3 has no entry.
    document.set_str("map.spe01_0000", "800")

    loaded, report = reload(document)

    assert loaded is None
    assert not report.ok


def test_known_lines_only_for_used_player_groups() -> None:
    world = build_minimal_world()
    world.add_player(Player(number=40, name="Far", color=PlayerColor(r=0, g=0, b=0)))
    world.map.tile_at(1, 0).known_by.update({0, 40})
    document = saved_document(world)

    assert document.has("map.k00_0000")
    assert document.has("map.k10_0000")
    assert not document.has("map.k01_0000")
    loaded, report = reload(document)
    assert report.ok
    assert loaded.map.tile_at(1, 0).known_by == {0, 40}
    assert loaded.map.tile_at(0, 0).known_by == set()


def test_dangling_owner_is_cleared() -> None:
    document = saved_document(build_minimal_world())
    document.set_str("map.owner0000", "-,7,0")

    loaded, report = reload(document)

    assert loaded is not None
    assert "DANGLING_TILE_OWNER" in report.codes()
    assert loaded.map.tile_at(1, 0).owner is None
    assert loaded.map.tile_at(2, 0).owner == 0


def test_worked_line_tolerates_trailing_comma() -> None:
    document = saved_document(build_minimal_world())
    document.set_str("map.worked0000", "-,-,-,")

    loaded, report = reload(document)

    assert loaded is not None
    assert report.issues == []


def test_claimer_off_map_is_cleared() -> None:
    document = saved_document(build_minimal_world())
    document.set_str("map.source0000", "99,-,-")

    loaded, report = reload(document)

    assert loaded is not None
    assert "INVALID_CLAIMER" in report.codes()
    assert loaded.map.tile_at(0, 0).claimer is None


def test_start_positions_can_be_left_out() -> None:
    world = build_world()
    document, report = save_with(world, SaveOptions(save_starts=False))

    assert report.ok
    assert not document.has("map.startpos_count")
    loaded, _report = reload(document)
    assert loaded.map.startpos == []


def test_start_positions_round_trip() -> None:
    world = build_world()
    loaded, _report = reload(saved_document(world))

    assert [position.nations for position in loaded.map.startpos] == [["Romans", "Greeks"], []]
    assert loaded.map.startpos[1].exclude is True


def test_unknown_road_fails_save() -> None:
    world = build_minimal_world()
    world.map.tile_at(2, 1).roads.add("Hyperloop")

    _document, report = save_with(world, SaveOptions())

    assert [issue.code for issue in report.failures()] == ["ORDER_TABLE_ERROR"]
    assert report.failures()[0].context["stage"] == "map"


def test_unknown_special_fails_save() -> None:
    world = build_minimal_world()
    world.map.tile_at(0, 0).specials.add("Unobtainium")

    _document, report = save_with(world, SaveOptions())

    assert [issue.code for issue in report.failures()] == ["ORDER_TABLE_ERROR"]


def test_player_number_beyond_known_slots_fails_save() -> None:
    world = build_minimal_world()
    world.add_player(Player(number=140, name="Beyond", color=PlayerColor(r=0, g=0, b=0)))
    world.map.tile_at(1, 0).known_by.update({0, 140})

    _document, report = save_with(world, SaveOptions())

    assert [issue.code for issue in report.failures()] == ["MALFORMED_FIELD"]
    assert "140" in report.failures()[0].message


def test_highest_player_slot_keeps_knowledge() -> None:
    world = build_minimal_world()
    world.add_player(Player(number=127, name="Last", color=PlayerColor(r=0, g=0, b=0)))
    world.map.tile_at(1, 0).known_by.update({0, 127})

    loaded, report = reload(saved_document(world))

    assert report.ok
    assert loaded.map.tile_at(1, 0).known_by == {0, 127}
