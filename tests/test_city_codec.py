from worldsave.data.ruleset import Ruleset
from worldsave.domain.entities import City, ProductionTarget
from worldsave.services.savegame import SaveOptions

from tests.helpers.documents import reload, save_with, saved_document
from tests.helpers.world_builders import build_minimal_world, build_world


def test_worklists_are_padded_to_longest_per_player() -> None:
    document = saved_document(build_world())

    # Roma has two entries, Antium none.
    assert document.lookup_int("player0.c0.wl_length") == 2
    assert document.lookup_int("player0.c1.wl_length") == 0
    assert document.lookup_str("player0.c1.wl_kind1") == ""
    assert document.lookup_str("player0.c1.wl_value1") == ""
    assert not document.has("player0.c0.wl_kind2")
    assert document.has("player1.c0.wl_kind0")
    assert not document.has("player1.c0.wl_kind1")


def test_worklists_round_trip_with_empty_and_full_lists() -> None:
    world = build_minimal_world()
    targets = [
        ProductionTarget("Building", "Temple"),
        ProductionTarget("Unit", "Warriors"),
        ProductionTarget("Building", "Barracks"),
    ]
    world.add_city(0, City(id=1, x=0, y=0, name="Empty"))
    world.add_city(0, City(id=2, x=1, y=0, name="Busy", worklist=list(targets)))

    document = saved_document(world)

    assert document.lookup_str("player0.c0.wl_kind2") == ""
    assert document.lookup_str("player0.c0.wl_value2") == ""
    assert document.lookup_str("player0.c1.wl_value2") == "Barracks"
    loaded, report = reload(document)
    assert report.ok
    assert [city.worklist for city in loaded.player_by_number(0).cities] == [[], targets]


def test_overlong_worklist_fails_save() -> None:
    world = build_minimal_world()
    world.add_city(0, City(id=1, x=0, y=0, name="Greedy", worklist=[ProductionTarget("Unit", "Warriors")] * 65))

    _document, report = save_with(world, SaveOptions())

    assert not report.ok


def test_city_round_trip() -> None:
    world = build_world()
    loaded, _report = reload(saved_document(world))

    assert loaded.player_by_number(0).cities == world.player_by_number(0).cities
    assert loaded.city_by_id(101).supported_units == [1001, 1002]
    assert loaded.city_owner(201).number == 1


def test_specialists_written_for_every_ruleset_specialist() -> None:
    document = saved_document(build_world())

    assert document.lookup_int("player0.c0.nelvis") == 1
    assert document.lookup_int("player0.c0.nscientist") == 0
    assert document.lookup_int("player0.c0.ntaxman") == 2


def test_specialists_load_without_and_with_ruleset() -> None:
    document = saved_document(build_world())

    without, _report = reload(document)
    with_ruleset, _report = reload(saved_document(build_world()), ruleset=Ruleset())

    assert without.city_by_id(101).specialists == {"elvis": 1, "taxman": 2}
    assert with_ruleset.city_by_id(101).specialists == {"elvis": 1, "taxman": 2}


def test_citizens_only_for_contributing_nations() -> None:
    document = saved_document(build_world())

    assert document.lookup_int("player0.c0.citizen1") == 1
    assert document.lookup_int("player0.c1.citizen1") == 0
    assert document.has("player1.c0.citizen1")
    assert not document.has("player1.c0.citizen0")


def test_citizens_skipped_without_nationality() -> None:
    world = build_world()
    world.game.citizen_nationality = False
    document = saved_document(world)

    assert not document.has("player0.c0.citizen0")
    loaded, _report = reload(document)
    assert loaded.city_by_id(101).citizens == {}


def test_did_buy_accepts_legacy_minus_one() -> None:
    document = saved_document(build_world())
    assert document.lookup_int("player0.c0.did_buy") == 1
    document.set_int("player0.c0.did_buy", -1)

    loaded, report = reload(document)

    assert report.ok
    assert loaded.city_by_id(101).did_buy is False


def test_did_buy_out_of_range_fails() -> None:
    document = saved_document(build_world())
    document.set_int("player0.c0.did_buy", 2)

    loaded, report = reload(document)

    assert loaded is None
    assert report.failures()[0].code == "MALFORMED_FIELD"


def test_improvements_use_header_order() -> None:
    document = saved_document(build_world())
    names = document.lookup_str_vec("savefile.improvement_vector")
    bits = document.lookup_str("player0.c0.improvements")

    assert len(bits) == len(names)
    assert {names[index] for index, bit in enumerate(bits) if bit == "1"} == {"Palace", "Temple"}


def test_unknown_improvement_fails_save() -> None:
    world = build_world()
    world.city_by_id(101).improvements.add("Space Elevator")

    _document, report = save_with(world, SaveOptions())

    assert [issue.code for issue in report.failures()] == ["ORDER_TABLE_ERROR"]
    assert "Space Elevator" in report.failures()[0].message
