from worldsave.domain import Activity, ActivityTargetKind, OrderKind
from worldsave.domain.entities import ActivityTarget, Unit, UnitOrder, UnitOrders
from worldsave.services.savegame import SaveOptions, unit_ordering_calc

from tests.helpers.documents import reload, save_with, saved_document
from tests.helpers.world_builders import build_minimal_world, build_world


def test_order_lists_are_parallel_strings() -> None:
    document = saved_document(build_world())

    assert document.lookup_int("player0.u0.orders_length") == 5
    assert document.lookup_str("player0.u0.orders_list") == "maaab"
    assert document.lookup_str("player0.u0.dir_list") == "6????"
    assert document.lookup_str("player0.u0.activity_list") == "?bRy?"
    assert document.lookup_str("player0.u0.base_list") == "?4???"
    assert document.lookup_str("player0.u0.road_list") == "??1??"
    assert document.lookup_bool("player0.u0.orders_repeat") is True


def test_unit_without_orders_writes_placeholders() -> None:
    document = saved_document(build_world())

    assert document.lookup_int("player0.u1.orders_length") == 0
    assert document.lookup_str("player0.u1.orders_list") == "-"


def test_units_round_trip() -> None:
    world = build_world()
    loaded, report = reload(saved_document(world))

    assert report.ok
    assert loaded.player_by_number(0).units == world.player_by_number(0).units
    assert loaded.player_by_number(1).units == world.player_by_number(1).units
    assert loaded.unit_by_id(2002).transported_by == 2001
    assert loaded.map.tile_at(4, 3).units == [2001, 2002]


def test_activity_target_triples() -> None:
    document = saved_document(build_world())

    # Irrigation is the first special; 7 (the table size) means no special.
    assert document.lookup_int("player0.u0.activity_target") == 0
    assert document.lookup_int("player0.u0.activity_base") == -1
    assert document.lookup_int("player0.u0.changed_from_base") == 0
    assert document.lookup_int("player0.u1.activity_target") == 7


def test_ambiguous_activity_target_keeps_special() -> None:
    document = saved_document(build_world())
    document.set_int("player0.u0.activity_base", 1)

    loaded, report = reload(document)

    assert loaded is not None
    assert "ACTIVITY_TARGET_AMBIGUOUS" in report.codes()
    assert loaded.unit_by_id(1001).activity_target == ActivityTarget(ActivityTargetKind.SPECIAL, "Irrigation")


def test_orders_index_out_of_range_resets() -> None:
    document = saved_document(build_world())
    document.set_int("player0.u0.orders_index", 9)

    loaded, report = reload(document)

    assert loaded is not None
    assert "ORDERS_INDEX_RANGE" in report.codes()
    assert loaded.unit_by_id(1001).orders.index == 0


def test_unknown_order_symbol_fails() -> None:
    document = saved_document(build_world())
    document.set_str("player0.u0.orders_list", "maaaZ")

    loaded, report = reload(document)

    assert loaded is None
    assert report.failures()[0].code == "MALFORMED_FIELD"


def test_order_list_length_mismatch_fails() -> None:
    document = saved_document(build_world())
    document.set_str("player0.u0.dir_list", "6???")

    loaded, _report = reload(document)

    assert loaded is None


def test_base_index_outside_table_fails() -> None:
    document = saved_document(build_world())
    document.set_str("player0.u0.base_list", "?z???")

    loaded, report = reload(document)

    assert loaded is None
    assert report.failures()[0].code == "ORDER_TABLE_ERROR"


def test_activity_index_outside_table_fails() -> None:
    document = saved_document(build_world())
    document.set_int("player0.u1.activity", 99)

    loaded, report = reload(document)

    assert loaded is None
    assert report.failures()[0].code == "ORDER_TABLE_ERROR"


def test_order_naming_unknown_base_fails_save() -> None:
    world = build_minimal_world()
    world.add_unit(
        0,
        Unit(
            id=1,
            x=0,
            y=0,
            type_name="Workers",
            orders=UnitOrders(orders=[UnitOrder(kind=OrderKind.ACTIVITY, activity=Activity.BASE, base="Moonbase")]),
        ),
    )

    _document, report = save_with(world, SaveOptions())

    assert not report.ok
    assert report.failures()[0].code == "ORDER_TABLE_ERROR"


def test_empty_order_queue_loads_as_none() -> None:
    world = build_minimal_world()
    world.add_unit(0, Unit(id=1, x=0, y=0, type_name="Workers", orders=UnitOrders()))

    loaded, _report = reload(saved_document(world))

    assert loaded.unit_by_id(1).orders is None


def test_dangling_references_are_cleared() -> None:
    document = saved_document(build_world())
    document.set_int("player1.u1.transported_by", 999)
    document.set_int("player0.u1.homecity", 555)

    loaded, report = reload(document)

    assert loaded is not None
    assert {"DANGLING_TRANSPORTER", "DANGLING_HOMECITY"} <= set(report.codes())
    assert loaded.unit_by_id(2002).transported_by is None
    assert loaded.unit_by_id(1002).homecity == 0
    assert loaded.city_by_id(101).supported_units == [1001]


def test_duplicate_unit_ids_fail() -> None:
    document = saved_document(build_world())
    document.set_int("player1.u1.id", 1001)

    loaded, report = reload(document)

    assert loaded is None
    assert "DUPLICATE_ID" in report.codes()


def test_unit_off_map_warns() -> None:
    document = saved_document(build_world())
    document.set_int("player1.u0.x", 40)

    loaded, report = reload(document)

    assert loaded is not None
    assert "UNIT_OFF_MAP" in report.codes()


def test_unit_ordering_follows_tile_and_city_lists() -> None:
    world = build_world()
    unit_ordering_calc(world)

    assert world.unit_by_id(1001).ord_map == 0
    assert world.unit_by_id(1002).ord_map == 1
    assert world.unit_by_id(1002).ord_city == 1
    assert world.unit_by_id(2002).ord_city == 1


def test_saved_ordering_restores_tile_order() -> None:
    world = build_world()
    tile = world.map.tile_at(1, 1)
    tile.units.reverse()

    loaded, _report = reload(saved_document(world))

    assert loaded.map.tile_at(1, 1).units == [1002, 1001]


def test_unit_without_nationality_round_trips() -> None:
    world = build_minimal_world()
    world.add_unit(0, Unit(id=7, x=0, y=0, type_name="Warriors"))
    document = saved_document(world)

    assert document.lookup_int("player0.u0.nationality") == -1
    loaded, report = reload(document)
    assert report.ok
    assert loaded.unit_by_id(7).nationality is None


def test_supported_units_follow_home_city() -> None:
    loaded, _report = reload(saved_document(build_world()))

    assert loaded.city_by_id(101).supported_units == [1001, 1002]
    assert loaded.city_by_id(102).supported_units == []
    assert loaded.city_by_id(201).supported_units == [2001, 2002]
