"""Unit records: ``player<N>.u<M>`` entries, including order queues."""
from __future__ import annotations

from typing import List, Tuple

from worldsave.domain.entities import ActivityTarget, Player, Unit, UnitOrder, UnitOrders
from worldsave.domain.enums import Activity, ActivityTargetKind, OrderKind
from worldsave.services.errors import MalformedField, OrderTableError, UnknownSymbol

from .context import LoadSaveContext, OrderTable
from .encoding import ACTIVITY, DIRECTION, NUM_CHARS, ORDER_KIND, char2num, num2char
from .fields import (
    bool_field,
    int_field,
    optional_bool,
    optional_int,
    read_record,
    require_int,
    require_str,
    write_record,
)
from .session import LoadSession, SaveSession

NO_ORDERS = "-"
NOT_APPLICABLE = "?"
NO_INDEX = -1

_HEAD_FIELDS = (
    int_field("id"),
    int_field("x"),
    int_field("y"),
)

_STATUS_FIELDS = (
    int_field("veteran"),
    int_field("hp"),
    int_field("homecity"),
)

_MOVEMENT_FIELDS = (
    bool_field("done_moving", required=False, default=False),
    int_field("moves", "moves_left"),
    int_field("fuel", required=False, default=0),
    int_field("born", "birth_turn", required=False, default=0),
    int_field("battlegroup", required=False, default=-1),
)

_TAIL_FIELDS = (
    bool_field("ai", "ai_controlled", required=False, default=False),
    int_field("ord_map", required=False, default=0),
    int_field("ord_city", required=False, default=0),
    bool_field("moved", required=False, default=False),
    bool_field("paradropped", required=False, default=False),
)


def unit_prefix(player_number: int, index: int) -> str:
    return f"player{player_number}.u{index}"


# -- saving ------------------------------------------------------------


def save_units(session: SaveSession, player: Player) -> None:
    document = session.document
    context = session.context
    document.set_int(f"player{player.number}.nunits", len(player.units))
    for index, unit in enumerate(player.units):
        prefix = unit_prefix(player.number, index)
        write_record(document, prefix, unit, _HEAD_FIELDS)
        document.set_str(f"{prefix}.facing", DIRECTION.encode(unit.facing))
        if session.world.game.citizen_nationality:
            nationality = unit.nationality if unit.nationality is not None else NO_INDEX
            document.set_int(f"{prefix}.nationality", nationality)
        write_record(document, prefix, unit, _STATUS_FIELDS)
        document.set_str(f"{prefix}.type_by_name", unit.type_name)

        document.set_int(f"{prefix}.activity", context.activities.require_index(unit.activity.value))
        document.set_int(f"{prefix}.activity_count", unit.activity_count)
        _write_target(document, prefix, ("activity_target", "activity_base", "activity_road"), unit.activity_target, context)
        document.set_int(f"{prefix}.changed_from", context.activities.require_index(unit.changed_from.value))
        document.set_int(f"{prefix}.changed_from_count", unit.changed_from_count)
        _write_target(
            document,
            prefix,
            ("changed_from_target", "changed_from_base", "changed_from_road"),
            unit.changed_from_target,
            context,
        )
        write_record(document, prefix, unit, _MOVEMENT_FIELDS)

        document.set_bool(f"{prefix}.go", unit.goto is not None)
        goto_x, goto_y = unit.goto if unit.goto is not None else (0, 0)
        document.set_int(f"{prefix}.goto_x", goto_x)
        document.set_int(f"{prefix}.goto_y", goto_y)

        write_record(document, prefix, unit, _TAIL_FIELDS)
        document.set_int(
            f"{prefix}.transported_by",
            unit.transported_by if unit.transported_by is not None else NO_INDEX,
        )
        _save_orders(document, prefix, unit.orders, context)


def _write_target(document, prefix: str, keys: Tuple[str, str, str], target: ActivityTarget | None, context: LoadSaveContext) -> None:
    special_key, base_key, road_key = keys
    special = context.specials.size
    base = road = NO_INDEX
    if target is not None:
        if target.kind is ActivityTargetKind.SPECIAL:
            special = context.specials.require_index(target.name)
        elif target.kind is ActivityTargetKind.BASE:
            base = context.bases.require_index(target.name)
        else:
            road = context.roads.require_index(target.name)
    document.set_int(f"{prefix}.{special_key}", special)
    document.set_int(f"{prefix}.{base_key}", base)
    document.set_int(f"{prefix}.{road_key}", road)


def _encode_index(table: OrderTable, name: str | None) -> str:
    if name is None:
        raise OrderTableError(f"Order needs a {table.name} name.")
    index = table.require_index(name)
    if index >= len(NUM_CHARS):
        raise OrderTableError(f"{table.name} index {index} cannot be stored in an order list.")
    return num2char(index)


def _save_orders(document, prefix: str, orders: UnitOrders | None, context: LoadSaveContext) -> None:
    if orders is None:
        document.set_int(f"{prefix}.orders_length", 0)
        document.set_int(f"{prefix}.orders_index", 0)
        document.set_bool(f"{prefix}.orders_repeat", False)
        document.set_bool(f"{prefix}.orders_vigilant", False)
        document.set_bool(f"{prefix}.orders_last_move_safe", False)
        for key in ("orders_list", "dir_list", "activity_list", "base_list", "road_list"):
            document.set_str(f"{prefix}.{key}", NO_ORDERS)
        return

    kinds: List[str] = []
    dirs: List[str] = []
    activities: List[str] = []
    bases: List[str] = []
    roads: List[str] = []
    for order in orders.orders:
        kinds.append(ORDER_KIND.encode(order.kind))
        direction = activity = base = road = NOT_APPLICABLE
        if order.kind is OrderKind.MOVE:
            if order.direction is None:
                raise MalformedField(f"{prefix}.dir_list", "move order without a direction")
            direction = DIRECTION.encode(order.direction)
        elif order.kind is OrderKind.ACTIVITY:
            if order.activity is None:
                raise MalformedField(f"{prefix}.activity_list", "activity order without an activity")
            if order.activity is Activity.BASE:
                base = _encode_index(context.bases, order.base)
            elif order.activity is Activity.GEN_ROAD:
                road = _encode_index(context.roads, order.road)
            activity = ACTIVITY.encode(order.activity)
        dirs.append(direction)
        activities.append(activity)
        bases.append(base)
        roads.append(road)

    document.set_int(f"{prefix}.orders_length", len(orders.orders))
    document.set_int(f"{prefix}.orders_index", orders.index)
    document.set_bool(f"{prefix}.orders_repeat", orders.repeat)
    document.set_bool(f"{prefix}.orders_vigilant", orders.vigilant)
    document.set_bool(f"{prefix}.orders_last_move_safe", orders.last_move_safe)
    document.set_str(f"{prefix}.orders_list", "".join(kinds))
    document.set_str(f"{prefix}.dir_list", "".join(dirs))
    document.set_str(f"{prefix}.activity_list", "".join(activities))
    document.set_str(f"{prefix}.base_list", "".join(bases))
    document.set_str(f"{prefix}.road_list", "".join(roads))


# -- loading -----------------------------------------------------------


def load_units(session: LoadSession, player: Player) -> None:
    document = session.document
    count = require_int(document, f"player{player.number}.nunits")
    for index in range(count):
        unit = _load_unit(session, unit_prefix(player.number, index))
        player.units.append(unit)


def _load_unit(session: LoadSession, prefix: str) -> Unit:
    document = session.document
    context = session.context
    values = read_record(document, prefix, _HEAD_FIELDS + _STATUS_FIELDS + _MOVEMENT_FIELDS + _TAIL_FIELDS)
    facing_path = f"{prefix}.facing"
    try:
        facing = DIRECTION.decode(require_str(document, facing_path))
    except UnknownSymbol as exc:
        raise MalformedField(facing_path, str(exc)) from exc

    nationality = None
    if session.world.game.citizen_nationality:
        nationality = optional_int(document, f"{prefix}.nationality", NO_INDEX)
        if nationality == NO_INDEX:
            nationality = None

    goto = None
    if optional_bool(document, f"{prefix}.go", False):
        goto = (require_int(document, f"{prefix}.goto_x"), require_int(document, f"{prefix}.goto_y"))

    transported_by = optional_int(document, f"{prefix}.transported_by", NO_INDEX)
    return Unit(
        type_name=require_str(document, f"{prefix}.type_by_name"),
        facing=facing,
        nationality=nationality,
        activity=_read_activity(document, f"{prefix}.activity", context),
        activity_count=optional_int(document, f"{prefix}.activity_count", 0),
        activity_target=_read_target(
            session, prefix, ("activity_target", "activity_base", "activity_road")
        ),
        changed_from=_read_activity(document, f"{prefix}.changed_from", context, required=False),
        changed_from_count=optional_int(document, f"{prefix}.changed_from_count", 0),
        changed_from_target=_read_target(
            session, prefix, ("changed_from_target", "changed_from_base", "changed_from_road")
        ),
        goto=goto,
        transported_by=None if transported_by == NO_INDEX else transported_by,
        orders=_load_orders(session, prefix),
        **values,
    )


def _read_activity(document, path: str, context: LoadSaveContext, required: bool = True) -> Activity:
    index = require_int(document, path) if required else optional_int(document, path, 0)
    name = context.activities.require_name(index)
    try:
        return Activity(name)
    except ValueError as exc:
        raise MalformedField(path, f"unknown activity {name!r}") from exc


def _read_target(session: LoadSession, prefix: str, keys: Tuple[str, str, str]) -> ActivityTarget | None:
    document = session.document
    context = session.context
    special_key, base_key, road_key = keys
    special = optional_int(document, f"{prefix}.{special_key}", context.specials.size)
    base = optional_int(document, f"{prefix}.{base_key}", NO_INDEX)
    road = optional_int(document, f"{prefix}.{road_key}", NO_INDEX)

    found: List[ActivityTarget] = []
    if special != context.specials.size:
        found.append(ActivityTarget(ActivityTargetKind.SPECIAL, context.specials.require_name(special)))
    if base != NO_INDEX:
        found.append(ActivityTarget(ActivityTargetKind.BASE, context.bases.require_name(base)))
    if road != NO_INDEX:
        found.append(ActivityTarget(ActivityTargetKind.ROAD, context.roads.require_name(road)))
    if len(found) > 1:
        session.report.warn(
            "ACTIVITY_TARGET_AMBIGUOUS",
            f"Several activity targets set; keeping {found[0].kind.value}.",
            path=f"{prefix}.{special_key}",
        )
    return found[0] if found else None


def _load_orders(session: LoadSession, prefix: str) -> UnitOrders | None:
    document = session.document
    context = session.context
    length = optional_int(document, f"{prefix}.orders_length", 0)
    if length < 0:
        raise MalformedField(f"{prefix}.orders_length", "must not be negative")
    if length == 0:
        return None

    lists = {}
    for key in ("orders_list", "dir_list", "activity_list", "base_list", "road_list"):
        path = f"{prefix}.{key}"
        text = require_str(document, path)
        if len(text) != length:
            raise MalformedField(path, f"expected {length} entries, found {len(text)}")
        lists[key] = text

    orders: List[UnitOrder] = []
    for position in range(length):
        path = f"{prefix}.orders_list"
        try:
            kind = ORDER_KIND.decode(lists["orders_list"][position])
            order = UnitOrder(kind=kind)
            if kind is OrderKind.MOVE:
                path = f"{prefix}.dir_list"
                order.direction = DIRECTION.decode(lists["dir_list"][position])
            elif kind is OrderKind.ACTIVITY:
                path = f"{prefix}.activity_list"
                order.activity = ACTIVITY.decode(lists["activity_list"][position])
                if order.activity is Activity.BASE:
                    path = f"{prefix}.base_list"
                    order.base = context.bases.require_name(char2num(lists["base_list"][position]))
                elif order.activity is Activity.GEN_ROAD:
                    path = f"{prefix}.road_list"
                    order.road = context.roads.require_name(char2num(lists["road_list"][position]))
        except UnknownSymbol as exc:
            raise MalformedField(path, f"position {position}: {exc}") from exc
        orders.append(order)

    index = optional_int(document, f"{prefix}.orders_index", 0)
    if not 0 <= index < length:
        session.report.warn("ORDERS_INDEX_RANGE", f"Order index {index} outside queue; reset to 0.", path=f"{prefix}.orders_index")
        index = 0
    return UnitOrders(
        orders=orders,
        index=index,
        repeat=optional_bool(document, f"{prefix}.orders_repeat", False),
        vigilant=optional_bool(document, f"{prefix}.orders_vigilant", False),
        last_move_safe=optional_bool(document, f"{prefix}.orders_last_move_safe", False),
    )
