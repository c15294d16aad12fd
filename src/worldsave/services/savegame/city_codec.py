"""City records: ``player<N>.c<M>`` entries."""
from __future__ import annotations

from typing import Dict, List

from worldsave.domain.entities import (
    CITY_OPTION_COUNT,
    MAX_TRADE_ROUTES,
    MAX_WORKLIST_LENGTH,
    City,
    Player,
    ProductionTarget,
)
from worldsave.services.errors import MalformedField

from .fields import (
    bool_field,
    int_field,
    optional_bool,
    optional_int,
    read_name_bits,
    read_record,
    require_int,
    require_str,
    write_name_bits,
    write_record,
)
from .session import LoadSession, SaveSession

_HEAD_FIELDS = (
    int_field("y"),
    int_field("x"),
    int_field("id"),
    int_field("original"),
    int_field("size"),
)

_STOCK_FIELDS = (
    int_field("food_stock"),
    int_field("shield_stock"),
    int_field("airlift", required=False, default=0),
    bool_field("was_happy", required=False, default=False),
    int_field("turn_plague", required=False, default=0),
    int_field("anarchy", required=False, default=0),
    int_field("rapture", required=False, default=0),
    int_field("steal", required=False, default=0),
    int_field("turn_founded", required=False, default=0),
)

_SHIELD_FIELDS = (
    int_field("before_change_shields", required=False, default=0),
    int_field("caravan_shields", required=False, default=0),
    int_field("disbanded_shields", required=False, default=0),
    int_field("last_turns_shield_surplus", required=False, default=0),
    int_field("city_radius_sq"),
)


def city_prefix(player_number: int, index: int) -> str:
    return f"player{player_number}.c{index}"


def save_cities(session: SaveSession, player: Player) -> None:
    document = session.document
    document.set_int(f"player{player.number}.ncities", len(player.cities))
    specialists = session.ruleset.iterate_in_canonical_order("specialists")
    improvements = session.context.improvement
    nationality = session.world.game.citizen_nationality

    wl_max_length = max((len(city.worklist) for city in player.cities), default=0)
    if wl_max_length > MAX_WORKLIST_LENGTH:
        raise MalformedField(f"player{player.number}.c*.wl_length", "worklist is too long")
    contributing: List[int] = []
    if nationality:
        contributing = [
            other.number
            for other in session.world.players
            if any(city.citizens.get(other.number, 0) != 0 for city in player.cities)
        ]

    for index, city in enumerate(player.cities):
        prefix = city_prefix(player.number, index)
        write_record(document, prefix, city, _HEAD_FIELDS)
        for name in specialists:
            document.set_int(f"{prefix}.n{name}", city.specialists.get(name, 0))
        for slot in range(MAX_TRADE_ROUTES):
            route = city.trade_routes[slot] if slot < len(city.trade_routes) else 0
            document.set_int(f"{prefix}.traderoute{slot}", route)
        write_record(document, prefix, city, _STOCK_FIELDS)
        document.set_int(f"{prefix}.did_buy", 1 if city.did_buy else 0)
        document.set_bool(f"{prefix}.did_sell", city.did_sell)
        document.set_int(f"{prefix}.turn_last_built", city.turn_last_built)
        document.set_str(f"{prefix}.name", city.name)
        _write_target(document, f"{prefix}.currently_building", city.production)
        _write_target(document, f"{prefix}.changed_from", city.changed_from)
        write_record(document, prefix, city, _SHIELD_FIELDS)
        write_name_bits(document, f"{prefix}.improvements", improvements, city.improvements)
        _save_worklist(document, prefix, city.worklist, wl_max_length)
        for option in range(CITY_OPTION_COUNT):
            document.set_bool(f"{prefix}.option{option}", option in city.options)
        for number in contributing:
            document.set_int(f"{prefix}.citizen{number}", city.citizens.get(number, 0))


def _write_target(document, path: str, target: ProductionTarget) -> None:
    document.set_str(f"{path}_kind", target.kind)
    document.set_str(f"{path}_name", target.name)


def _save_worklist(document, prefix: str, worklist: List[ProductionTarget], max_length: int) -> None:
    document.set_int(f"{prefix}.wl_length", len(worklist))
    for slot in range(max_length):
        if slot < len(worklist):
            kind, value = worklist[slot].kind, worklist[slot].name
        else:
            kind = value = ""
        document.set_str(f"{prefix}.wl_kind{slot}", kind)
        document.set_str(f"{prefix}.wl_value{slot}", value)


def load_cities(session: LoadSession, player: Player, player_numbers: List[int]) -> None:
    document = session.document
    count = require_int(document, f"player{player.number}.ncities")
    for index in range(count):
        prefix = city_prefix(player.number, index)
        player.cities.append(_load_city(session, prefix, player_numbers))


def _load_city(session: LoadSession, prefix: str, player_numbers: List[int]) -> City:
    document = session.document
    values = read_record(document, prefix, _HEAD_FIELDS + _STOCK_FIELDS + _SHIELD_FIELDS)
    did_buy = optional_int(document, f"{prefix}.did_buy", 0)
    if did_buy not in (-1, 0, 1):
        raise MalformedField(f"{prefix}.did_buy", f"invalid value {did_buy}")
    city = City(
        name=require_str(document, f"{prefix}.name"),
        specialists=_load_specialists(session, prefix),
        trade_routes=[
            optional_int(document, f"{prefix}.traderoute{slot}", 0) for slot in range(MAX_TRADE_ROUTES)
        ],
        did_buy=did_buy == 1,
        did_sell=optional_bool(document, f"{prefix}.did_sell", False),
        turn_last_built=optional_int(document, f"{prefix}.turn_last_built", 0),
        production=_read_target(document, f"{prefix}.currently_building"),
        changed_from=_read_target(document, f"{prefix}.changed_from"),
        improvements=read_name_bits(document, f"{prefix}.improvements", session.context.improvement.names),
        worklist=_load_worklist(document, prefix),
        options={
            option
            for option in range(CITY_OPTION_COUNT)
            if optional_bool(document, f"{prefix}.option{option}", False)
        },
        **values,
    )
    if session.world.game.citizen_nationality:
        for number in player_numbers:
            citizens = optional_int(document, f"{prefix}.citizen{number}", 0)
            if citizens:
                city.citizens[number] = citizens
    return city


def _load_specialists(session: LoadSession, prefix: str) -> Dict[str, int]:
    document = session.document
    if session.ruleset is not None:
        names = session.ruleset.iterate_in_canonical_order("specialists")
    else:
        # Without a ruleset the specialist entries are recognised by their key.
        section, city_key = prefix.split(".", 1)
        names = []
        for key, _value in document.entries(section):
            record, _sep, field = key.partition(".")
            if record == city_key and field.startswith("n") and field != "name":
                names.append(field[1:])
    specialists: Dict[str, int] = {}
    for name in names:
        count = optional_int(document, f"{prefix}.n{name}", 0)
        if count:
            specialists[name] = count
    return specialists


def _read_target(document, path: str) -> ProductionTarget:
    return ProductionTarget(require_str(document, f"{path}_kind"), require_str(document, f"{path}_name"))


def _load_worklist(document, prefix: str) -> List[ProductionTarget]:
    length = optional_int(document, f"{prefix}.wl_length", 0)
    if not 0 <= length <= MAX_WORKLIST_LENGTH:
        raise MalformedField(f"{prefix}.wl_length", f"invalid length {length}")
    worklist: List[ProductionTarget] = []
    for slot in range(length):
        kind = require_str(document, f"{prefix}.wl_kind{slot}")
        value = require_str(document, f"{prefix}.wl_value{slot}")
        if not kind or not value:
            raise MalformedField(f"{prefix}.wl_kind{slot}", "worklist entry is empty")
        worklist.append(ProductionTarget(kind, value))
    return worklist
