"""Declarative field tables for flat record sections.

A record is the set of entries under one prefix (``player0.c3``), each
mirroring one attribute of a domain object.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Collection, Dict, Sequence, Set

from worldsave.services.errors import MalformedField
from worldsave.store import SectionFile, StoreTypeError

from .context import OrderTable
from .encoding import decode_bits, encode_bits

Converter = Callable[[Any], Any]


@dataclass(frozen=True, slots=True)
class Field:
    key: str
    attr: str
    kind: str
    required: bool = True
    default: Any = None
    to_doc: Converter | None = None
    from_doc: Converter | None = None


def int_field(key: str, attr: str | None = None, **options: Any) -> Field:
    return Field(key, attr or key, "int", **options)


def bool_field(key: str, attr: str | None = None, **options: Any) -> Field:
    return Field(key, attr or key, "bool", **options)


def str_field(key: str, attr: str | None = None, **options: Any) -> Field:
    return Field(key, attr or key, "str", **options)


def enum_field(key: str, enum_type: Any, attr: str | None = None, **options: Any) -> Field:
    """Integer-valued enum persisted as its number."""
    return Field(
        key,
        attr or key,
        "int",
        to_doc=lambda member: int(member.value),
        from_doc=enum_type,
        **options,
    )


def write_record(document: SectionFile, prefix: str, source: Any, fields: Sequence[Field]) -> None:
    for spec in fields:
        value = getattr(source, spec.attr)
        if spec.to_doc is not None:
            value = spec.to_doc(value)
        path = f"{prefix}.{spec.key}"
        if spec.kind == "int":
            document.set_int(path, value)
        elif spec.kind == "bool":
            document.set_bool(path, value)
        else:
            document.set_str(path, value)


def read_record(document: SectionFile, prefix: str, fields: Sequence[Field]) -> Dict[str, Any]:
    """Return attribute values keyed by ``Field.attr``.

    Raises MalformedField for missing mandatory entries, wrong types and
    values the converter rejects.
    """
    values: Dict[str, Any] = {}
    for spec in fields:
        path = f"{prefix}.{spec.key}"
        try:
            if spec.kind == "int":
                raw = document.lookup_int(path)
            elif spec.kind == "bool":
                raw = document.lookup_bool(path)
            else:
                raw = document.lookup_str(path)
        except StoreTypeError as exc:
            raise MalformedField(path, str(exc)) from exc
        if raw is None:
            if spec.required:
                raise MalformedField(path, "missing entry")
            values[spec.attr] = spec.default
            continue
        if spec.from_doc is not None:
            try:
                raw = spec.from_doc(raw)
            except ValueError as exc:
                raise MalformedField(path, f"invalid value {raw!r}") from exc
        values[spec.attr] = raw
    return values


def require_int(document: SectionFile, path: str) -> int:
    try:
        value = document.lookup_int(path)
    except StoreTypeError as exc:
        raise MalformedField(path, str(exc)) from exc
    if value is None:
        raise MalformedField(path, "missing entry")
    return value


def require_str(document: SectionFile, path: str) -> str:
    try:
        value = document.lookup_str(path)
    except StoreTypeError as exc:
        raise MalformedField(path, str(exc)) from exc
    if value is None:
        raise MalformedField(path, "missing entry")
    return value


def optional_int(document: SectionFile, path: str, default: int) -> int:
    try:
        value = document.lookup_int(path)
    except StoreTypeError as exc:
        raise MalformedField(path, str(exc)) from exc
    return default if value is None else value


def optional_bool(document: SectionFile, path: str, default: bool) -> bool:
    try:
        value = document.lookup_bool(path)
    except StoreTypeError as exc:
        raise MalformedField(path, str(exc)) from exc
    return default if value is None else value


def optional_str(document: SectionFile, path: str, default: str | None) -> str | None:
    try:
        value = document.lookup_str(path)
    except StoreTypeError as exc:
        raise MalformedField(path, str(exc)) from exc
    return default if value is None else value


def write_name_bits(document: SectionFile, path: str, table: OrderTable, members: Collection[str]) -> None:
    """Store which entries of ``table`` are in ``members`` as a 0/1 string.

    A member missing from the table raises ``OrderTableError``.
    """
    indices = {table.require_index(name) for name in members}
    document.set_str(path, encode_bits(table.size, lambda index: index in indices))


def read_name_bits(document: SectionFile, path: str, names: Sequence[str]) -> Set[str]:
    text = require_str(document, path)
    try:
        indices = decode_bits(text, len(names))
    except ValueError as exc:
        raise MalformedField(path, str(exc)) from exc
    return {names[index] for index in indices}
