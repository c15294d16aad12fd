"""Opaque byte blocks stored as quoted hex text split over several entries."""
from __future__ import annotations

from typing import List

from worldsave.services.errors import MalformedField
from worldsave.store import SectionFile

from .fields import optional_int, optional_str, require_int, require_str
from .status import SaveReport

PART_SIZE = 3 * 256
PART_ADJUST = 3
ATTRIBUTE_PREFIX = "attribute_v2_block"


def quote_block(data: bytes) -> str:
    """Render ``data`` as ``"<len>:"`` followed by ``"%02x "`` per byte."""
    return f"{len(data)}:" + "".join(f"{byte:02x} " for byte in data)


def unquote_block(text: str) -> bytes:
    """Inverse of ``quote_block``; the declared length must match the payload."""
    head, sep, body = text.partition(":")
    if not sep or not head.isdigit():
        raise ValueError("missing length prefix")
    declared = int(head)
    tokens = body.split()
    if len(tokens) != declared:
        raise ValueError(f"declares {declared} bytes but holds {len(tokens)}")
    if any(len(token) != 2 for token in tokens):
        raise ValueError("byte tokens must be two hex digits")
    try:
        return bytes(int(token, 16) for token in tokens)
    except ValueError as exc:
        raise ValueError(f"invalid byte in block: {exc}") from exc


def split_parts(quoted: str, part_size: int = PART_SIZE) -> List[str]:
    """Split quoted text into parts; the first may take a few extra chars.

    The extra chars realign the remaining parts on byte triples after the
    variable-width length prefix.
    """
    adjust = (quoted.index(":") + 1) % PART_ADJUST
    if len(quoted) - adjust <= part_size:
        return [quoted]
    first = part_size + adjust
    parts = [quoted[:first]]
    for start in range(first, len(quoted), part_size):
        parts.append(quoted[start:start + part_size])
    return parts


def write_block(
    document: SectionFile, prefix: str, data: bytes, part_size: int = PART_SIZE
) -> None:
    quoted = quote_block(data)
    parts = split_parts(quoted, part_size)
    document.set_int(f"{prefix}.{ATTRIBUTE_PREFIX}_length", len(data))
    document.set_int(f"{prefix}.{ATTRIBUTE_PREFIX}_length_quoted", len(quoted))
    document.set_int(f"{prefix}.{ATTRIBUTE_PREFIX}_parts", len(parts))
    for number, part in enumerate(parts):
        document.set_str(f"{prefix}.{ATTRIBUTE_PREFIX}_data.part{number}", part)


def read_block(document: SectionFile, prefix: str, report: SaveReport) -> bytes | None:
    """Reassemble a block; length mismatches drop it with a warning."""
    length_path = f"{prefix}.{ATTRIBUTE_PREFIX}_length"
    if not document.has(length_path):
        return None
    length = require_int(document, length_path)
    quoted_length = require_int(document, f"{prefix}.{ATTRIBUTE_PREFIX}_length_quoted")
    parts = optional_int(document, f"{prefix}.{ATTRIBUTE_PREFIX}_parts", 0)
    if parts <= 0:
        raise MalformedField(f"{prefix}.{ATTRIBUTE_PREFIX}_parts", "must be positive")
    chunks: List[str] = []
    for number in range(parts):
        path = f"{prefix}.{ATTRIBUTE_PREFIX}_data.part{number}"
        chunk = optional_str(document, path, None)
        if chunk is None:
            report.warn("ATTRIBUTE_PART_MISSING", "Attribute block part is missing; block dropped.", path=path)
            return None
        chunks.append(chunk)
    quoted = "".join(chunks)
    if len(quoted) != quoted_length:
        report.warn(
            "ATTRIBUTE_LENGTH_MISMATCH",
            f"Quoted attribute block is {len(quoted)} chars, expected {quoted_length}; block dropped.",
            prefix=prefix,
        )
        return None
    try:
        data = unquote_block(quoted)
    except ValueError as exc:
        report.warn("ATTRIBUTE_BLOCK_INVALID", f"Attribute block unreadable ({exc}); block dropped.", prefix=prefix)
        return None
    if len(data) != length:
        report.warn(
            "ATTRIBUTE_LENGTH_MISMATCH",
            f"Attribute block holds {len(data)} bytes, expected {length}; block dropped.",
            prefix=prefix,
        )
        return None
    return data


def write_quoted(document: SectionFile, path: str, data: bytes) -> None:
    document.set_str(path, quote_block(data))


def read_quoted(document: SectionFile, path: str) -> bytes:
    text = require_str(document, path)
    try:
        return unquote_block(text)
    except ValueError as exc:
        raise MalformedField(path, str(exc)) from exc
