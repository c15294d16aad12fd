"""Text rendering of section files, built on configparser."""
from __future__ import annotations

import configparser
import io
import re
from pathlib import Path
from typing import List

from worldsave.core.types import DocumentValue

from .errors import StoreError, StoreSyntaxError
from .section_file import SectionFile

_INT_RE = re.compile(r"-?\d+\Z")
_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\t": "\\t", "\r": "\\r"}
_UNESCAPES = {"\\": "\\", '"': '"', "n": "\n", "t": "\t", "r": "\r"}


def _new_parser() -> configparser.ConfigParser:
    parser = configparser.ConfigParser(
        interpolation=None,
        delimiters=("=",),
        comment_prefixes=(";",),
        default_section="\x00defaults",
        strict=True,
    )
    parser.optionxform = str  # type: ignore[assignment,method-assign]
    return parser


def quote(text: str) -> str:
    return '"' + "".join(_ESCAPES.get(char, char) for char in text) + '"'


def format_value(value: DocumentValue) -> str:
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return quote(value)
    return ", ".join(quote(item) for item in value)


def parse_value(raw: str) -> DocumentValue:
    """Parse one rendered value back to int, bool, str or list of str."""
    text = raw.strip()
    if text == "TRUE":
        return True
    if text == "FALSE":
        return False
    if _INT_RE.match(text):
        return int(text)
    if not text:
        return []
    strings = _parse_quoted_list(text)
    return strings[0] if len(strings) == 1 else strings


def _parse_quoted_list(text: str) -> List[str]:
    items: List[str] = []
    pos = 0
    length = len(text)
    while True:
        if pos >= length or text[pos] != '"':
            raise StoreSyntaxError(f"Expected a quoted string at column {pos}: {text!r}")
        pos += 1
        chars: List[str] = []
        while True:
            if pos >= length:
                raise StoreSyntaxError(f"Unterminated string: {text!r}")
            char = text[pos]
            if char == "\\":
                if pos + 1 >= length or text[pos + 1] not in _UNESCAPES:
                    raise StoreSyntaxError(f"Bad escape at column {pos}: {text!r}")
                chars.append(_UNESCAPES[text[pos + 1]])
                pos += 2
                continue
            if char == '"':
                pos += 1
                break
            chars.append(char)
            pos += 1
        items.append("".join(chars))
        while pos < length and text[pos] == " ":
            pos += 1
        if pos >= length:
            return items
        if text[pos] != ",":
            raise StoreSyntaxError(f"Expected ',' at column {pos}: {text!r}")
        pos += 1
        while pos < length and text[pos] == " ":
            pos += 1


def dumps(document: SectionFile) -> str:
    """Render ``document`` to text."""
    parser = _new_parser()
    for name in document.section_names():
        parser.add_section(name)
        for key, value in document.entries(name):
            parser.set(name, key, format_value(value))
    buffer = io.StringIO()
    parser.write(buffer)
    return buffer.getvalue()


def loads(text: str) -> SectionFile:
    """Parse text produced by ``dumps`` (or edited by hand)."""
    parser = _new_parser()
    try:
        parser.read_string(text)
    except configparser.Error as exc:
        raise StoreSyntaxError(f"Malformed document: {exc}") from exc
    document = SectionFile()
    for name in parser.sections():
        document.add_section(name)
        for key, raw in parser.items(name, raw=True):
            document.set_value(f"{name}.{key}", parse_value(raw))
    return document


def read_document(path: Path | str) -> SectionFile:
    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise StoreError(f"Save file not found: {file_path}") from exc
    except OSError as exc:
        raise StoreError(f"Unable to read save file: {file_path}") from exc
    return loads(text)


def write_document(document: SectionFile, path: Path | str) -> Path:
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        file_path.write_text(dumps(document), encoding="utf-8")
    except OSError as exc:
        raise StoreError(f"Unable to write save file: {file_path}") from exc
    return file_path
