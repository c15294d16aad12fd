from pathlib import Path

import pytest

from worldsave.store import (
    SectionFile,
    StoreError,
    StoreSyntaxError,
    dumps,
    loads,
    read_document,
    write_document,
)
from worldsave.store.text_io import format_value, parse_value, quote


def test_format_value_per_type() -> None:
    assert format_value(12) == "12"
    assert format_value(-3) == "-3"
    assert format_value(True) == "TRUE"
    assert format_value(False) == "FALSE"
    assert format_value("a\"b") == '"a\\"b"'
    assert format_value(["x", "y"]) == '"x", "y"'


def test_parse_value_per_type() -> None:
    assert parse_value("12") == 12
    assert parse_value(" -3 ") == -3
    assert parse_value("TRUE") is True
    assert parse_value("FALSE") is False
    assert parse_value('"TRUE"') == "TRUE"
    assert parse_value('"a", "b"') == ["a", "b"]
    assert parse_value("") == []


def test_quote_escapes_control_characters() -> None:
    text = 'line one\nline "two"\t\\ end\r'
    assert parse_value(quote(text)) == text


@pytest.mark.parametrize("raw", ['"unterminated', '"a" "b"', '"bad \\q escape"', "bare words"])
def test_parse_value_rejects_malformed_text(raw: str) -> None:
    with pytest.raises(StoreSyntaxError):
        parse_value(raw)


def test_dumps_and_loads_preserve_document() -> None:
    document = SectionFile()
    document.set_str("savefile.options", " +version2 specials")
    document.set_int("savefile.version", 20)
    document.set_str_vec("savefile.roads_vector", ["Road", "Railroad", "Maglev"])
    document.set_str("map.t0000", "  gg:")
    document.set_str("map.label_1_2", "semi; colon = equals")
    document.set_bool("game.save_known", True)
    document.set_str("game.id", "")
    document.add_section("script")

    restored = loads(dumps(document))

    assert restored == document
    assert restored.lookup_str("map.t0000") == "  gg:"


def test_dumps_is_deterministic() -> None:
    document = SectionFile()
    document.set_int("b.y", 2)
    document.set_int("a.x", 1)
    assert dumps(document) == dumps(document)
    assert dumps(document).index("[b]") < dumps(document).index("[a]")


def test_loads_rejects_duplicate_sections() -> None:
    with pytest.raises(StoreSyntaxError):
        loads("[game]\nturn = 1\n[game]\nturn = 2\n")


def test_loads_accepts_comments() -> None:
    document = loads("; written by hand\n[game]\nturn = 4\n")
    assert document.lookup_int("game.turn") == 4


def test_write_and_read_document(tmp_path: Path) -> None:
    document = SectionFile()
    document.set_int("game.turn", 9)
    path = write_document(document, tmp_path / "nested" / "world.sav")
    assert path.exists()
    assert read_document(path) == document


def test_read_document_missing_file(tmp_path: Path) -> None:
    with pytest.raises(StoreError):
        read_document(tmp_path / "missing.sav")
