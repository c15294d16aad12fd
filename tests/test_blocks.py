import pytest

from worldsave.services.errors import MalformedField
from worldsave.services.savegame.blocks import (
    PART_SIZE,
    quote_block,
    read_block,
    read_quoted,
    split_parts,
    unquote_block,
    write_block,
    write_quoted,
)
from worldsave.services.savegame.status import SaveReport
from worldsave.store import SectionFile


def test_quote_block_format() -> None:
    assert quote_block(b"\x00\xff\x10") == "3:00 ff 10 "
    assert unquote_block("3:00 ff 10 ") == b"\x00\xff\x10"
    assert unquote_block(quote_block(b"")) == b""


@pytest.mark.parametrize("text", ["00 ff", "2:00 ff 10 ", "x:00 ", "1:0g ", "1:000 "])
def test_unquote_block_rejects_bad_text(text: str) -> None:
    with pytest.raises(ValueError):
        unquote_block(text)


def test_short_block_is_one_part() -> None:
    quoted = quote_block(bytes(10))
    assert split_parts(quoted) == [quoted]


@pytest.mark.parametrize("length", [255, 256, 257, 768, 1000, 4096])
def test_parts_reassemble_and_stay_aligned(length: int) -> None:
    quoted = quote_block(bytes(index % 256 for index in range(length)))
    parts = split_parts(quoted)

    assert "".join(parts) == quoted
    assert all(len(part) <= PART_SIZE + 2 for part in parts)
    # Every part after the first starts on a byte boundary.
    for part in parts[1:]:
        assert part[2] == " "


def test_block_round_trip_through_document() -> None:
    data = bytes(range(256)) * 5
    document = SectionFile()
    write_block(document, "player0", data)
    report = SaveReport(operation="load")

    assert document.lookup_int("player0.attribute_v2_block_length") == len(data)
    assert document.lookup_int("player0.attribute_v2_block_parts") > 1
    assert read_block(document, "player0", report) == data
    assert report.issues == []


def test_missing_block_reads_as_none() -> None:
    assert read_block(SectionFile(), "player0", SaveReport()) is None


def test_length_mismatch_drops_block_with_warning() -> None:
    document = SectionFile()
    write_block(document, "player0", b"abc")
    document.set_int("player0.attribute_v2_block_length", 4)
    report = SaveReport(operation="load")

    assert read_block(document, "player0", report) is None
    assert report.ok
    assert report.codes() == ["ATTRIBUTE_LENGTH_MISMATCH"]


def test_missing_part_drops_block_with_warning() -> None:
    document = SectionFile()
    write_block(document, "player0", bytes(2000))
    document.remove("player0.attribute_v2_block_data.part1")
    report = SaveReport(operation="load")

    assert read_block(document, "player0", report) is None
    assert report.codes() == ["ATTRIBUTE_PART_MISSING"]


def test_quoted_entry_helpers() -> None:
    document = SectionFile()
    write_quoted(document, "script.state", b"hello")
    assert read_quoted(document, "script.state") == b"hello"
    document.set_str("script.state", "9:00 ")
    with pytest.raises(MalformedField):
        read_quoted(document, "script.state")
