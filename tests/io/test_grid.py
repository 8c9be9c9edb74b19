"""Tests for decoding PLC tool exports."""

from __future__ import annotations

import pytest

from plcmap.core import build_mappings
from plcmap.io import decode_bytes, parse_grid, read_grid, records_from_grid

EXPORT = "Name,Type,Address,Comment\n,BOOL,1100,起動\n,UDINT,D200,カウンタ,5\n\n"


class TestDecode:
    def test_shift_jis(self):
        assert decode_bytes(EXPORT.encode("shift_jis")) == EXPORT

    def test_utf8(self):
        text = ",WORD,D1,温度\n"
        assert decode_bytes(text.encode("utf-8"), encodings=("utf-8",)) == text

    def test_text_without_commas_is_not_accepted(self):
        assert decode_bytes("温度".encode("shift_jis"), encodings=("shift_jis",)) != "温度"

    def test_fallback_replaces(self):
        text = decode_bytes(b"\xff\xfe no commas")
        assert "no commas" in text

    def test_custom_encodings(self):
        data = ",WORD,D1,x\n".encode("utf-16")
        assert decode_bytes(data, encodings=("utf-16",)) == ",WORD,D1,x\n"


def test_parse_grid_drops_blank_lines():
    rows = parse_grid("a,b,c,d\n\n , ,\nx,y,z,w\n")
    assert rows == [["a", "b", "c", "d"], ["x", "y", "z", "w"]]


def test_parse_grid_quoted_comma():
    rows = parse_grid(',WORD,D1,"speed, line 1"\n')
    assert rows == [["", "WORD", "D1", "speed, line 1"]]


class TestRecordsFromGrid:
    def test_header_skipped(self):
        records = records_from_grid(parse_grid(EXPORT))
        assert [(r.declared_type, r.address, r.description) for r in records] == [
            ("BOOL", "1100", "起動"),
            ("UDINT", "D200", "カウンタ"),
        ]

    def test_value_column(self):
        records = records_from_grid(parse_grid(EXPORT))
        assert [r.value for r in records] == ["0", "5"]

    def test_header_only_checked_on_first_row(self):
        rows = [[",", "BOOL", "1100", "x"], ["", "WORD", "D1", "type register"]]
        assert len(records_from_grid(rows)) == 2

    def test_short_rows_dropped(self):
        rows = [["", "BOOL", "1100"], ["", "WORD", "D1", "ok"], []]
        records = records_from_grid(rows)
        assert [r.address for r in records] == ["D1"]


def test_read_grid(tmp_path):
    path = tmp_path / "export.csv"
    path.write_bytes(EXPORT.encode("shift_jis"))

    result = build_mappings(records_from_grid(read_grid(path)))
    assert [m.target_identifier for m in result.mappings] == ["P1_A_1100_B00", "P1_D_200_W2"]
    assert result.mappings[0].description == "起動"


def test_read_grid_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_grid(tmp_path / "missing.csv")
