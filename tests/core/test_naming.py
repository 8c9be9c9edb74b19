"""Tests for OPC UA identifier generation."""

from __future__ import annotations

import pytest

from plcmap.core.naming import WordWidth, generate_identifier, identifier_for, valid_plc_ordinal
from plcmap.core.types import AddressMapping


def test_word_width_table():
    assert WordWidth.for_type("WORD") == 1
    assert WordWidth.for_type("INT") == 1
    assert WordWidth.for_type("UDINT") == 2
    assert WordWidth.for_type("DWORD") == 3
    assert WordWidth.for_type("REAL") == 4
    assert WordWidth.for_type("LREAL") == 8


def test_word_width_is_case_insensitive_with_default():
    assert WordWidth.for_type("lreal") == 8
    assert WordWidth.for_type("TIMER") == 1
    assert WordWidth.for_type("") == 1


@pytest.mark.parametrize(
    ("args", "expected"),
    [
        (("D200", "UDINT", None, False, 2), "P2_D_200_W2"),
        (("D200", "REAL"), "P1_D_200_W4"),
        (("1100", "BOOL", "00"), "P1_A_1100_B00"),
        (("1100", "BOOL"), "P1_A_1100_B00"),
        (("E0999", "BOOL", None, True), "P1_E_0999_BC"),
        (("E0999", "BOOL", "03"), "P1_E_0999_B03"),
        (("W20", "CHANNEL"), "P1_W_20_C"),
        (("W20", "channel"), "P1_W_20_C"),
        (("D300", "modified channel"), "P1_D_300_W1"),
        (("1100", "BOOL", "1"), "P1_A_1100_B01"),
        (("1100", "BOOL", ""), "P1_A_1100_B00"),
        (("H4", "string"), "P1_H_4_W1"),
    ],
)
def test_generate_identifier(args, expected):
    assert generate_identifier(*args) == expected


def test_generate_identifier_is_pure():
    first = generate_identifier("D200", "DWORD", None, False, 3)
    second = generate_identifier("D200", "DWORD", None, False, 3)
    assert first == second == "P3_D_200_W3"


def test_plc_ordinal_only_changes_prefix():
    one = generate_identifier("E0999", "BOOL", "03", False, 1)
    seven = generate_identifier("E0999", "BOOL", "03", False, 7)
    assert one.split("_", 1)[1] == seven.split("_", 1)[1]
    assert one.startswith("P1_")
    assert seven.startswith("P7_")


class TestIdentifierFor:
    def test_bool_channel(self):
        channel = AddressMapping("E0999", "BOOL", "", bit_positions=(3, 5))
        assert identifier_for(channel, 2) == "P2_E_0999_BC"

    def test_individual_bool_uses_bit_suffix(self):
        bit = AddressMapping("1100.07", "BOOL", "")
        assert identifier_for(bit) == "P1_A_1100_B07"

    def test_single_digit_suffix_is_padded(self):
        assert identifier_for(AddressMapping("1100.1", "BOOL", "")) == "P1_A_1100_B01"

    def test_bool_without_suffix_is_bit_zero(self):
        assert identifier_for(AddressMapping("D10", "BOOL", "")) == "P1_D_10_B00"

    def test_modified_channel_uses_word_suffix(self):
        mapping = AddressMapping("D300", "modified channel", "", bit_positions=(1,))
        assert identifier_for(mapping) == "P1_D_300_W1"

    def test_other_types_use_base_address(self):
        assert identifier_for(AddressMapping("D200.05", "DWORD", "")) == "P1_D_200_W3"


@pytest.mark.parametrize(
    ("value", "expected"),
    [(3, 3), ("4", 4), (" 2 ", 2), (0, 1), (-5, 1), ("", 1), ("abc", 1), (None, 1)],
)
def test_valid_plc_ordinal(value, expected):
    assert valid_plc_ordinal(value) == expected
