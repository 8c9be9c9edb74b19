"""Tests for the derived bit-membership index."""

from __future__ import annotations

from plcmap.core import AddressMapping, BitIndex


def _index(*mappings: AddressMapping) -> BitIndex:
    return BitIndex.from_mappings(list(mappings))


def test_empty():
    index = _index()
    assert len(index) == 0
    assert "D1" not in index
    assert index.for_base("D1").bool_bits == frozenset()


def test_channel_and_individual_bits_share_bool_bits():
    index = _index(
        AddressMapping("E0999", "BOOL", "P1_E_0999_BC", bit_positions=(1, 3)),
        AddressMapping("E0999.05", "BOOL", "P1_E_0999_B05"),
        AddressMapping("D1.02", "BOOL", "P1_D_1_B02"),
    )
    assert index.bases() == ("D1", "E0999")
    assert index.for_base("E0999").bool_bits == {1, 3, 5}
    assert index.for_base("D1").bool_bits == {2}


def test_modified_channels_tracked_per_index():
    index = _index(
        AddressMapping("D300", "modified channel", "P1_D_300_W1", bit_positions=(0, 1)),
        AddressMapping("D300", "modified channel", "P1_D_300_W1", bit_positions=(4,)),
    )
    entry = index.for_base("D300")
    assert dict(entry.modified_bits) == {0: {0, 1}, 1: {4}}
    assert entry.modified_bits_except(0) == {4}
    assert entry.bool_bits == frozenset()


def test_bits_outside_word_are_ignored():
    index = _index(
        AddressMapping("D1.20", "BOOL", "P1_D_1_B20"),
        AddressMapping("D2.xx", "BOOL", "P1_D_2_Bxx"),
    )
    assert len(index) == 0


def test_non_boolean_mappings_are_ignored():
    index = _index(
        AddressMapping("D100", "WORD", "P1_D_100_W1"),
        AddressMapping("W20", "CHANNEL", "P1_W_20_C"),
    )
    assert len(index) == 0


def test_channel_bits_prefers_own_bit_list():
    index = _index(
        AddressMapping("E0999", "BOOL", "P1_E_0999_BC", bit_positions=(1, 3)),
        AddressMapping("E0999.05", "BOOL", "P1_E_0999_B05"),
    )
    assert index.channel_bits(0) == {1, 3}


def test_channel_bits_from_metadata():
    payload = {
        "plc_reg_add": "E0999",
        "data_type": "BOOL",
        "opcua_reg_add": "P1_E_0999_BC",
        "metadata": {
            "bit_count": 2,
            "bit_mappings": {
                "bit_02": {"address": "E0999.02", "description": "", "bit_position": 2},
                "bit_06": {"address": "E0999.06", "description": "", "bit_position": 6},
            },
        },
    }
    index = _index(AddressMapping.from_dict(payload))
    assert index.channel_bits(0) == {2, 6}
    assert index.for_base("E0999").bool_bits == {2, 6}
