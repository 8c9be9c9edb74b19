"""Tests for memory-area and datatype statistics."""

from __future__ import annotations

from plcmap.core import AddressMapping, analyze, build_mappings


def test_counts_by_area_and_type(mixed_records):
    result = build_mappings(mixed_records)
    overview = analyze(result.mappings, result.merged_boolean_addresses)

    assert overview.area_counts == {"E": 1, "I/O": 1, "D": 2}
    assert overview.area_addresses["D"] == ("D100", "D200")
    assert overview.datatype_counts == {"BOOL": 2, "WORD": 1, "UDINT": 1}
    assert overview.boolean_channel_addresses == ("E0999.1", "E0999.3")


def test_areas_outside_overview_are_dropped(mixed_records):
    overview = analyze(build_mappings(mixed_records).mappings)
    # W20 is a supported area but not an overview area.
    assert "W" not in overview.area_counts
    assert "CHANNEL" not in overview.datatype_counts


def test_nonstandard_types_collected():
    overview = analyze(
        [
            AddressMapping("D1", "TIMER", "P1_D_1_W1"),
            AddressMapping("D2", "modified channel", "P1_D_2_W1"),
            AddressMapping("D3", "float32", "P1_D_3_W1"),
        ]
    )
    assert overview.area_counts == {"D": 3}
    assert overview.other_datatypes == {"TIMER", "modified channel"}
    assert overview.datatype_counts == {"float32": 1}


def test_empty():
    overview = analyze([])
    assert overview.area_counts == {}
    assert overview.other_datatypes == frozenset()
