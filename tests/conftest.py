"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from plcmap.core import AddressMapping, MappingSession, RawRecord, build_mappings


def raw(declared_type: str, address: str, description: str = "desc") -> RawRecord:
    """Shorthand for a raw register record."""
    return RawRecord(declared_type=declared_type, address=address, description=description)


@pytest.fixture
def mixed_records() -> list[RawRecord]:
    return [
        raw("BOOL", "E0999.1", "pump run"),
        raw("WORD", "D100", "speed"),
        raw("BOOL", "1100", "start"),
        raw("BOOL", "E0999.3", "pump fault"),
        raw("UDINT", "D200", "counter"),
        raw("INT", "CF10", "flag"),
        raw("CHANNEL", "W20", "status word"),
    ]


@pytest.fixture
def channel_session() -> MappingSession:
    """Session holding a boolean channel at E0999 with bits 3 and 5."""
    result = build_mappings([raw("BOOL", "E0999.3"), raw("BOOL", "E0999.5")])
    return MappingSession.from_result(result)


@pytest.fixture
def modified_channel() -> AddressMapping:
    return AddressMapping(
        source_address="D300",
        declared_type="modified channel",
        target_identifier="P1_D_300_W1",
    )
