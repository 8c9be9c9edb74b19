"""Memory-area and datatype breakdown of a mapping list."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field

from plcmap.core.address import IO_GROUP, memory_area_group
from plcmap.core.types import AddressMapping, DataType

OVERVIEW_AREAS: tuple[str, ...] = (IO_GROUP, "A", "C", "D", "E", "T", "H")

STANDARD_DATATYPES: frozenset[str] = frozenset(
    t.value for t in DataType if t is not DataType.MODIFIED_CHANNEL
)


@dataclass(frozen=True)
class Overview:
    area_counts: dict[str, int] = field(default_factory=dict)
    area_addresses: dict[str, tuple[str, ...]] = field(default_factory=dict)
    datatype_counts: dict[str, int] = field(default_factory=dict)
    datatype_addresses: dict[str, tuple[str, ...]] = field(default_factory=dict)
    other_datatypes: frozenset[str] = frozenset()
    boolean_channel_addresses: tuple[str, ...] = ()


def analyze(
    mappings: Iterable[AddressMapping],
    boolean_channel_addresses: Iterable[str] = (),
) -> Overview:
    """Count mappings per memory area and per declared type.

    Mappings outside the overview areas are left out entirely.  Declared
    types outside the standard set are collected in ``other_datatypes``.
    """
    areas: dict[str, list[str]] = defaultdict(list)
    datatypes: dict[str, list[str]] = defaultdict(list)
    others: set[str] = set()

    for mapping in mappings:
        area = memory_area_group(mapping.source_address)
        if area not in OVERVIEW_AREAS:
            continue
        areas[area].append(mapping.source_address)
        if mapping.declared_type in STANDARD_DATATYPES:
            datatypes[mapping.declared_type].append(mapping.source_address)
        else:
            others.add(mapping.declared_type)

    return Overview(
        area_counts={area: len(addrs) for area, addrs in areas.items()},
        area_addresses={area: tuple(addrs) for area, addrs in areas.items()},
        datatype_counts={dt: len(addrs) for dt, addrs in datatypes.items()},
        datatype_addresses={dt: tuple(addrs) for dt, addrs in datatypes.items()},
        other_datatypes=frozenset(others),
        boolean_channel_addresses=tuple(boolean_channel_addresses),
    )
