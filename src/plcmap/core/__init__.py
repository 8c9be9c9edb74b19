"""Address mapping engine.

Pure batch building plus an immutable editing session:
    build_mappings(records) -> BuildResult
    MappingSession.from_result(result).toggle_channel_bit(i, bit) -> MappingSession

Every derived structure (bit index, expected identifiers) is recomputed from
the current mapping list.
"""

from plcmap.core.address import (
    SUPPORTED_AREAS,
    classify_memory_area,
    is_supported_area,
    memory_area_group,
    normalize_boolean_address,
    normalize_fixed_width_address,
    split_boolean_address,
)
from plcmap.core.bits import BaseBits, BitIndex, BitOverlap
from plcmap.core.builder import BuildResult, BuildStats, build_from_grid, build_mappings
from plcmap.core.naming import WordWidth, generate_identifier, identifier_for, valid_plc_ordinal
from plcmap.core.overview import Overview, analyze
from plcmap.core.session import MappingSession
from plcmap.core.types import (
    AddressMapping,
    BitInfo,
    ChannelMetadata,
    DataType,
    RawRecord,
    SkippedRecord,
    SkipReason,
)

__all__ = [
    "AddressMapping",
    "BaseBits",
    "BitIndex",
    "BitInfo",
    "BitOverlap",
    "BuildResult",
    "BuildStats",
    "ChannelMetadata",
    "DataType",
    "MappingSession",
    "Overview",
    "RawRecord",
    "SUPPORTED_AREAS",
    "SkipReason",
    "SkippedRecord",
    "WordWidth",
    "analyze",
    "build_from_grid",
    "build_mappings",
    "classify_memory_area",
    "generate_identifier",
    "identifier_for",
    "is_supported_area",
    "memory_area_group",
    "normalize_boolean_address",
    "normalize_fixed_width_address",
    "split_boolean_address",
    "valid_plc_ordinal",
]
