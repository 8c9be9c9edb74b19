"""plcmap: PLC register export to OPC UA address mappings."""

from plcmap.core import (
    AddressMapping,
    BuildResult,
    DataType,
    MappingSession,
    RawRecord,
    build_from_grid,
    build_mappings,
    generate_identifier,
)
from plcmap.opcua import PlcDescriptor, build_config, load_config, validate_config, write_config

__all__ = [
    "AddressMapping",
    "BuildResult",
    "DataType",
    "MappingSession",
    "PlcDescriptor",
    "RawRecord",
    "build_config",
    "build_from_grid",
    "build_mappings",
    "generate_identifier",
    "load_config",
    "validate_config",
    "write_config",
]
