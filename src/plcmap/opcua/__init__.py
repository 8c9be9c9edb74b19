"""OPC UA server configuration export.

- :class:`PlcDescriptor`: name, IP and endpoint of the exported PLC.
- :func:`build_config`: filter, deduplicate and shape mappings for export.
- :func:`write_config`: write the JSON artifact.
- :func:`load_config` / :func:`validate_config`: read one back.
"""

from plcmap.opcua.config import DEFAULT_MEMORY_AREAS, PlcDescriptor
from plcmap.opcua.export import (
    EXPORT_TYPES,
    ExportRecord,
    PlcConfig,
    build_config,
    dedupe,
    dumps_config,
    duplicate_identifiers,
    export_type,
    load_config,
    project,
    validate_config,
    write_config,
)

__all__ = [
    "DEFAULT_MEMORY_AREAS",
    "EXPORT_TYPES",
    "ExportRecord",
    "PlcConfig",
    "PlcDescriptor",
    "build_config",
    "dedupe",
    "dumps_config",
    "duplicate_identifiers",
    "export_type",
    "load_config",
    "project",
    "validate_config",
    "write_config",
]
