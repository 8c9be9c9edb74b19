"""Seams to the outside world: export decoding and snapshot storage."""

from plcmap.io.grid import DEFAULT_ENCODINGS, decode_bytes, parse_grid, read_grid, records_from_grid
from plcmap.io.store import ConfigStore, MemoryConfigStore, StoredConfig

__all__ = [
    "DEFAULT_ENCODINGS",
    "ConfigStore",
    "MemoryConfigStore",
    "StoredConfig",
    "decode_bytes",
    "parse_grid",
    "read_grid",
    "records_from_grid",
]
