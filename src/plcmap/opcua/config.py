"""PLC descriptor settings for exported OPC UA configurations."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from urllib.parse import urlparse

from plcmap.core.address import IO_GROUP
from plcmap.core.naming import DEFAULT_PLC_ORDINAL

DEFAULT_PLC_NAME = "PLC1"
DEFAULT_PLC_IP = "192.168.2.2"
DEFAULT_OPCUA_URL = "opc.tcp://192.168.1.20:4840"

DEFAULT_MEMORY_AREAS: frozenset[str] = frozenset({IO_GROUP, "A", "C", "D", "E", "T", "H"})


@dataclass(frozen=True)
class PlcDescriptor:
    """Identity of the PLC an exported mapping set belongs to.

    Args:
        name: PLC name; part of the export deduplication key.
        ip: PLC IP address.
        opcua_url: OPC UA endpoint, e.g. ``opc.tcp://host:4840``.
        plc_no: 1-based PLC ordinal; `build_config` requires it to match
            the ordinal the exported identifiers were generated with.

    Raises:
        ValueError: If any field is empty or malformed.
    """

    name: str = DEFAULT_PLC_NAME
    ip: str = DEFAULT_PLC_IP
    opcua_url: str = DEFAULT_OPCUA_URL
    plc_no: int = DEFAULT_PLC_ORDINAL

    def __post_init__(self):
        if not self.name:
            raise ValueError("PLC name is required.")
        try:
            ipaddress.ip_address(self.ip)
        except ValueError as e:
            raise ValueError(f"Invalid IP address {self.ip!r}.") from e
        parsed = urlparse(self.opcua_url)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError(f"Invalid OPC UA URL {self.opcua_url!r}.")
        if self.plc_no < 1:
            raise ValueError(f"PLC number must be positive, got {self.plc_no}.")
