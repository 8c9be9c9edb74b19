"""Data model for the address mapping engine.

Raw register records come in from a PLC tool export; `AddressMapping` values
go out.  Mappings are immutable and are edited with `dataclasses.replace`,
so every derived structure can be recomputed from the current list.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

BIT_MIN = 0
BIT_MAX = 15


class DataType(str, Enum):
    """Declared types offered for mappings.

    ``CHANNEL`` and ``MODIFIED_CHANNEL`` are pseudo-types: the former is a
    whole-word channel, the latter a user-authored group of bits.
    """

    CHANNEL = "CHANNEL"
    MODIFIED_CHANNEL = "modified channel"
    BOOL = "BOOL"
    WORD = "WORD"
    UDINT = "UDINT"
    DWORD = "DWORD"
    INT = "INT"
    REAL = "REAL"
    LREAL = "LREAL"
    INT16 = "int16"
    INT32 = "int32"
    FLOAT32 = "float32"
    BOOL_LOWER = "bool"
    STRING = "string"


CHANNEL_TYPES = frozenset({DataType.CHANNEL.value, "channel"})


class SkipReason(str, Enum):
    """Why a raw record did not become a mapping."""

    UNSUPPORTED_AREA = "unsupported memory area"


@dataclass(frozen=True)
class RawRecord:
    """One ingested register row."""

    declared_type: str
    address: str
    description: str
    value: str = "0"


@dataclass(frozen=True)
class SkippedRecord:
    address: str
    declared_type: str
    description: str
    reason: str

    def to_dict(self) -> dict[str, str]:
        return {
            "address": self.address,
            "data_type": self.declared_type,
            "description": self.description,
            "reason": self.reason,
        }


def check_bit(bit: int) -> int:
    if not BIT_MIN <= bit <= BIT_MAX:
        raise ValueError(f"Bit position {bit} out of range ({BIT_MIN}-{BIT_MAX}).")
    return bit


def bit_key(bit: int) -> str:
    return f"bit_{bit:02d}"


@dataclass(frozen=True)
class BitInfo:
    address: str
    description: str
    bit_position: int


@dataclass(frozen=True)
class ChannelMetadata:
    """Denormalized per-bit view of a channel's ``bit_positions``."""

    bit_count: int
    bit_map: Mapping[str, BitInfo] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_bits(
        cls,
        base: str,
        bits: Iterable[int],
        description: str | Mapping[int, str] = "",
    ) -> ChannelMetadata:
        """Build metadata for ``bits`` at ``base``.

        Args:
            base: Base address without bit suffix.
            bits: Claimed bit positions.
            description: One comment for every bit, or a per-bit mapping.
        """
        ordered = sorted(set(bits))
        bit_map: dict[str, BitInfo] = {}
        for bit in ordered:
            if isinstance(description, str):
                text = description
            else:
                text = description.get(bit, "")
            bit_map[bit_key(bit)] = BitInfo(
                address=f"{base}.{bit:02d}",
                description=text,
                bit_position=bit,
            )
        return cls(bit_count=len(ordered), bit_map=MappingProxyType(bit_map))

    def bit_positions(self) -> tuple[int, ...]:
        return tuple(
            sorted(
                info.bit_position
                for info in self.bit_map.values()
                if BIT_MIN <= info.bit_position <= BIT_MAX
            )
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "bit_count": self.bit_count,
            "bit_mappings": {
                key: {
                    "address": info.address,
                    "description": info.description,
                    "bit_position": info.bit_position,
                }
                for key, info in self.bit_map.items()
            },
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ChannelMetadata:
        bit_map = {
            key: BitInfo(
                address=str(info.get("address", "")),
                description=str(info.get("description", "")),
                bit_position=int(info["bit_position"]),
            )
            for key, info in dict(data.get("bit_mappings", {})).items()
        }
        return cls(
            bit_count=int(data.get("bit_count", len(bit_map))),
            bit_map=MappingProxyType(bit_map),
        )


@dataclass(frozen=True)
class AddressMapping:
    """A source register paired with its OPC UA target identifier.

    Attributes:
        source_address: Normalized PLC address.  Boolean entries are either
            a bare base address (channel) or ``base.XX`` (single bit).
        declared_type: Declared type string, see `DataType`.
        target_identifier: Generated OPC UA name; user editable.
        description: Free-text comment.
        bit_positions: Bits claimed by a channel-like mapping, sorted.
            Authoritative for bit membership.
        metadata: Per-bit view of ``bit_positions`` kept for export.
    """

    source_address: str
    declared_type: str
    target_identifier: str
    description: str | None = None
    bit_positions: tuple[int, ...] | None = None
    metadata: ChannelMetadata | None = None

    @property
    def base_address(self) -> str:
        return self.source_address.split(".", 1)[0]

    @property
    def bit_suffix(self) -> str | None:
        if "." not in self.source_address:
            return None
        return self.source_address.split(".", 1)[1]

    @property
    def is_modified_channel(self) -> bool:
        return self.declared_type == DataType.MODIFIED_CHANNEL.value

    @property
    def is_bool_channel(self) -> bool:
        if self.declared_type not in (DataType.BOOL.value, DataType.CHANNEL.value):
            return False
        if self.bit_positions is not None and self.bit_suffix is None:
            return True
        # Legacy snapshots carry no bit list; the grouped suffix marks them.
        return self.target_identifier.endswith("_BC")

    @property
    def is_individual_bool(self) -> bool:
        return (
            self.declared_type == DataType.BOOL.value
            and self.bit_suffix is not None
            and not self.is_bool_channel
        )

    def claimed_bits(self) -> tuple[int, ...]:
        """Bits this mapping claims, from ``bit_positions`` then metadata."""
        if self.bit_positions is not None:
            return tuple(b for b in self.bit_positions if BIT_MIN <= b <= BIT_MAX)
        if self.metadata is not None:
            return self.metadata.bit_positions()
        return ()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "plc_reg_add": self.source_address,
            "data_type": self.declared_type,
            "opcua_reg_add": self.target_identifier,
        }
        if self.description is not None:
            data["description"] = self.description
        if self.bit_positions is not None:
            data["bit_list"] = list(self.bit_positions)
        if self.metadata is not None:
            data["metadata"] = self.metadata.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AddressMapping:
        bits = data.get("bit_list")
        metadata = data.get("metadata")
        return cls(
            source_address=str(data.get("plc_reg_add", "")),
            declared_type=str(data.get("data_type", DataType.WORD.value)),
            target_identifier=str(data.get("opcua_reg_add", "")),
            description=data.get("description"),
            bit_positions=tuple(sorted({int(b) for b in bits})) if bits is not None else None,
            metadata=ChannelMetadata.from_dict(metadata) if metadata else None,
        )
