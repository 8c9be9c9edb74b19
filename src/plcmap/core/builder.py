"""Batch conversion of raw register records into address mappings."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from plcmap.core.address import (
    is_supported_area,
    normalize_boolean_address,
    normalize_fixed_width_address,
    parse_bit,
)
from plcmap.core.naming import DEFAULT_PLC_ORDINAL, generate_identifier
from plcmap.core.types import (
    AddressMapping,
    ChannelMetadata,
    DataType,
    RawRecord,
    SkippedRecord,
    SkipReason,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildStats:
    total_records: int = 0
    valid_records: int = 0
    skipped_records: int = 0
    boolean_channels: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "totalRecords": self.total_records,
            "validRecords": self.valid_records,
            "skippedRecords": self.skipped_records,
            "booleanChannels": self.boolean_channels,
        }


@dataclass(frozen=True)
class BuildResult:
    """Output of `build_mappings`.

    Attributes:
        mappings: Boolean mappings in bucket order, then all other mappings
            in record order.
        stats: Record and mapping counts.
        skipped: Records rejected with a reason.
        merged_boolean_addresses: Original addresses of every BOOL record
            folded into a channel.
    """

    mappings: tuple[AddressMapping, ...] = field(default_factory=tuple)
    stats: BuildStats = field(default_factory=BuildStats)
    skipped: tuple[SkippedRecord, ...] = field(default_factory=tuple)
    merged_boolean_addresses: tuple[str, ...] = field(default_factory=tuple)

    def summary(self) -> str:
        return (
            f"{self.stats.valid_records} mapping(s) from {self.stats.total_records} record(s), "
            f"{self.stats.boolean_channels} boolean channel(s), "
            f"{self.stats.skipped_records} skipped."
        )


@dataclass(frozen=True)
class _BitEntry:
    original_address: str
    normalized_address: str
    bit: str
    description: str
    value: str


def _bool_channel(
    base: str, entries: Sequence[_BitEntry], plc_ordinal: int
) -> AddressMapping:
    descriptions: dict[int, str] = {}
    for entry in entries:
        bit = parse_bit(entry.bit)
        if bit is not None:
            descriptions.setdefault(bit, entry.description)
    bits = tuple(sorted(descriptions))
    return AddressMapping(
        source_address=base,
        declared_type=DataType.BOOL.value,
        target_identifier=generate_identifier(base, DataType.BOOL.value, None, True, plc_ordinal),
        bit_positions=bits,
        metadata=ChannelMetadata.from_bits(base, bits, descriptions),
    )


def _single_bool(base: str, entry: _BitEntry, plc_ordinal: int) -> AddressMapping:
    return AddressMapping(
        source_address=entry.normalized_address,
        declared_type=DataType.BOOL.value,
        target_identifier=generate_identifier(
            base, DataType.BOOL.value, entry.bit, False, plc_ordinal
        ),
        description=entry.description or None,
    )


def build_mappings(
    records: Iterable[RawRecord], plc_ordinal: int = DEFAULT_PLC_ORDINAL
) -> BuildResult:
    """Transform raw register records into address mappings.

    BOOL records sharing a base address are grouped: two or more records
    become one channel mapping, a lone record stays an individual mapping.
    A bit listed twice appears once in the channel, with the first
    description.  Records in unsupported memory areas are returned in
    ``skipped`` rather than raised.

    Args:
        records: Raw records in source order.
        plc_ordinal: PLC number embedded in every identifier.

    Returns:
        A `BuildResult`.
    """
    buckets: dict[str, list[_BitEntry]] = {}
    others: list[AddressMapping] = []
    skipped: list[SkippedRecord] = []
    total = 0

    for record in records:
        total += 1
        if not is_supported_area(record.address):
            logger.debug("Skipping %r: unsupported memory area", record.address)
            skipped.append(
                SkippedRecord(
                    address=record.address,
                    declared_type=record.declared_type,
                    description=record.description,
                    reason=SkipReason.UNSUPPORTED_AREA.value,
                )
            )
            continue

        address = normalize_fixed_width_address(record.address)

        if record.declared_type == DataType.BOOL.value:
            normalized = normalize_boolean_address(address)
            base, bit = normalized.split(".", 1)
            buckets.setdefault(base, []).append(
                _BitEntry(
                    original_address=record.address,
                    normalized_address=normalized,
                    bit=bit,
                    description=record.description,
                    value=record.value or "0",
                )
            )
            continue

        others.append(
            AddressMapping(
                source_address=address,
                declared_type=record.declared_type,
                target_identifier=generate_identifier(
                    address, record.declared_type, None, False, plc_ordinal
                ),
                description=record.description or None,
            )
        )

    mappings: list[AddressMapping] = []
    merged: list[str] = []
    channel_count = 0
    for base, entries in buckets.items():
        if len(entries) >= 2:
            channel_count += 1
            merged.extend(entry.original_address for entry in entries)
            mappings.append(_bool_channel(base, entries, plc_ordinal))
            logger.debug("Grouped %d records at %s into a boolean channel", len(entries), base)
        else:
            mappings.append(_single_bool(base, entries[0], plc_ordinal))

    mappings.extend(others)

    result = BuildResult(
        mappings=tuple(mappings),
        stats=BuildStats(
            total_records=total,
            valid_records=len(mappings),
            skipped_records=len(skipped),
            boolean_channels=channel_count,
        ),
        skipped=tuple(skipped),
        merged_boolean_addresses=tuple(merged),
    )
    logger.info("Built %s", result.summary())
    return result


def build_from_grid(
    rows: Iterable[Sequence[str]], plc_ordinal: int = DEFAULT_PLC_ORDINAL
) -> BuildResult:
    """Build mappings straight from a decoded grid of string cells."""
    from plcmap.io.grid import records_from_grid

    return build_mappings(records_from_grid(rows), plc_ordinal)
