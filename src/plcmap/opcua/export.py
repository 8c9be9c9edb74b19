"""Projection of mappings into the OPC UA server configuration artifact.

The artifact is JSON shaped as::

    {"plcs": [{"plc_name": ..., "plc_ip": ..., "opcua_url": ...,
               "address_mappings": [...]}]}

`validate_config` and `load_config` read such a document back.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Collection, Iterable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from plcmap.core.address import memory_area_group
from plcmap.core.naming import DEFAULT_PLC_ORDINAL
from plcmap.core.session import MappingSession
from plcmap.core.types import AddressMapping, ChannelMetadata, DataType
from plcmap.opcua.config import DEFAULT_MEMORY_AREAS, PlcDescriptor

logger = logging.getLogger(__name__)

EXPORT_CHANNEL_TYPE = "channel"

_PLC_PREFIX = re.compile(r"^P(\d+)_")


def export_type(declared_type: str) -> str:
    """Lower-case a declared type; modified channels export as ``channel``."""
    if declared_type == DataType.MODIFIED_CHANNEL.value:
        return EXPORT_CHANNEL_TYPE
    return declared_type.lower()


EXPORT_TYPES: frozenset[str] = frozenset(export_type(t.value) for t in DataType)


def _require_str(data: Mapping[str, Any], key: str, *, required: bool = True) -> str:
    value = data.get(key)
    if value is None and not required:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{key!r} must be a string, got {type(value).__name__}.")
    if required and not value:
        raise ValueError(f"{key!r} is required.")
    return value


def _check_metadata(data: Any) -> ChannelMetadata:
    if not isinstance(data, Mapping):
        raise ValueError("'metadata' must be an object.")
    if isinstance(data.get("bit_count"), bool) or not isinstance(data.get("bit_count"), int):
        raise ValueError("'metadata.bit_count' must be an integer.")
    bit_mappings = data.get("bit_mappings")
    if not isinstance(bit_mappings, Mapping):
        raise ValueError("'metadata.bit_mappings' must be an object.")
    for key, info in bit_mappings.items():
        if not isinstance(info, Mapping):
            raise ValueError(f"'metadata.bit_mappings.{key}' must be an object.")
        _require_str(info, "address", required=False)
        _require_str(info, "description", required=False)
        position = info.get("bit_position")
        if isinstance(position, bool) or not isinstance(position, int):
            raise ValueError(f"'metadata.bit_mappings.{key}.bit_position' must be an integer.")
    return ChannelMetadata.from_dict(data)


@dataclass(frozen=True)
class ExportRecord:
    source_address: str
    declared_type: str
    target_identifier: str
    description: str
    memory_area: str
    metadata: ChannelMetadata | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "plc_reg_add": self.source_address,
            "data_type": self.declared_type,
            "opcua_reg_add": self.target_identifier,
            "description": self.description,
            "Memory_Area": self.memory_area,
        }
        if self.metadata is not None:
            data["metadata"] = self.metadata.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Any) -> ExportRecord:
        """Validate and read one ``address_mappings`` entry.

        Raises:
            ValueError: If a required field is missing or empty, the data
                type is unknown, or the metadata is malformed.
        """
        if not isinstance(data, Mapping):
            raise ValueError("Address mapping must be an object.")
        address = _require_str(data, "plc_reg_add")
        identifier = _require_str(data, "opcua_reg_add")
        declared_type = _require_str(data, "data_type")
        if declared_type.lower() not in EXPORT_TYPES:
            raise ValueError(f"Unknown data type {declared_type!r}.")
        metadata = data.get("metadata")
        return cls(
            source_address=address,
            declared_type=declared_type,
            target_identifier=identifier,
            description=_require_str(data, "description", required=False),
            memory_area=data.get("Memory_Area") or memory_area_group(address),
            metadata=_check_metadata(metadata) if metadata is not None else None,
        )


@dataclass(frozen=True)
class PlcConfig:
    """One validated ``plcs`` entry of a configuration document."""

    descriptor: PlcDescriptor
    records: tuple[ExportRecord, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "plc_name": self.descriptor.name,
            "plc_ip": self.descriptor.ip,
            "opcua_url": self.descriptor.opcua_url,
            "address_mappings": [record.to_dict() for record in self.records],
        }


def project(
    mappings: Sequence[AddressMapping],
    memory_areas: Collection[str] = DEFAULT_MEMORY_AREAS,
    selection: Collection[int] = (),
) -> list[ExportRecord]:
    """Filter and convert mappings to export records.

    Args:
        mappings: Mappings in list order.
        memory_areas: Areas (see `memory_area_group`) to keep.
        selection: Indices to keep; an empty selection keeps everything.
    """
    records: list[ExportRecord] = []
    for index, mapping in enumerate(mappings):
        area = memory_area_group(mapping.source_address)
        if area not in memory_areas:
            continue
        if selection and index not in selection:
            continue
        records.append(
            ExportRecord(
                source_address=mapping.source_address,
                declared_type=export_type(mapping.declared_type),
                target_identifier=mapping.target_identifier,
                description=mapping.description or "",
                memory_area=area,
                metadata=mapping.metadata,
            )
        )
    return records


def dedupe(records: Iterable[ExportRecord], plc_name: str) -> list[ExportRecord]:
    """Drop records whose ``(plc_name, identifier)`` was already seen."""
    seen: set[tuple[str, str]] = set()
    kept: list[ExportRecord] = []
    for record in records:
        key = (plc_name, record.target_identifier)
        if key in seen:
            continue
        seen.add(key)
        kept.append(record)
    return kept


def duplicate_identifiers(
    records: Iterable[ExportRecord], plc_name: str
) -> list[tuple[ExportRecord, ExportRecord]]:
    """Pairs of ``(kept, shadowed)`` records that `dedupe` would collapse."""
    first: dict[tuple[str, str], ExportRecord] = {}
    pairs: list[tuple[ExportRecord, ExportRecord]] = []
    for record in records:
        key = (plc_name, record.target_identifier)
        if key in first:
            pairs.append((first[key], record))
        else:
            first[key] = record
    return pairs


def build_config(
    source: MappingSession | Sequence[AddressMapping],
    descriptor: PlcDescriptor | None = None,
    memory_areas: Collection[str] = DEFAULT_MEMORY_AREAS,
    selection: Collection[int] | None = None,
) -> dict[str, Any]:
    """Build the export document for one PLC.

    Args:
        source: A session (its selection is used unless ``selection`` is
            given) or a plain mapping list.
        descriptor: PLC identity.  Defaults to `PlcDescriptor()`, numbered
            after the session's PLC ordinal when ``source`` is a session.
        memory_areas: Areas to export.
        selection: Explicit index selection; empty means all.

    Returns:
        The ``{"plcs": [...]}`` document as plain Python data.

    Raises:
        ValueError: If ``descriptor.plc_no`` differs from the session's PLC
            ordinal, since the identifiers would name another PLC.
    """
    if isinstance(source, MappingSession):
        mappings: Sequence[AddressMapping] = source.mappings
        if selection is None:
            selection = source.selection
        if descriptor is None:
            descriptor = PlcDescriptor(plc_no=source.plc_ordinal)
        elif descriptor.plc_no != source.plc_ordinal:
            raise ValueError(
                f"PLC number {descriptor.plc_no} does not match the session's "
                f"PLC ordinal {source.plc_ordinal}."
            )
    else:
        mappings = source
    descriptor = descriptor or PlcDescriptor()
    records = project(mappings, memory_areas, selection or ())
    kept = dedupe(records, descriptor.name)
    if len(kept) != len(records):
        logger.info(
            "Dropped %d mapping(s) with duplicate identifiers for %s",
            len(records) - len(kept),
            descriptor.name,
        )
    return {"plcs": [PlcConfig(descriptor, tuple(kept)).to_dict()]}


def _plc_no_from(records: Sequence[ExportRecord]) -> int:
    for record in records:
        match = _PLC_PREFIX.match(record.target_identifier)
        if match and int(match.group(1)) > 0:
            return int(match.group(1))
    return DEFAULT_PLC_ORDINAL


def validate_config(document: Any) -> list[PlcConfig]:
    """Check a configuration document and read it into `PlcConfig` values.

    The PLC number of each entry is taken from the first identifier that
    carries a ``P{n}_`` prefix.

    Raises:
        ValueError: On the first invalid field, prefixed with its location,
            e.g. ``plcs[0].address_mappings[3]: 'plc_reg_add' is required.``
    """
    if not isinstance(document, Mapping) or not isinstance(document.get("plcs"), list):
        raise ValueError("Configuration must be an object with a 'plcs' list.")
    configs: list[PlcConfig] = []
    for i, plc in enumerate(document["plcs"]):
        where = f"plcs[{i}]"
        if not isinstance(plc, Mapping):
            raise ValueError(f"{where}: PLC entry must be an object.")
        entries = plc.get("address_mappings")
        if not isinstance(entries, list):
            raise ValueError(f"{where}: 'address_mappings' must be a list.")
        records: list[ExportRecord] = []
        for j, entry in enumerate(entries):
            try:
                records.append(ExportRecord.from_dict(entry))
            except ValueError as e:
                raise ValueError(f"{where}.address_mappings[{j}]: {e}") from e
        try:
            descriptor = PlcDescriptor(
                name=_require_str(plc, "plc_name"),
                ip=_require_str(plc, "plc_ip"),
                opcua_url=_require_str(plc, "opcua_url"),
                plc_no=_plc_no_from(records),
            )
        except ValueError as e:
            raise ValueError(f"{where}: {e}") from e
        configs.append(PlcConfig(descriptor, tuple(records)))
    return configs


def dumps_config(config: dict[str, Any]) -> str:
    return json.dumps(config, indent=2, ensure_ascii=False)


def write_config(path: str | Path, config: dict[str, Any]) -> Path:
    """Write the export document as ``<name>.json``; returns the path written."""
    target = Path(path)
    if target.suffix != ".json":
        target = target.with_name(target.name + ".json")
    target.write_text(dumps_config(config), encoding="utf-8")
    logger.info("Wrote configuration to %s", target)
    return target


def load_config(path: str | Path) -> list[PlcConfig]:
    """Read and validate a configuration document from disk.

    Raises:
        FileNotFoundError: If the path does not exist.
        ValueError: If the file is not JSON or fails `validate_config`.
    """
    configs = validate_config(json.loads(Path(path).read_text(encoding="utf-8")))
    logger.info("Loaded %d PLC configuration(s) from %s", len(configs), path)
    return configs
