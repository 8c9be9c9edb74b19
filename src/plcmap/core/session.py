"""Interactive editing of a mapping list.

`MappingSession` is an immutable snapshot; every edit returns a new session
with identifiers and bit groupings already reconciled, so edits apply
serially and each one observes the result of the previous one.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable, Mapping, Sequence
from dataclasses import replace
from typing import Literal

from pyrsistent import PRecord, PSet, PVector, field, pset, pvector

from plcmap.core.address import memory_area_group, normalize_boolean_address
from plcmap.core.bits import BitIndex, BitOverlap
from plcmap.core.builder import BuildResult
from plcmap.core.naming import (
    DEFAULT_PLC_ORDINAL,
    generate_identifier,
    identifier_for,
    valid_plc_ordinal,
)
from plcmap.core.types import (
    CHANNEL_TYPES,
    AddressMapping,
    ChannelMetadata,
    DataType,
    check_bit,
)

logger = logging.getLogger(__name__)

EditableField = Literal["source_address", "declared_type", "target_identifier", "description"]
_EDITABLE_FIELDS = frozenset(
    {"source_address", "declared_type", "target_identifier", "description"}
)
_REGENERATING_FIELDS = frozenset({"source_address", "declared_type"})
_BIT_GROUP_TYPES = frozenset(
    {DataType.BOOL.value, DataType.MODIFIED_CHANNEL.value, *CHANNEL_TYPES}
)


def _bit_descriptions(mapping: AddressMapping) -> dict[int, str]:
    if mapping.metadata is None:
        return {}
    return {info.bit_position: info.description for info in mapping.metadata.bit_map.values()}


def _with_bits(mapping: AddressMapping, bits: Iterable[int]) -> AddressMapping:
    ordered = tuple(sorted(set(bits)))
    description: str | Mapping[int, str]
    if mapping.is_modified_channel:
        description = mapping.description or ""
    else:
        description = _bit_descriptions(mapping)
    return replace(
        mapping,
        bit_positions=ordered,
        metadata=ChannelMetadata.from_bits(mapping.base_address, ordered, description),
    )


def _matches(mapping: AddressMapping, term: str) -> bool:
    return (
        term in mapping.source_address.lower()
        or term in mapping.target_identifier.lower()
        or term in (mapping.description or "").lower()
    )


class MappingSession(PRecord):
    """Immutable editing state for one PLC's mappings.

    Attributes:
        mappings: The mapping list; the single source of truth.
        selection: Selected mapping indices, used to filter exports.
        plc_ordinal: PLC number embedded in generated identifiers.
    """

    mappings = field(type=PVector, initial=pvector())
    selection = field(type=PSet, initial=pset())
    plc_ordinal = field(type=int, initial=DEFAULT_PLC_ORDINAL)

    @classmethod
    def from_mappings(
        cls,
        mappings: Iterable[AddressMapping],
        plc_ordinal: int | str = DEFAULT_PLC_ORDINAL,
        selection: Iterable[int] | None = None,
    ) -> MappingSession:
        """Start a session; every mapping is selected unless told otherwise."""
        items = pvector(mappings)
        chosen = range(len(items)) if selection is None else selection
        return cls(
            mappings=items,
            selection=pset(i for i in chosen if 0 <= i < len(items)),
            plc_ordinal=valid_plc_ordinal(plc_ordinal),
        )

    @classmethod
    def from_result(
        cls, result: BuildResult, plc_ordinal: int | str = DEFAULT_PLC_ORDINAL
    ) -> MappingSession:
        return cls.from_mappings(result.mappings, plc_ordinal)

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    def mapping(self, index: int) -> AddressMapping:
        if not 0 <= index < len(self.mappings):
            raise IndexError(
                f"Mapping index {index} out of range (0-{len(self.mappings) - 1})."
            )
        return self.mappings[index]

    def bit_index(self) -> BitIndex:
        return BitIndex.from_mappings(self.mappings)

    def channel_bits(self, index: int) -> frozenset[int]:
        channel = self.mapping(index)
        if not channel.is_bool_channel:
            raise ValueError(
                f"Mapping {index} ({channel.source_address!r}) is not a boolean channel."
            )
        return self.bit_index().channel_bits(index)

    def bit_overlap(self, index: int) -> BitOverlap:
        """Bits other groupings claim at a modified channel's base address."""
        mapping = self.mapping(index)
        if not mapping.is_modified_channel:
            raise ValueError(
                f"Mapping {index} ({mapping.source_address!r}) is not a modified channel."
            )
        return self.bit_index().overlap_for(index)

    def expected_identifiers(self) -> tuple[str, ...]:
        """Identifiers regenerated from each mapping's current fields."""
        return tuple(
            identifier_for(m, self.plc_ordinal) if m.source_address else ""
            for m in self.mappings
        )

    def customized_indices(self) -> tuple[int, ...]:
        """Indices whose identifier differs from the generated one."""
        return tuple(
            i
            for i, (m, expected) in enumerate(zip(self.mappings, self.expected_identifiers()))
            if m.source_address and m.target_identifier != expected
        )

    def visible(
        self,
        memory_areas: Collection[str] | None = None,
        search: str = "",
    ) -> tuple[tuple[int, AddressMapping], ...]:
        """Filtered ``(index, mapping)`` rows.

        Rows without an address are always shown.  With a search term,
        matching rows come first and the original order is kept otherwise.
        """
        rows = [
            (i, m)
            for i, m in enumerate(self.mappings)
            if not m.source_address.strip()
            or memory_areas is None
            or memory_area_group(m.source_address) in memory_areas
        ]
        term = search.strip().lower()
        if term:
            rows.sort(key=lambda row: not _matches(row[1], term))
        return tuple(rows)

    def selected_variable_count(self) -> int:
        """Selected rows plus the bits of every selected modified channel."""
        bits = sum(
            len(self.mappings[i].claimed_bits())
            for i in self.selection
            if self.mappings[i].is_modified_channel
        )
        return len(self.selection) + bits

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def update_field(self, index: int, field_name: EditableField, value: str) -> MappingSession:
        """Set one field of a mapping.

        Changing the address or type regenerates the identifier and
        overwrites whatever was there, hand edits included.  A single BOOL
        bit is stored in its normalized ``base.XX`` form.
        """
        if field_name not in _EDITABLE_FIELDS:
            raise ValueError(f"Field {field_name!r} is not editable.")
        mapping = self.mapping(index)
        updated = replace(mapping, **{field_name: value})

        if field_name in _REGENERATING_FIELDS:
            if updated.declared_type not in _BIT_GROUP_TYPES:
                updated = replace(updated, bit_positions=None, metadata=None)
            elif updated.bit_positions is not None:
                updated = _with_bits(updated, updated.bit_positions)
            elif (
                updated.declared_type == DataType.BOOL.value
                and updated.source_address
                and not updated.is_bool_channel
            ):
                updated = replace(
                    updated, source_address=normalize_boolean_address(updated.source_address)
                )
            if updated.source_address and updated.declared_type:
                updated = replace(
                    updated, target_identifier=identifier_for(updated, self.plc_ordinal)
                )
                logger.debug(
                    "Regenerated identifier for mapping %d: %s",
                    index,
                    updated.target_identifier,
                )

        return self.set(mappings=self.mappings.set(index, updated))

    def toggle_channel_bit(self, index: int, bit: int) -> MappingSession:
        """Flip one bit of a boolean channel and regenerate its bit mappings.

        Every individual BOOL at the channel's base is dropped and one is
        emitted per remaining bit.  The channel itself survives only while it
        still holds two or more bits.
        """
        check_bit(bit)
        channel = self.mapping(index)
        bits = set(self.channel_bits(index))
        bits ^= {bit}

        base = channel.base_address
        prefix = base + "."
        keep = [
            i
            for i, m in enumerate(self.mappings)
            if not (
                m.declared_type == DataType.BOOL.value
                and m.source_address.startswith(prefix)
                and not m.is_bool_channel
            )
        ]
        replaced: dict[int, AddressMapping] = {}
        if len(bits) >= 2:
            replaced[index] = _with_bits(channel, bits)
        else:
            keep.remove(index)
            logger.debug("Boolean channel %s dissolved; %d bit(s) left", base, len(bits))

        descriptions = _bit_descriptions(channel)
        added = [
            AddressMapping(
                source_address=f"{base}.{b:02d}",
                declared_type=DataType.BOOL.value,
                target_identifier=generate_identifier(
                    base, DataType.BOOL.value, f"{b:02d}", False, self.plc_ordinal
                ),
                description=descriptions.get(b) or None,
            )
            for b in sorted(bits)
        ]
        return self._rebuild(keep, replaced, added)

    def toggle_modified_bit(self, index: int, bit: int) -> MappingSession:
        """Flip one bit of a modified channel; no other mapping changes."""
        check_bit(bit)
        mapping = self.mapping(index)
        if not mapping.is_modified_channel:
            raise ValueError(
                f"Mapping {index} ({mapping.source_address!r}) is not a modified channel."
            )
        bits = set(mapping.claimed_bits()) ^ {bit}
        return self.set(mappings=self.mappings.set(index, _with_bits(mapping, bits)))

    def set_modified_comment(self, index: int, comment: str) -> MappingSession:
        mapping = self.mapping(index)
        if not mapping.is_modified_channel:
            raise ValueError(
                f"Mapping {index} ({mapping.source_address!r}) is not a modified channel."
            )
        updated = _with_bits(replace(mapping, description=comment), mapping.claimed_bits())
        return self.set(mappings=self.mappings.set(index, updated))

    def add_template(self) -> MappingSession:
        """Insert an empty WORD row at the top and select it."""
        template = AddressMapping(
            source_address="", declared_type=DataType.WORD.value, target_identifier=""
        )
        return self.set(
            mappings=pvector([template, *self.mappings]),
            selection=pset([0, *(i + 1 for i in self.selection)]),
        )

    def remove(self, index: int) -> MappingSession:
        self.mapping(index)
        keep = [i for i in range(len(self.mappings)) if i != index]
        return self._rebuild(keep)

    def with_plc_ordinal(self, value: int | str | None) -> MappingSession:
        """Change the PLC number and regenerate every identifier."""
        ordinal = valid_plc_ordinal(value)
        items = [
            replace(m, target_identifier=identifier_for(m, ordinal)) if m.source_address else m
            for m in self.mappings
        ]
        logger.debug("Regenerated %d identifier(s) for PLC %d", len(items), ordinal)
        return self.set(mappings=pvector(items), plc_ordinal=ordinal)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def toggle_selection(self, index: int) -> MappingSession:
        self.mapping(index)
        if index in self.selection:
            return self.set(selection=self.selection.remove(index))
        return self.set(selection=self.selection.add(index))

    def select_all(self) -> MappingSession:
        return self.set(selection=pset(range(len(self.mappings))))

    def clear_selection(self) -> MappingSession:
        return self.set(selection=pset())

    def deselect_keys(self, keys: Iterable[str]) -> MappingSession:
        """Select every mapping whose base or full address is not in ``keys``."""
        excluded = {key.strip() for key in keys if key.strip()}
        chosen = [
            i
            for i, m in enumerate(self.mappings)
            if m.base_address not in excluded and m.source_address not in excluded
        ]
        return self.set(selection=pset(chosen))

    def _rebuild(
        self,
        keep: Sequence[int],
        replaced: Mapping[int, AddressMapping] | None = None,
        added: Sequence[AddressMapping] = (),
    ) -> MappingSession:
        # Index-keyed state follows the kept rows; added rows start selected.
        replaced = replaced or {}
        new_index = {old: new for new, old in enumerate(keep)}
        items = [replaced.get(old, self.mappings[old]) for old in keep]
        selection = {new_index[i] for i in self.selection if i in new_index}
        start = len(items)
        items.extend(added)
        selection.update(range(start, len(items)))
        return self.set(mappings=pvector(items), selection=pset(selection))
