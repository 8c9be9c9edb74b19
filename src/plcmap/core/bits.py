"""Derived bit-membership index over a mapping list.

The index is a disposable value: it is rebuilt from the current mappings
whenever they change and is never patched in place.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from pyrsistent import PMap, pmap

from plcmap.core.address import parse_bit
from plcmap.core.types import BIT_MAX, BIT_MIN, AddressMapping, DataType


@dataclass(frozen=True)
class BaseBits:
    """Bits claimed at one base address.

    Attributes:
        bool_bits: Bits held by the boolean channel or its individual bits.
        modified_bits: Bits per modified-channel mapping index.
    """

    bool_bits: frozenset[int] = frozenset()
    modified_bits: PMap = pmap()

    def modified_bits_except(self, index: int) -> frozenset[int]:
        claimed: set[int] = set()
        for owner, bits in self.modified_bits.items():
            if owner != index:
                claimed.update(bits)
        return frozenset(claimed)


@dataclass(frozen=True)
class BitOverlap:
    """Bits another grouping already claims at a modified channel's base.

    Attributes:
        bool_bits: Bits claimed by the boolean channel grouping.
        other_modified_bits: Bits claimed by other modified channels.
        conflicts: The channel's own bits found in either set.
    """

    bool_bits: frozenset[int] = frozenset()
    other_modified_bits: frozenset[int] = frozenset()
    conflicts: frozenset[int] = frozenset()

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)


def _suffix_bit(mapping: AddressMapping) -> int | None:
    suffix = mapping.bit_suffix
    if suffix is None:
        return None
    bit = parse_bit(suffix)
    if bit is None or not BIT_MIN <= bit <= BIT_MAX:
        return None
    return bit


class BitIndex:
    """Per-base bit claims computed from a mapping list."""

    def __init__(self, mappings: Sequence[AddressMapping], bases: PMap):
        self._mappings = mappings
        self._bases = bases

    @classmethod
    def from_mappings(cls, mappings: Sequence[AddressMapping]) -> BitIndex:
        bool_bits: dict[str, set[int]] = {}
        modified: dict[str, dict[int, frozenset[int]]] = {}

        for index, mapping in enumerate(mappings):
            base = mapping.base_address
            if mapping.is_bool_channel:
                bool_bits.setdefault(base, set()).update(mapping.claimed_bits())
            elif mapping.is_modified_channel:
                modified.setdefault(base, {})[index] = frozenset(mapping.claimed_bits())
            elif mapping.declared_type == DataType.BOOL.value:
                bit = _suffix_bit(mapping)
                if bit is not None:
                    bool_bits.setdefault(base, set()).add(bit)

        bases = {
            base: BaseBits(
                bool_bits=frozenset(bool_bits.get(base, ())),
                modified_bits=pmap(modified.get(base, {})),
            )
            for base in set(bool_bits) | set(modified)
        }
        return cls(mappings, pmap(bases))

    def for_base(self, base: str) -> BaseBits:
        return self._bases.get(base, BaseBits())

    def channel_bits(self, index: int) -> frozenset[int]:
        """Bits of the boolean channel at ``index``.

        Uses the channel's own bit list; falls back to individual ``base.XX``
        BOOL mappings for legacy channels that carry none.
        """
        mapping = self._mappings[index]
        if mapping.bit_positions is not None or mapping.metadata is not None:
            return frozenset(mapping.claimed_bits())
        prefix = mapping.base_address + "."
        found: set[int] = set()
        for other in self._mappings:
            if other.declared_type == DataType.BOOL.value and other.source_address.startswith(
                prefix
            ):
                bit = _suffix_bit(other)
                if bit is not None:
                    found.add(bit)
        return frozenset(found)

    def overlap_for(self, index: int) -> BitOverlap:
        """Overlap data for the modified channel at ``index``."""
        mapping = self._mappings[index]
        entry = self.for_base(mapping.base_address)
        others = entry.modified_bits_except(index)
        own = frozenset(mapping.claimed_bits())
        return BitOverlap(
            bool_bits=entry.bool_bits,
            other_modified_bits=others,
            conflicts=own & (entry.bool_bits | others),
        )

    def bases(self) -> tuple[str, ...]:
        return tuple(sorted(self._bases))

    def __contains__(self, base: object) -> bool:
        return base in self._bases

    def __len__(self) -> int:
        return len(self._bases)
