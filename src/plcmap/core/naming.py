"""OPC UA identifier generation.

Identifiers follow ``P{plc}_{area}_{register}_{suffix}``:

+-------------------------+------------+
| Mapping                 | Suffix     |
+=========================+============+
| grouped BOOL channel    | ``BC``     |
+-------------------------+------------+
| single BOOL bit         | ``B{XX}``  |
+-------------------------+------------+
| ``CHANNEL``/``channel`` | ``C``      |
+-------------------------+------------+
| anything else           | ``W{n}``   |
+-------------------------+------------+

Modified channels fall in the last row and get ``W1``.
"""

from __future__ import annotations

from enum import Enum

from plcmap.core.address import BIT_WIDTH, classify_memory_area
from plcmap.core.types import CHANNEL_TYPES, AddressMapping, DataType

DEFAULT_PLC_ORDINAL = 1
DEFAULT_WORD_WIDTH = 1


class WordWidth(Enum):
    """Word-count suffix per declared type.

    Lookup is case-insensitive; types not listed here use
    ``DEFAULT_WORD_WIDTH``.
    """

    WORD = 1
    INT = 1
    UDINT = 2
    DWORD = 3
    REAL = 4
    LREAL = 8

    @classmethod
    def for_type(cls, declared_type: str) -> int:
        try:
            return cls[declared_type.upper()].value
        except KeyError:
            return DEFAULT_WORD_WIDTH


def generate_identifier(
    address: str,
    declared_type: str,
    bit_position: str | None = None,
    is_bit_group: bool = False,
    plc_ordinal: int = DEFAULT_PLC_ORDINAL,
) -> str:
    """Generate the target identifier for an address.

    Args:
        address: Normalized address without bit suffix.
        declared_type: Declared type string.
        bit_position: Bit suffix for single BOOL bits; zero-padded to two
            digits, ``"00"`` when missing.
        is_bit_group: True for a BOOL channel grouping several bits.
        plc_ordinal: 1-based PLC number.

    Returns:
        The identifier, e.g. ``"P2_D_200_W2"``.
    """
    area = classify_memory_area(address)
    register = address if address[:1].isdigit() else address[1:]

    if declared_type == DataType.BOOL.value:
        if is_bit_group:
            suffix = "BC"
        else:
            suffix = "B" + (bit_position or "").rjust(BIT_WIDTH, "0")
    elif declared_type in CHANNEL_TYPES:
        suffix = "C"
    else:
        suffix = f"W{WordWidth.for_type(declared_type)}"

    return f"P{plc_ordinal}_{area}_{register}_{suffix}"


def identifier_for(mapping: AddressMapping, plc_ordinal: int = DEFAULT_PLC_ORDINAL) -> str:
    """Derive the identifier a mapping should carry from its own fields."""
    base = mapping.base_address
    if mapping.is_bool_channel:
        return generate_identifier(base, DataType.BOOL.value, None, True, plc_ordinal)
    if mapping.declared_type == DataType.BOOL.value:
        return generate_identifier(
            base, DataType.BOOL.value, mapping.bit_suffix, False, plc_ordinal
        )
    return generate_identifier(base, mapping.declared_type, None, False, plc_ordinal)


def valid_plc_ordinal(value: int | str | None) -> int:
    """Coerce user input to a positive PLC ordinal, defaulting to 1."""
    if value is None:
        return DEFAULT_PLC_ORDINAL
    try:
        number = int(str(value).strip())
    except ValueError:
        return DEFAULT_PLC_ORDINAL
    return number if number > 0 else DEFAULT_PLC_ORDINAL
