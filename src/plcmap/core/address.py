"""Register address normalization and memory-area classification."""

from __future__ import annotations

FIXED_WIDTH_FAMILY = "E"
FIXED_WIDTH = 5
BIT_WIDTH = 2

SUPPORTED_AREAS: frozenset[str] = frozenset({"D", "W", "H", "A", "E", "T", "C"})
DEFAULT_AREA = "A"
IO_GROUP = "I/O"


def normalize_fixed_width_address(address: str) -> str:
    """Zero-pad an ``E`` address to five characters after the family letter.

    The width counts everything after the letter as written, so ``E999``
    becomes ``E00999`` while ``E0999.1`` is already wide enough.  Other
    families are returned unchanged.
    """
    if not address.startswith(FIXED_WIDTH_FAMILY):
        return address
    remainder = address[len(FIXED_WIDTH_FAMILY) :]
    if 1 <= len(remainder) < FIXED_WIDTH:
        return FIXED_WIDTH_FAMILY + remainder.rjust(FIXED_WIDTH, "0")
    return address


def normalize_boolean_address(address: str) -> str:
    """Return ``base.XX`` for a boolean address.

    No bit suffix means bit 0 (``"1100"`` -> ``"1100.00"``).  A one-digit
    suffix is left-padded as text (``"1100.1"`` -> ``"1100.01"``).
    """
    if "." not in address:
        return f"{address}.00"
    base, bit = address.split(".", 1)
    return f"{base}.{bit.rjust(BIT_WIDTH, '0')}"


def split_boolean_address(address: str) -> tuple[str, str]:
    """Split a normalized boolean address into ``(base, bit)``."""
    base, _, bit = normalize_boolean_address(address).partition(".")
    return base, bit


def parse_bit(bit: str) -> int | None:
    """Parse a bit suffix, returning ``None`` when it is not an integer."""
    try:
        return int(bit)
    except ValueError:
        return None


def classify_memory_area(address: str) -> str:
    """Memory-area letter used in generated identifiers."""
    if not address or address[0].isdigit():
        return DEFAULT_AREA
    return address[0].upper()


def memory_area_group(address: str) -> str:
    """Coarse area used for filtering, statistics and export.

    ``I``/``O`` prefixes and numeric addresses fold into ``"I/O"``; an empty
    address has no area.
    """
    if not address:
        return ""
    first = address[0].upper()
    if first in ("I", "O") or address[0].isdigit():
        return IO_GROUP
    return first


def is_supported_area(address: str) -> bool:
    """Whether the address belongs to a memory area the engine handles.

    Two-letter area prefixes (``CF10``) are not supported.
    """
    if not address:
        return False
    if len(address) >= 2 and address[1].isalpha():
        return False
    if address[0].isdigit():
        return True
    return address[0] in SUPPORTED_AREAS
