"""Decoding of PLC tool exports into a grid of string cells."""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from plcmap.core.types import RawRecord

logger = logging.getLogger(__name__)

DEFAULT_ENCODINGS: tuple[str, ...] = ("shift_jis", "utf-8", "euc_jp", "iso2022_jp")
MIN_COLUMNS = 4
HEADER_MARKERS: tuple[str, ...] = ("register", "type", "address")


def decode_bytes(data: bytes, encodings: Sequence[str] = DEFAULT_ENCODINGS) -> str:
    """Decode an export, trying each encoding in turn.

    The first decoding that succeeds without replacement characters and
    contains a comma wins; otherwise the data is decoded as UTF-8 with
    replacement.
    """
    for encoding in encodings:
        try:
            text = data.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            continue
        if text and "�" not in text and "," in text:
            logger.debug("Decoded export as %s", encoding)
            return text
    return data.decode("utf-8", errors="replace")


def parse_grid(text: str) -> list[list[str]]:
    """Split CSV text into rows, dropping empty lines."""
    return [row for row in csv.reader(io.StringIO(text)) if any(cell.strip() for cell in row)]


def read_grid(path: str | Path, encodings: Sequence[str] = DEFAULT_ENCODINGS) -> list[list[str]]:
    """Read a CSV or TXT export from disk.

    Raises:
        FileNotFoundError: If the path does not exist.
    """
    data = Path(path).read_bytes()
    rows = parse_grid(decode_bytes(data, encodings))
    logger.info("Read %d row(s) from %s", len(rows), path)
    return rows


def _is_header(row: Sequence[str]) -> bool:
    return any(marker in (cell or "").lower() for cell in row for marker in HEADER_MARKERS)


def records_from_grid(rows: Iterable[Sequence[str]]) -> list[RawRecord]:
    """Turn grid rows into raw records.

    Columns are ``[name, type, address, description, value?]``.  A leading
    header row is skipped; rows with fewer than four columns are not records
    and are dropped without being counted.
    """
    records: list[RawRecord] = []
    for position, row in enumerate(rows):
        if position == 0 and _is_header(row):
            continue
        if len(row) < MIN_COLUMNS:
            continue
        value = row[4] if len(row) > 4 and row[4] else "0"
        records.append(
            RawRecord(
                declared_type=row[1],
                address=row[2],
                description=row[3],
                value=value,
            )
        )
    return records
