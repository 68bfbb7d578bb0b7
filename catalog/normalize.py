"""
Record normalization.

Responsibilities:
- decoding remote CSV payloads (encoding detection + newline normalization)
- positional mapping of RawRows into CanonicalRecords
- additional-data capture for columns beyond the canonical six
- deduplication on (name, brand)
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Sequence

from charset_normalizer import from_bytes

from .models import CanonicalRecord, RawRow
from .rules import (
    BRAND_COLUMN,
    FIRST_EXTRA_COLUMN,
    HEADER_FALLBACK,
    NAME_COLUMN,
    PERFORMANCE_COLUMN,
    PLACEHOLDER,
    RELEASE_COLUMN,
)
from .tables import is_admissible_name

logger = logging.getLogger(__name__)


def decode_payload(raw: bytes) -> str:
    """
    Decode a remote CSV payload to text with LF line endings.

    Rules:
    - Detect encoding best-effort via charset-normalizer; default to UTF-8.
    - If decode fails, fall back to UTF-8, then to replacement characters.
    - A leading UTF-8 BOM is dropped.
    """
    match = from_bytes(raw).best()
    decode_used = match.encoding if match is not None else "utf-8"
    if raw.startswith(b"\xef\xbb\xbf") and decode_used.lower().replace("-", "_") in ("utf_8", "utf8"):
        decode_used = "utf-8-sig"

    try:
        text = raw.decode(decode_used)
    except (UnicodeDecodeError, LookupError):
        try:
            text = raw.decode("utf-8-sig")
        except UnicodeDecodeError:
            logger.warning("Payload is not valid %s; decoding with replacement", decode_used)
            text = raw.decode("utf-8", errors="replace")

    return text.replace("\r\n", "\n").replace("\r", "\n")


def clean_field(value: str) -> str:
    return value.replace('"', "").strip()


def _or_placeholder(value: str) -> str:
    value = clean_field(value)
    return value if value and value != PLACEHOLDER else PLACEHOLDER


def extract_additional_data(row: RawRow, headers: Sequence[str]) -> Dict[str, str]:
    additional: Dict[str, str] = {}
    for index in range(FIRST_EXTRA_COLUMN, len(row.fields)):
        value = row.fields[index].strip()
        if not value or value == PLACEHOLDER:
            continue
        column = headers[index] if index < len(headers) and headers[index] else HEADER_FALLBACK
        additional[column] = value
    return additional


def normalize_row(row: RawRow, headers: Sequence[str], image_url: str) -> CanonicalRecord:
    """
    Map one RawRow to a CanonicalRecord.

    Columns: B=name, C=brand, D=release year, E=performance score, G+ =
    additional data. Price has no source column.

    Raises:
        ValueError: if the name column fails the admission rule
    """
    name = clean_field(row.cell(NAME_COLUMN))
    if not is_admissible_name(name):
        raise ValueError(f"Row {row.position} has no usable device name: {name!r}")

    return CanonicalRecord(
        name=name,
        brand=_or_placeholder(row.cell(BRAND_COLUMN)),
        price=PLACEHOLDER,
        release_year=_or_placeholder(row.cell(RELEASE_COLUMN)),
        performance_score=_or_placeholder(row.cell(PERFORMANCE_COLUMN)),
        image_url=image_url,
        additional_data=extract_additional_data(row, headers),
    )


def dedupe_records(records: Iterable[CanonicalRecord]) -> List[CanonicalRecord]:
    """Keep the first record for every (name, brand) pair, preserving order."""
    seen: set[tuple[str, str]] = set()
    unique: List[CanonicalRecord] = []
    for record in records:
        if record.identity in seen:
            continue
        seen.add(record.identity)
        unique.append(record)
    return unique


def collect_additional_columns(records: Iterable[CanonicalRecord]) -> List[str]:
    """Additional-data column names in order of first appearance across the set."""
    columns: Dict[str, None] = {}
    for record in records:
        for key in record.additional_data:
            columns.setdefault(key, None)
    return list(columns)


def log_summary(records: Sequence[CanonicalRecord], source: str) -> None:
    with_extra = sum(1 for r in records if r.additional_data)
    sample = list(records[0].additional_data)[:10] if records else []
    logger.info(
        "%s extraction: %d devices, %d with additional data, sample columns %s",
        source, len(records), with_extra, sample,
    )
