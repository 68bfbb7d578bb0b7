"""
Table extraction for both source formats.

Turns either OpenDocument content.xml or tokenized CSV rows into a header
list plus admitted RawRows. Cell text is trimmed here; canonical field
cleanup happens in normalize.py.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from lxml import etree

from .errors import MalformedArchive
from .models import RawRow, Table
from .rules import (
    HEADER_FALLBACK,
    IMAGE_COLUMN,
    MAX_COLUMNS,
    MIN_ROW_CELLS,
    NAME_COLUMN,
    PLACEHOLDER,
)

logger = logging.getLogger(__name__)

TABLE_NS = "urn:oasis:names:tc:opendocument:xmlns:table:1.0"
TEXT_NS = "urn:oasis:names:tc:opendocument:xmlns:text:1.0"
DRAW_NS = "urn:oasis:names:tc:opendocument:xmlns:drawing:1.0"
XLINK_NS = "http://www.w3.org/1999/xlink"

ROW_TAG = f"{{{TABLE_NS}}}table-row"
CELL_TAG = f"{{{TABLE_NS}}}table-cell"
COVERED_CELL_TAG = f"{{{TABLE_NS}}}covered-table-cell"
REPEAT_ATTR = f"{{{TABLE_NS}}}number-columns-repeated"
PARAGRAPH_TAG = f"{{{TEXT_NS}}}p"
IMAGE_TAG = f"{{{DRAW_NS}}}image"
HREF_ATTR = f"{{{XLINK_NS}}}href"


def is_admissible_name(name: str) -> bool:
    """Header, footer and decorative rows carry short numeric or placeholder names."""
    name = name.replace('"', "").strip()
    return bool(name) and not name.isdigit() and name != PLACEHOLDER and len(name) > 1


def build_headers(cells: Iterable[str]) -> List[str]:
    return [c.strip() or HEADER_FALLBACK for c in cells]


def _cell_text(cell) -> str:
    paragraph = cell.find(f".//{PARAGRAPH_TAG}")
    if paragraph is None:
        return ""
    return "".join(paragraph.itertext()).strip()


def _cell_image_ref(cell) -> Optional[str]:
    image = cell.find(f".//{IMAGE_TAG}")
    if image is None:
        return None
    return image.get(HREF_ATTR) or None


def _row_cells(row) -> List[Tuple[str, object]]:
    """(text, element) per column; merged-away cells count as columns, repeats are expanded."""
    cells: List[Tuple[str, object]] = []
    for cell in row.iterchildren(CELL_TAG, COVERED_CELL_TAG):
        try:
            repeat = int(cell.get(REPEAT_ATTR, "1"))
        except ValueError:
            repeat = 1
        text = _cell_text(cell)
        for _ in range(max(repeat, 1)):
            if len(cells) >= MAX_COLUMNS:
                return cells
            cells.append((text, cell))
    return cells


def parse_content(content: bytes):
    parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=True)
    try:
        return etree.fromstring(content, parser)
    except etree.XMLSyntaxError as e:
        raise MalformedArchive(f"content.xml is not well-formed: {e}") from e


def extract_archive_table(content: bytes) -> Table:
    """
    Walk the spreadsheet rows of content.xml.

    Row 0 is the header row. Data rows with fewer than MIN_ROW_CELLS cells or
    an inadmissible name are skipped. An embedded image in column A is kept
    as the row's image reference.
    """
    root = parse_content(content)
    rows = list(root.iter(ROW_TAG))
    if not rows:
        return Table(headers=[])

    headers = build_headers(text for text, _ in _row_cells(rows[0]))
    logger.info("Found %d column headers: %s", len(headers), headers[:15])

    admitted: List[RawRow] = []
    for index, row in enumerate(rows[1:], start=1):
        cells = _row_cells(row)
        if len(cells) < MIN_ROW_CELLS:
            logger.debug("Skipping row %d: %d cells", index, len(cells))
            continue

        fields = [text for text, _ in cells]
        if not is_admissible_name(fields[NAME_COLUMN]):
            continue

        admitted.append(RawRow(
            fields=fields,
            position=index - 1,
            image_ref=_cell_image_ref(cells[IMAGE_COLUMN][1]),
        ))

    return Table(headers=headers, rows=admitted)


def extract_csv_table(rows: Iterable[List[str]], header: bool = True,
                      headers: Optional[List[str]] = None) -> Table:
    """
    Build a Table from tokenized rows.

    With header=True the first row becomes the header list; otherwise the
    given headers (or none) are used and every row is data.
    """
    iterator = iter(rows)
    if header:
        first = next(iterator, None)
        headers = build_headers(first or [])
    headers = list(headers or [])

    admitted: List[RawRow] = []
    for position, raw in enumerate(iterator):
        fields = [f.strip() for f in raw]
        if len(fields) < MIN_ROW_CELLS:
            logger.debug("Skipping CSV row %d: %d fields", position, len(fields))
            continue
        if not is_admissible_name(fields[NAME_COLUMN]):
            continue
        admitted.append(RawRow(fields=fields, position=position))

    return Table(headers=headers, rows=admitted)
