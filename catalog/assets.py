"""
Relocation of embedded spreadsheet images to addressable storage.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import Dict

from .archive import ArchiveDocument
from .models import RawRow
from .rules import IMAGE_COLUMN, PLACEHOLDER, PLACEHOLDER_IMAGE_URL, RELOCATED_NAME_PREFIX

logger = logging.getLogger(__name__)


def relocated_name(ordinal: int, entry_name: str) -> str:
    return f"{RELOCATED_NAME_PREFIX}{ordinal}{PurePosixPath(entry_name).suffix}"


def relocate_images(document: ArchiveDocument, output_dir: Path, url_prefix: str) -> Dict[str, str]:
    """
    Copy every archive image into output_dir as device_<n><ext>.

    Names depend only on discovery order, so repeated runs overwrite the same
    files and previously issued URLs stay valid.

    Returns:
        Mapping of in-archive entry name to public URL, in discovery order
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    prefix = url_prefix.rstrip("/")

    image_map: Dict[str, str] = {}
    for ordinal, entry_name in enumerate(document.image_entries(), start=1):
        target_name = relocated_name(ordinal, entry_name)
        (output_dir / target_name).write_bytes(document.read(entry_name))
        image_map[entry_name] = f"{prefix}/{target_name}"
        logger.debug("Extracted image: %s -> %s", entry_name, target_name)

    return image_map


def resolve_image_url(row: RawRow, image_map: Dict[str, str],
                      placeholder: str = PLACEHOLDER_IMAGE_URL) -> str:
    """
    Pick the image for one row; never fails the row.

    1. embedded image reference: exact key, then first key with the same file name
    2. textual reference in column A: the image at the row's position
    3. placeholder
    """
    if row.image_ref:
        if row.image_ref in image_map:
            return image_map[row.image_ref]
        file_name = PurePosixPath(row.image_ref).name
        if file_name:
            for key, url in image_map.items():
                if PurePosixPath(key).name == file_name:
                    return url
        return placeholder

    column_a = row.cell(IMAGE_COLUMN).strip()
    if column_a and column_a != PLACEHOLDER:
        urls = list(image_map.values())
        if 0 <= row.position < len(urls):
            return urls[row.position]

    return placeholder
