"""
Read access to a ZIP-structured spreadsheet document (OpenDocument .ods).
"""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path
from typing import List

from .errors import ArchiveNotFound, MalformedArchive
from .rules import CONTENT_ENTRY, IMAGE_EXTENSIONS, IMAGE_PREFIX

logger = logging.getLogger(__name__)


def is_image_entry(name: str) -> bool:
    # Extension match is case-sensitive.
    return name.startswith(IMAGE_PREFIX) and name.endswith(IMAGE_EXTENSIONS)


class ArchiveDocument:
    """
    Open spreadsheet archive.

    Raises:
        ArchiveNotFound: if the path does not exist
        MalformedArchive: if the file is not a ZIP archive or has no content.xml
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()
        if not self.path.exists():
            raise ArchiveNotFound(f"Spreadsheet archive not found: {self.path}")

        try:
            self._zip = zipfile.ZipFile(self.path)
        except zipfile.BadZipFile as e:
            raise MalformedArchive(f"Not a ZIP archive: {self.path}") from e

        self._names = self._zip.namelist()
        if CONTENT_ENTRY not in self._names:
            self._zip.close()
            raise MalformedArchive(f"{CONTENT_ENTRY} not found in {self.path}")

    def __enter__(self) -> "ArchiveDocument":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self._zip.close()

    def content(self) -> bytes:
        return self._zip.read(CONTENT_ENTRY)

    def image_entries(self) -> List[str]:
        """Image entry names under Pictures/, in archive order."""
        images = [name for name in self._names if is_image_entry(name)]
        logger.info("Found %d images in %s", len(images), self.path.name)
        return images

    def read(self, name: str) -> bytes:
        return self._zip.read(name)
