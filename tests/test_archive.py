import zipfile

import pytest

from catalog.archive import ArchiveDocument
from catalog.errors import ArchiveNotFound, MalformedArchive


def test_missing_path_raises_not_found(tmp_path):
    with pytest.raises(ArchiveNotFound):
        ArchiveDocument(tmp_path / "nope.ods")


def test_non_zip_file_is_malformed(tmp_path):
    path = tmp_path / "broken.ods"
    path.write_bytes(b"not a zip")
    with pytest.raises(MalformedArchive):
        ArchiveDocument(path)


def test_missing_content_entry_is_malformed(tmp_path):
    path = tmp_path / "empty.ods"
    with zipfile.ZipFile(path, mode="w") as archive:
        archive.writestr("styles.xml", "<styles/>")
    with pytest.raises(MalformedArchive, match="content.xml"):
        ArchiveDocument(path)


def test_content_and_image_entries(make_ods):
    path = make_ods(
        [["", "Name"]],
        pictures={
            "Pictures/1.jpeg": b"a",
            "Pictures/2.gif": b"b",
            "Thumbnails/thumbnail.png": b"c",
            "Pictures/3.JPG": b"d",
        },
    )
    with ArchiveDocument(path) as document:
        assert b"table:table-row" in document.content()
        assert document.image_entries() == ["Pictures/1.jpeg", "Pictures/2.gif"]
        assert document.read("Pictures/2.gif") == b"b"
