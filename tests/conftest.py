import zipfile
from xml.sax.saxutils import escape

import pytest

from catalog.settings import Settings

NAMESPACES = (
    'xmlns:office="urn:oasis:names:tc:opendocument:xmlns:office:1.0" '
    'xmlns:table="urn:oasis:names:tc:opendocument:xmlns:table:1.0" '
    'xmlns:text="urn:oasis:names:tc:opendocument:xmlns:text:1.0" '
    'xmlns:draw="urn:oasis:names:tc:opendocument:xmlns:drawing:1.0" '
    'xmlns:xlink="http://www.w3.org/1999/xlink"'
)


def build_content_xml(rows, images=None):
    """rows: list of cell-text lists; images: {row index: href} placed in column A."""
    images = images or {}
    row_xml = []
    for i, row in enumerate(rows):
        cells = []
        for j, value in enumerate(row):
            inner = ""
            if j == 0 and i in images:
                inner += (
                    '<draw:frame draw:name="img">'
                    f'<draw:image xlink:href="{images[i]}" xlink:type="simple"/>'
                    "</draw:frame>"
                )
            if value:
                inner += f"<text:p>{escape(value)}</text:p>"
            cells.append(f"<table:table-cell>{inner}</table:table-cell>")
        row_xml.append(f"<table:table-row>{''.join(cells)}</table:table-row>")

    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f"<office:document-content {NAMESPACES}><office:body><office:spreadsheet>"
        f'<table:table table:name="Handhelds">{"".join(row_xml)}</table:table>'
        "</office:spreadsheet></office:body></office:document-content>"
    ).encode("utf-8")


@pytest.fixture
def make_ods(tmp_path):
    def _make(rows, images=None, pictures=None, name="handhelds.ods", content=None):
        path = tmp_path / name
        with zipfile.ZipFile(path, mode="w") as archive:
            archive.writestr("mimetype", "application/vnd.oasis.opendocument.spreadsheet")
            archive.writestr("content.xml", content if content is not None else build_content_xml(rows, images))
            for entry_name, data in (pictures or {}).items():
                archive.writestr(entry_name, data)
        return path

    return _make


@pytest.fixture
def settings(tmp_path):
    return Settings(
        archive_path=tmp_path / "handhelds.ods",
        asset_dir=tmp_path / "public" / "handheld-images",
        asset_url_prefix="/handheld-images",
        sheet_id="sheet123",
        remote_timeout=1.0,
    )


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()
