from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence
import struct
import sys

import pytest
from pypdf import PdfWriter
from pypdf.generic import (
    ArrayObject,
    DecodedStreamObject,
    DictionaryObject,
    NameObject,
    NumberObject,
    TextStringObject,
)

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from combinepdf.document import Document  # noqa: E402


def make_document(page_count: int, *, nested: bool = False, outline: bool = False) -> Document:
    """Build a small in-memory document: catalog, pages root, then pages.

    Each page owns a content stream. With *nested* the pages hang off an
    intermediate Pages node; with *outline* the catalog carries a one-item
    outline pointing at the first page.
    """

    document = Document()
    catalog = DictionaryObject({NameObject("/Type"): NameObject("/Catalog")})
    catalog_id = document.add_object(catalog)
    pages_root = DictionaryObject({NameObject("/Type"): NameObject("/Pages")})
    pages_id = document.add_object(pages_root)
    catalog[NameObject("/Pages")] = document.reference(pages_id)

    parent_id = pages_id
    parent = pages_root
    if nested:
        parent = DictionaryObject(
            {
                NameObject("/Type"): NameObject("/Pages"),
                NameObject("/Parent"): document.reference(pages_id),
            }
        )
        parent_id = document.add_object(parent)
        pages_root[NameObject("/Kids")] = ArrayObject([document.reference(parent_id)])
        pages_root[NameObject("/Count")] = NumberObject(page_count)

    kids = ArrayObject()
    page_ids = []
    for index in range(page_count):
        content = DecodedStreamObject()
        content.set_data(f"BT /F1 12 Tf 10 10 Td (page {index}) Tj ET".encode("ascii"))
        content_id = document.add_object(content)
        page = DictionaryObject(
            {
                NameObject("/Type"): NameObject("/Page"),
                NameObject("/Parent"): document.reference(parent_id),
                NameObject("/MediaBox"): ArrayObject(
                    [NumberObject(0), NumberObject(0), NumberObject(200), NumberObject(200)]
                ),
                NameObject("/Contents"): document.reference(content_id),
            }
        )
        page_id = document.add_object(page)
        kids.append(document.reference(page_id))
        page_ids.append(page_id)
    parent[NameObject("/Kids")] = kids
    parent[NameObject("/Count")] = NumberObject(page_count)

    if outline and page_ids:
        outlines = DictionaryObject({NameObject("/Type"): NameObject("/Outlines")})
        outlines_id = document.add_object(outlines)
        item = DictionaryObject(
            {
                NameObject("/Title"): TextStringObject("Chapter 1"),
                NameObject("/Parent"): document.reference(outlines_id),
                NameObject("/Dest"): ArrayObject(
                    [document.reference(page_ids[0]), NameObject("/Fit")]
                ),
            }
        )
        item_id = document.add_object(item)
        outlines[NameObject("/First")] = document.reference(item_id)
        outlines[NameObject("/Last")] = document.reference(item_id)
        outlines[NameObject("/Count")] = NumberObject(1)
        catalog[NameObject("/Outlines")] = document.reference(outlines_id)

    document.trailer[NameObject("/Root")] = document.reference(catalog_id)
    return document


@pytest.fixture()
def document_factory() -> Callable[..., Document]:
    return make_document


@pytest.fixture()
def pdf_factory(tmp_path: Path) -> Callable[..., Path]:
    def _create(
        filename: str,
        pages: int = 1,
        title: str | None = None,
        widths: Sequence[int] | None = None,
        outline: Sequence[str] | None = None,
        password: str | None = None,
    ) -> Path:
        path = tmp_path / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        writer = PdfWriter()
        page_widths = list(widths) if widths is not None else [72] * pages
        for width in page_widths:
            writer.add_blank_page(width=width, height=72)
        for index, entry in enumerate(outline or []):
            writer.add_outline_item(entry, index % len(page_widths))
        if title is not None:
            writer.add_metadata({"/Title": title})
        if password is not None:
            writer.encrypt(user_password=password, owner_password="owner-secret")
        with path.open("wb") as handle:
            writer.write(handle)
        return path

    return _create


@pytest.fixture()
def sample_pdfs(pdf_factory: Callable[..., Path]) -> list[Path]:
    pdf1 = pdf_factory("one.pdf", title="Document One")
    pdf2 = pdf_factory("two.pdf")
    return [pdf1, pdf2]


def object_stream_pdf_bytes(widths: Sequence[int] = (100, 200)) -> bytes:
    """Serialize a PDF 1.5 file whose objects all live in one object stream.

    Objects 1..N are the catalog, the pages root and one page per width,
    packed into an ``/ObjStm``; the file is indexed by an ``/XRef`` stream.
    """

    count = len(widths)
    kids = " ".join(f"{number} 0 R" for number in range(3, 3 + count))
    members = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        f"<< /Type /Pages /Kids [{kids}] /Count {count} >>".encode("ascii"),
    ]
    members += [
        f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 {width} 72] >>".encode("ascii") for width in widths
    ]

    body = b""
    offsets = []
    for member in members:
        offsets.append(len(body))
        body += member + b"\n"
    index = " ".join(f"{number} {offset}" for number, offset in enumerate(offsets, start=1))
    index_bytes = index.encode("ascii") + b"\n"
    payload = index_bytes + body

    stream_id = len(members) + 1
    xref_id = stream_id + 1
    data = bytearray(b"%PDF-1.5\n")
    stream_offset = len(data)
    data += (
        f"{stream_id} 0 obj\n<< /Type /ObjStm /N {len(members)} /First {len(index_bytes)} "
        f"/Length {len(payload)} >>\nstream\n"
    ).encode("ascii")
    data += payload + b"\nendstream\nendobj\n"

    xref_offset = len(data)
    rows = [struct.pack(">BIH", 0, 0, 65535)]
    rows += [struct.pack(">BIH", 2, stream_id, position) for position in range(len(members))]
    rows += [struct.pack(">BIH", 1, stream_offset, 0), struct.pack(">BIH", 1, xref_offset, 0)]
    table = b"".join(rows)
    data += (
        f"{xref_id} 0 obj\n<< /Type /XRef /Size {xref_id + 1} /W [1 4 2] /Root 1 0 R "
        f"/Length {len(table)} >>\nstream\n"
    ).encode("ascii")
    data += table + b"\nendstream\nendobj\n"
    data += f"startxref\n{xref_offset}\n%%EOF\n".encode("ascii")
    return bytes(data)


@pytest.fixture()
def object_stream_pdf(tmp_path: Path) -> Path:
    path = tmp_path / "compact.pdf"
    path.write_bytes(object_stream_pdf_bytes())
    return path


@pytest.fixture()
def corrupt_pdf(tmp_path: Path) -> Path:
    path = tmp_path / "corrupt.pdf"
    path.write_text("not a pdf")
    return path
