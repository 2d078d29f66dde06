from __future__ import annotations

from io import BytesIO
from typing import Callable

from pypdf import PdfReader, PdfWriter

from combinepdf.document import Document, enumerate_pages
from combinepdf.outline import add_outline, adjust_zero_pages
from combinepdf.types import ZERO_ID, Bookmark, ObjectId

BLUE = (0.0, 0.0, 1.0)


def _writer(page_count: int) -> tuple[PdfWriter, dict[ObjectId, object]]:
    writer = PdfWriter()
    for _ in range(page_count):
        writer.add_blank_page(width=72, height=72)
    page_refs = {(index + 1, 0): page.indirect_reference for index, page in enumerate(writer.pages)}
    return writer, page_refs


def _read_back(writer: PdfWriter) -> PdfReader:
    buffer = BytesIO()
    writer.write(buffer)
    buffer.seek(0)
    return PdfReader(buffer)


def _bookmark(title: str, target: ObjectId, level: int = 0) -> Bookmark:
    return Bookmark(title=title, color=BLUE, level=level, target=target)


def test_add_outline_without_bookmarks() -> None:
    writer, page_refs = _writer(1)

    assert add_outline(writer, [], page_refs) == []
    assert _read_back(writer).outline == []


def test_add_outline_points_entries_at_their_pages() -> None:
    writer, page_refs = _writer(3)
    bookmarks = [_bookmark("Page_1", (1, 0)), _bookmark("Page_3", (3, 0))]

    items = add_outline(writer, bookmarks, page_refs)

    assert len(items) == 2
    reader = _read_back(writer)
    outline = reader.outline
    assert [item.title for item in outline] == ["Page_1", "Page_3"]
    assert [reader.get_destination_page_number(item) for item in outline] == [0, 2]
    for item in outline:
        assert [float(component) for component in item.color] == [0.0, 0.0, 1.0]


def test_add_outline_nests_by_level() -> None:
    writer, page_refs = _writer(1)
    bookmarks = [
        _bookmark("Entry 0", (1, 0), level=0),
        _bookmark("Entry 1", (1, 0), level=1),
        _bookmark("Entry 2", (1, 0), level=1),
        _bookmark("Entry 3", (1, 0), level=0),
    ]

    add_outline(writer, bookmarks, page_refs)

    outline = _read_back(writer).outline
    assert len(outline) == 3
    assert outline[0].title == "Entry 0"
    assert [item.title for item in outline[1]] == ["Entry 1", "Entry 2"]
    assert outline[2].title == "Entry 3"


def test_add_outline_skips_unwritten_targets() -> None:
    writer, page_refs = _writer(1)
    bookmarks = [_bookmark("lost", (9, 0)), _bookmark("kept", (1, 0))]

    items = add_outline(writer, bookmarks, page_refs)

    assert len(items) == 1
    assert [item.title for item in _read_back(writer).outline] == ["kept"]


def test_adjust_zero_pages_moves_zero_target_to_first_page(
    document_factory: Callable[..., Document],
) -> None:
    document = document_factory(2)
    first_page = enumerate_pages(document)[0][0]
    second_page = enumerate_pages(document)[1][0]
    bookmarks = [
        Bookmark(title="lost", color=BLUE, level=0, target=ZERO_ID),
        Bookmark(title="kept", color=BLUE, level=0, target=second_page),
    ]

    adjusted = adjust_zero_pages(document, bookmarks)

    assert [bookmark.target for bookmark in adjusted] == [first_page, second_page]


def test_adjust_zero_pages_moves_tree_node_to_its_first_page(
    document_factory: Callable[..., Document],
) -> None:
    document = document_factory(2, nested=True)
    intermediate = (3, 0)
    bookmarks = [Bookmark(title="node", color=BLUE, level=0, target=intermediate)]

    adjusted = adjust_zero_pages(document, bookmarks)

    assert adjusted[0].target == enumerate_pages(document)[0][0]


def test_adjust_zero_pages_without_pages_keeps_bookmarks() -> None:
    bookmarks = [Bookmark(title="lost", color=BLUE, level=0, target=ZERO_ID)]

    assert adjust_zero_pages(Document(), bookmarks) == bookmarks
