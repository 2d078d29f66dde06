from __future__ import annotations

from typing import Callable

import pytest
from pypdf.generic import NameObject, NumberObject, TextStringObject

from combinepdf.document import Document, enumerate_pages, object_id, object_type
from combinepdf.exceptions import MissingCatalogRootError, MissingPagesRootError
from combinepdf.merge import (
    BOOKMARK_COLOR,
    classify_objects,
    collect_pages,
    finalize_document,
    renumber_documents,
)


def test_renumber_documents_assigns_disjoint_ranges(document_factory: Callable[..., Document]) -> None:
    first = document_factory(1)
    second = document_factory(2)

    floor = renumber_documents([first, second])

    assert sorted(first.objects) == [(number, 0) for number in range(1, 5)]
    assert sorted(second.objects) == [(number, 0) for number in range(5, 11)]
    assert floor == 11
    assert second.catalog_id == (5, 0)


def test_collect_pages_counts_globally(document_factory: Callable[..., Document]) -> None:
    documents = [document_factory(3), document_factory(0), document_factory(2)]
    renumber_documents(documents)

    pages, bookmarks = collect_pages(documents)

    assert len(pages) == 5
    assert [bookmark.title for bookmark in bookmarks] == ["Page_1", "Page_4"]
    assert bookmarks[0].target == enumerate_pages(documents[0])[0][0]
    assert bookmarks[1].target == enumerate_pages(documents[2])[0][0]
    assert all(bookmark.color == BOOKMARK_COLOR and bookmark.level == 0 for bookmark in bookmarks)


def test_classify_keeps_first_catalog(document_factory: Callable[..., Document]) -> None:
    first = document_factory(1)
    second = document_factory(1)
    first.get_dictionary((1, 0))[NameObject("/Lang")] = TextStringObject("en")
    second.get_dictionary((1, 0))[NameObject("/Lang")] = TextStringObject("fr")
    renumber_documents([first, second])

    roots = classify_objects([first, second], Document())

    assert roots.catalog_id == first.catalog_id
    assert roots.catalog["/Lang"] == "en"


def test_classify_merges_pages_fields_into_first_anchor(document_factory: Callable[..., Document]) -> None:
    first = document_factory(1)
    second = document_factory(1)
    first.get_dictionary((2, 0))[NameObject("/Rotate")] = NumberObject(90)
    second.get_dictionary((2, 0))[NameObject("/Rotate")] = NumberObject(180)
    renumber_documents([first, second])

    roots = classify_objects([first, second], Document())

    assert roots.pages_id == (2, 0)
    assert roots.pages["/Rotate"] == 180


def test_classify_drops_outlines_and_pages(document_factory: Callable[..., Document]) -> None:
    document = document_factory(1, outline=True)
    renumber_documents([document])
    output = Document()

    classify_objects([document], output)

    kinds = [object_type(obj) for obj in output.objects.values()]
    assert "Outlines" not in kinds
    assert "Page" not in kinds
    assert "Catalog" not in kinds
    # only the content stream is copied through
    assert len(output.objects) == 1


def test_classify_requires_pages_root() -> None:
    with pytest.raises(MissingPagesRootError, match="Pages root not found"):
        classify_objects([Document()], Document())


def test_finalize_requires_catalog(document_factory: Callable[..., Document]) -> None:
    document = document_factory(2)
    renumber_documents([document])
    pages, bookmarks = collect_pages([document])
    del document.objects[document.catalog_id]
    output = Document()
    roots = classify_objects([document], output)

    with pytest.raises(MissingCatalogRootError, match="Catalog root not found"):
        finalize_document(output, roots, pages, bookmarks)

    for page_id in pages:
        assert object_id(output.objects[page_id].get("/Parent")) == roots.pages_id


def test_finalize_builds_single_tree(document_factory: Callable[..., Document]) -> None:
    documents = [document_factory(1), document_factory(2, nested=True)]
    renumber_documents(documents)
    pages, bookmarks = collect_pages(documents)
    output = Document()
    roots = classify_objects(documents, output)

    written = finalize_document(output, roots, pages, bookmarks, compress_streams=False)

    catalog = output.get_dictionary(output.catalog_id)
    pages_root = catalog["/Pages"]
    assert pages_root["/Count"] == 3
    assert "/Parent" not in pages_root
    assert len(enumerate_pages(output)) == 3
    assert sorted(output.objects) == [(number, 0) for number in range(1, len(output.objects) + 1)]
    assert output.max_id == len(output.objects)
    page_ids = [page_id for page_id, _ in enumerate_pages(output)]
    assert [bookmark.target for bookmark in written] == [page_ids[0], page_ids[1]]
    assert [bookmark.title for bookmark in written] == ["Page_1", "Page_2"]
    assert "/Outlines" not in catalog
