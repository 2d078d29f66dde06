"""Bookmark repair and outline construction for merged documents."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Mapping, Sequence

from pypdf import PdfWriter
from pypdf.generic import DictionaryObject, Fit, IndirectObject

from .document import Document, enumerate_pages, iter_page_tree
from .types import Bookmark, ObjectId

LOGGER = logging.getLogger("combinepdf.outline")


def _first_descendant(document: Document, target: ObjectId) -> ObjectId | None:
    node = document.get_object(target)
    if not isinstance(node, DictionaryObject) or "/Kids" not in node:
        return None
    for page_id, _ in iter_page_tree(document, document.reference(target)):
        return page_id
    return None


def adjust_zero_pages(document: Document, bookmarks: Iterable[Bookmark]) -> list[Bookmark]:
    """Point bookmarks without a real page target at a page.

    A bookmark aimed at a page-tree node is moved to the node's first page;
    one aimed at the zero identifier, or at nothing at all, is moved to the
    first page of the document.
    """

    bookmarks = list(bookmarks)
    pages = enumerate_pages(document)
    if not pages:
        return bookmarks

    page_ids = {page_id for page_id, _ in pages}
    first_page = pages[0][0]
    adjusted: list[Bookmark] = []
    for bookmark in bookmarks:
        if bookmark.target not in page_ids:
            replacement = _first_descendant(document, bookmark.target) or first_page
            LOGGER.debug(
                "Redirecting bookmark %r from %s to %s", bookmark.title, bookmark.target, replacement
            )
            bookmark = replace(bookmark, target=replacement)
        adjusted.append(bookmark)
    return adjusted


def add_outline(
    writer: PdfWriter,
    bookmarks: Sequence[Bookmark],
    page_refs: Mapping[ObjectId, IndirectObject],
) -> list[IndirectObject]:
    """Add *bookmarks* to the outline of *writer*.

    *page_refs* maps each bookmark target to the written page. Entries are
    kept in order and an entry nests under the closest preceding entry with
    a lower level, so levels ``0, 1, 1, 0`` produce two top-level items, the
    first with two children. Every item is open and fits its page in the
    window. Returns the added items in order.
    """

    items: list[IndirectObject] = []
    parents: list[tuple[int, IndirectObject | None]] = [(-1, None)]
    for bookmark in bookmarks:
        page_ref = page_refs.get(bookmark.target)
        if page_ref is None:
            LOGGER.warning("Dropping bookmark %r: page %s was not written", bookmark.title, bookmark.target)
            continue
        while parents[-1][0] >= bookmark.level:
            parents.pop()

        item = writer.add_outline_item(
            bookmark.title,
            page_ref,
            parent=parents[-1][1],
            color=bookmark.color,
            fit=Fit.fit(),
        )
        parents.append((bookmark.level, item))
        items.append(item)

    if items:
        LOGGER.debug("Added %d outline item(s)", len(items))
    return items


__all__ = ["adjust_zero_pages", "add_outline"]
