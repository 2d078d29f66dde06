"""Page collection and per-document bookmark generation."""

from __future__ import annotations

import logging
from typing import Sequence

from pypdf.generic import DictionaryObject

from ..document import Document, enumerate_pages
from ..types import Bookmark, Color, ObjectId

LOGGER = logging.getLogger("combinepdf.merge")

BOOKMARK_TITLE_PREFIX = "Page_"
BOOKMARK_COLOR: Color = (0.0, 0.0, 1.0)


def collect_pages(
    documents: Sequence[Document],
) -> tuple[dict[ObjectId, DictionaryObject], list[Bookmark]]:
    """Gather every page of *documents* and one bookmark per document.

    Pages are returned in merge order, each document contributing its pages
    in its own page-tree order. A global page counter starts at 1; the first
    page of every document gets a bookmark titled ``Page_<counter>``.
    Documents without pages get no bookmark. A page object listed twice in
    the same tree is collected once.
    """

    pages: dict[ObjectId, DictionaryObject] = {}
    bookmarks: list[Bookmark] = []
    page_number = 1

    for document in documents:
        first = True
        for page_id, page in enumerate_pages(document):
            if page_id in pages:
                LOGGER.debug("Skipping repeated page object %s", page_id)
                continue
            if first:
                bookmarks.append(
                    Bookmark(
                        title=f"{BOOKMARK_TITLE_PREFIX}{page_number}",
                        color=BOOKMARK_COLOR,
                        level=0,
                        target=page_id,
                    )
                )
                first = False
            pages[page_id] = page
            page_number += 1
        if first:
            LOGGER.debug("No pages found in %s", document.source or "document")

    LOGGER.debug("Collected %d page(s) and %d bookmark(s)", len(pages), len(bookmarks))
    return pages, bookmarks


__all__ = ["BOOKMARK_TITLE_PREFIX", "BOOKMARK_COLOR", "collect_pages"]
