"""Final wiring of the merged page tree, catalog, trailer and outline."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Mapping, Sequence

from pypdf.generic import ArrayObject, DictionaryObject, IndirectObject, NameObject, NumberObject

from ..document import Document, compress, copy_dictionary, object_id
from ..exceptions import MissingCatalogRootError
from ..outline import adjust_zero_pages
from ..types import ZERO_ID, Bookmark, ObjectId
from .classifier import MergedRoots

LOGGER = logging.getLogger("combinepdf.merge")


def finalize_document(
    output: Document,
    roots: MergedRoots,
    pages: Mapping[ObjectId, DictionaryObject],
    bookmarks: Sequence[Bookmark],
    *,
    info: IndirectObject | None = None,
    compress_streams: bool = True,
    prune: bool = False,
) -> list[Bookmark]:
    """Turn the classified objects in *output* into a single coherent tree.

    Every collected page is re-parented to the Pages anchor, the anchor's
    ``/Kids`` and ``/Count`` are rebuilt in collection order, the Catalog is
    pointed at the anchor and the trailer at the Catalog. The graph is then
    renumbered densely and the bookmarks are remapped and repaired.

    Returns the bookmarks, targeting page identifiers of the renumbered
    document, ready to be written as its outline.

    Raises:
        MissingCatalogRootError: If no Catalog was found while classifying.
    """

    parent = output.reference(roots.pages_id)
    for page_id, page in pages.items():
        rewritten = copy_dictionary(page)
        rewritten[NameObject("/Parent")] = parent
        output.objects[page_id] = rewritten

    if roots.catalog_id is None or roots.catalog is None:
        LOGGER.error("Catalog root not found")
        raise MissingCatalogRootError()

    pages_root = copy_dictionary(roots.pages)
    pages_root[NameObject("/Count")] = NumberObject(len(pages))
    pages_root[NameObject("/Kids")] = ArrayObject(output.reference(page_id) for page_id in pages)
    pages_root.pop("/Parent", None)
    output.objects[roots.pages_id] = pages_root

    catalog = copy_dictionary(roots.catalog)
    catalog[NameObject("/Pages")] = parent
    catalog.pop("/Outlines", None)
    output.objects[roots.catalog_id] = catalog

    output.trailer[NameObject("/Root")] = output.reference(roots.catalog_id)
    if info is not None and object_id(info) in output.objects:
        output.trailer[NameObject("/Info")] = info

    if prune:
        output.prune_objects()

    output.recompute_max_id()
    mapping = output.renumber_objects()
    LOGGER.debug("Renumbered merged document into %d object(s)", len(mapping))

    bookmarks = [replace(bookmark, target=mapping.get(bookmark.target, ZERO_ID)) for bookmark in bookmarks]
    bookmarks = adjust_zero_pages(output, bookmarks)

    if compress_streams:
        compress(output)

    return bookmarks


__all__ = ["finalize_document"]
