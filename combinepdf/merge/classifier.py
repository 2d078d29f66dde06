"""Classification of the combined object graph into the merged document."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Sequence

from pypdf.generic import DictionaryObject, IndirectObject, NameObject, PdfObject

from ..document import Document, copy_dictionary, object_id, object_type
from ..exceptions import MissingPagesRootError
from ..types import ObjectId

LOGGER = logging.getLogger("combinepdf.merge")

OUTLINE_TYPES = frozenset({"Outlines", "Outline"})


@dataclass
class MergedRoots:
    """Anchor objects chosen while classifying the combined graph.

    ``catalog`` is ``None`` when no input contributed a Catalog; that case is
    reported by the finalizer once pages have been attached.
    """

    pages_id: ObjectId
    pages: DictionaryObject
    catalog_id: ObjectId | None = None
    catalog: DictionaryObject | None = None


def _outline_items(objects: Mapping[ObjectId, PdfObject], roots: list[ObjectId]) -> set[ObjectId]:
    """Return outline roots plus every item reachable through First/Next links."""

    found: set[ObjectId] = set()
    pending = list(roots)
    while pending:
        target = pending.pop()
        if target in found:
            continue
        found.add(target)
        node = objects.get(target)
        if not isinstance(node, DictionaryObject):
            continue
        for key in ("/First", "/Next"):
            link = node.get(key)
            if isinstance(link, IndirectObject):
                pending.append(object_id(link))
    return found


def classify_objects(documents: Sequence[Document], output: Document) -> MergedRoots:
    """Sort every object of *documents* into *output* by declared type.

    The objects are visited in ascending identifier order, which after the
    renumbering pass means merge order and then identifier order inside each
    document.

    * ``Catalog``: the first one is kept, later ones are discarded.
    * ``Pages``: the first identifier becomes the anchor; the fields of each
      Pages dictionary found afterwards override the accumulated ones.
    * ``Page``: left out, pages are attached by the finalizer.
    * ``Outlines``/``Outline`` and the items hanging off them: dropped.
    * anything else: copied into *output* unchanged.

    Raises:
        MissingPagesRootError: If no Pages object exists in any document.
    """

    union: dict[ObjectId, PdfObject] = {}
    for document in documents:
        union.update(document.objects)

    dropped = _outline_items(
        union, [target for target, obj in union.items() if object_type(obj) in OUTLINE_TYPES]
    )

    catalog: tuple[ObjectId, DictionaryObject] | None = None
    pages: tuple[ObjectId, DictionaryObject] | None = None

    for target in sorted(union):
        obj = union[target]
        if target in dropped:
            LOGGER.debug("Dropping outline object %s", target)
            continue

        kind = object_type(obj)
        if kind == "Catalog":
            if catalog is None:
                catalog = (target, copy_dictionary(obj))
            else:
                LOGGER.debug("Discarding additional catalog %s", target)
        elif kind == "Pages":
            if pages is None:
                pages = (target, copy_dictionary(obj))
            else:
                merged = pages[1]
                for key, value in obj.items():
                    merged[NameObject(key)] = value
        elif kind == "Page":
            continue
        else:
            output.objects[target] = obj

    if pages is None:
        LOGGER.error("Pages root not found")
        raise MissingPagesRootError()

    LOGGER.debug(
        "Classified %d object(s); pages anchor %s, catalog anchor %s",
        len(union),
        pages[0],
        catalog[0] if catalog else None,
    )
    roots = MergedRoots(pages_id=pages[0], pages=pages[1])
    if catalog is not None:
        roots.catalog_id, roots.catalog = catalog
    return roots


__all__ = ["MergedRoots", "OUTLINE_TYPES", "classify_objects"]
