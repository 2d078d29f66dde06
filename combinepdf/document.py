"""In-memory PDF object graph used by the merge pipeline.

A :class:`Document` keeps every indirect object of a PDF in a plain mapping
keyed by ``(number, generation)``. The values are pypdf generic objects and
every reference stored inside them is an :class:`~pypdf.generic.IndirectObject`
owned by the document, so ``reference.get_object()`` resolves against the
mapping instead of a reader.

Besides the container itself this module provides the graph operations the
merge pipeline relies on: identifier renumbering, page-tree traversal, type
introspection, reachability pruning and stream compression.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterator

from pypdf.generic import (
    ArrayObject,
    DecodedStreamObject,
    DictionaryObject,
    EncodedStreamObject,
    IndirectObject,
    NameObject,
    NullObject,
    PdfObject,
    StreamObject,
)

from .types import ObjectId

LOGGER = logging.getLogger("combinepdf.document")

# Streams whose /Type is listed here are left untouched by :func:`compress`.
UNCOMPRESSED_STREAM_TYPES = frozenset({"Metadata", "XRef", "ObjStm"})


def object_id(reference: IndirectObject) -> ObjectId:
    """Return the ``(number, generation)`` pair addressed by *reference*."""

    return (reference.idnum, reference.generation)


def object_type(obj: Any) -> str | None:
    """Return the declared ``/Type`` of a dictionary or stream, without the slash."""

    if not isinstance(obj, DictionaryObject):
        return None
    value = obj.get("/Type")
    if isinstance(value, IndirectObject):
        value = value.get_object()
    if not isinstance(value, NameObject):
        return None
    return str(value)[1:]


def as_dictionary(obj: Any) -> DictionaryObject:
    """Return *obj* as a dictionary or raise :class:`TypeError`."""

    if isinstance(obj, DictionaryObject):
        return obj
    raise TypeError(f"Expected a PDF dictionary, got {type(obj).__name__}")


def copy_dictionary(dictionary: DictionaryObject) -> DictionaryObject:
    """Return a shallow copy of *dictionary* keeping references unresolved."""

    clone = DictionaryObject()
    for key, value in dictionary.items():
        clone[NameObject(key)] = value
    return clone


def rewrite_references(
    value: Any,
    replace: Callable[[IndirectObject], PdfObject],
) -> Any:
    """Deep-copy *value*, passing every reference through *replace*.

    Containers (dictionaries, arrays, streams) are rebuilt; scalar objects are
    immutable and shared with the original.
    """

    if isinstance(value, IndirectObject):
        return replace(value)
    if isinstance(value, StreamObject):
        clone = EncodedStreamObject() if "/Filter" in value else DecodedStreamObject()
        clone._data = value._data
        for key, item in value.items():
            clone[NameObject(key)] = rewrite_references(item, replace)
        return clone
    if isinstance(value, DictionaryObject):
        clone = DictionaryObject()
        for key, item in value.items():
            clone[NameObject(key)] = rewrite_references(item, replace)
        return clone
    if isinstance(value, ArrayObject):
        return ArrayObject(rewrite_references(item, replace) for item in value)
    return value


def iter_references(value: Any) -> Iterator[IndirectObject]:
    """Yield every reference found inside *value*, depth first."""

    if isinstance(value, IndirectObject):
        yield value
    elif isinstance(value, DictionaryObject):
        for item in value.values():
            yield from iter_references(item)
    elif isinstance(value, ArrayObject):
        for item in value:
            yield from iter_references(item)


@dataclass(eq=False)
class Document:
    """A PDF held entirely in memory as an identifier → object mapping."""

    objects: dict[ObjectId, PdfObject] = field(default_factory=dict)
    trailer: DictionaryObject = field(default_factory=DictionaryObject)
    max_id: int = 0
    version: str = "1.5"
    source: Path | None = None

    # ------------------------------------------------------------------
    # Lookup helpers
    # ------------------------------------------------------------------
    def get_object(self, reference: IndirectObject | ObjectId | int) -> PdfObject | None:
        """Resolve *reference* against this document.

        pypdf calls this method when an owned :class:`IndirectObject` is
        dereferenced, so it accepts the same argument kinds as
        :meth:`pypdf.PdfReader.get_object`.
        """

        if isinstance(reference, IndirectObject):
            key = object_id(reference)
        elif isinstance(reference, int):
            key = (reference, 0)
        else:
            key = reference
        return self.objects.get(key)

    def reference(self, target: ObjectId) -> IndirectObject:
        """Return a reference to *target* owned by this document."""

        return IndirectObject(target[0], target[1], self)

    def resolve(self, value: Any) -> Any:
        if isinstance(value, IndirectObject):
            return self.get_object(value)
        return value

    def get_dictionary(self, target: ObjectId) -> DictionaryObject:
        return as_dictionary(self.objects[target])

    @property
    def catalog_id(self) -> ObjectId | None:
        root = self.trailer.get("/Root")
        if isinstance(root, IndirectObject):
            return object_id(root)
        return None

    # ------------------------------------------------------------------
    # Mutation helpers
    # ------------------------------------------------------------------
    def adopt(self, value: Any) -> Any:
        """Copy *value* so that every reference inside it is owned by this document."""

        return rewrite_references(
            value, lambda ref: IndirectObject(ref.idnum, ref.generation, self)
        )

    def add_object(self, obj: PdfObject) -> ObjectId:
        """Insert *obj* under the next free identifier and return it."""

        self.max_id += 1
        target = (self.max_id, 0)
        self.objects[target] = obj
        return target

    def recompute_max_id(self) -> int:
        self.max_id = max((number for number, _ in self.objects), default=0)
        return self.max_id

    def renumber_objects(self, start_id: int = 1) -> dict[ObjectId, ObjectId]:
        """Reassign dense identifiers starting at *start_id*.

        Objects keep their relative order; every reference in the graph and
        the trailer is rewritten to match. References to objects that do not
        exist in this document become ``null``. Returns the old → new map.
        """

        mapping = {
            old: (start_id + index, 0) for index, old in enumerate(sorted(self.objects))
        }

        def _replace(ref: IndirectObject) -> PdfObject:
            target = mapping.get(object_id(ref))
            if target is None:
                LOGGER.debug("Replacing dangling reference %s %s R with null", ref.idnum, ref.generation)
                return NullObject()
            return IndirectObject(target[0], target[1], self)

        self.objects = {
            mapping[old]: rewrite_references(value, _replace)
            for old, value in sorted(self.objects.items())
        }
        self.trailer = rewrite_references(self.trailer, _replace)
        self.max_id = start_id + len(mapping) - 1
        return mapping

    def prune_objects(self) -> list[ObjectId]:
        """Remove objects that cannot be reached from the trailer."""

        reachable: set[ObjectId] = set()
        pending = list(iter_references(self.trailer))
        while pending:
            target = object_id(pending.pop())
            if target in reachable or target not in self.objects:
                continue
            reachable.add(target)
            pending.extend(iter_references(self.objects[target]))

        removed = [target for target in self.objects if target not in reachable]
        for target in removed:
            del self.objects[target]
        if removed:
            LOGGER.debug("Pruned %d unreachable object(s)", len(removed))
        return removed


def iter_page_tree(
    document: Document, start: IndirectObject
) -> Iterator[tuple[ObjectId, DictionaryObject]]:
    """Yield the leaf pages below *start* in the tree's own order.

    A node that carries ``/Kids`` (or declares itself ``/Pages``) is an
    intermediate node; any other dictionary is a page. Nodes are visited at
    most once, so cyclic or repeated kids cannot loop forever.
    """

    visited: set[ObjectId] = set()
    pending: list[Any] = [start]
    while pending:
        reference = pending.pop()
        if not isinstance(reference, IndirectObject):
            LOGGER.debug("Ignoring direct object in page tree: %r", reference)
            continue
        target = object_id(reference)
        if target in visited:
            continue
        visited.add(target)

        node = document.get_object(target)
        if not isinstance(node, DictionaryObject):
            continue
        kids = document.resolve(node.get("/Kids"))
        if kids is None and object_type(node) != "Pages":
            yield target, node
            continue
        if isinstance(kids, ArrayObject):
            pending.extend(reversed(kids))


def enumerate_pages(document: Document) -> list[tuple[ObjectId, DictionaryObject]]:
    """Return ``(page id, page dictionary)`` pairs in page order."""

    catalog_id = document.catalog_id
    if catalog_id is None:
        return []
    catalog = document.get_object(catalog_id)
    if not isinstance(catalog, DictionaryObject):
        return []
    pages_root = catalog.get("/Pages")
    if not isinstance(pages_root, IndirectObject):
        return []
    return list(iter_page_tree(document, pages_root))


def compress(document: Document) -> int:
    """Flate-encode unfiltered streams when that makes them smaller.

    Returns the number of streams that were replaced.
    """

    compressed = 0
    for target, obj in list(document.objects.items()):
        if not isinstance(obj, StreamObject) or "/Filter" in obj:
            continue
        if object_type(obj) in UNCOMPRESSED_STREAM_TYPES:
            continue
        try:
            encoded = obj.flate_encode()
        except Exception as exc:  # pragma: no cover - filter errors vary
            LOGGER.debug("Leaving stream %s uncompressed: %s", target, exc)
            continue
        if len(encoded._data) < len(obj._data):
            document.objects[target] = encoded
            compressed += 1
    LOGGER.debug("Compressed %d stream(s)", compressed)
    return compressed


__all__ = [
    "Document",
    "object_id",
    "object_type",
    "as_dictionary",
    "copy_dictionary",
    "rewrite_references",
    "iter_references",
    "iter_page_tree",
    "enumerate_pages",
    "compress",
]
