"""pypdf backend implementation for combinepdf."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Sequence

from pypdf import PageObject, PdfReader, PdfWriter
from pypdf.errors import PdfReadError
from pypdf.generic import DictionaryObject, IndirectObject, NameObject, NullObject

from ..document import Document, enumerate_pages, object_id, object_type
from ..exceptions import EncryptedPDFError, LoadError, WriteError
from ..outline import add_outline
from ..types import Bookmark, ObjectId
from .base import PDFBackend

LOGGER = logging.getLogger("combinepdf.backends.pypdf")

# Trailer entries carried over from a loaded file. Cross-reference and
# encryption keys describe the source file layout and are rebuilt on save.
TRAILER_KEYS = ("/Root", "/Info", "/ID")

# Containers flattened on load: their payload is copied object by object.
CONTAINER_TYPES = frozenset({"ObjStm", "XRef"})

# Entries the writer maintains itself.
CATALOG_OWN_KEYS = frozenset({"/Type", "/Pages", "/Outlines"})
PAGE_TREE_OWN_KEYS = frozenset({"/Type", "/Kids", "/Count", "/Parent"})

# Copied once every page is in the writer, so links between pages resolve
# to the written pages.
PAGE_DEFERRED_KEYS = ("/Annots",)


def _object_ids(reader: PdfReader) -> list[ObjectId]:
    free_entries = getattr(reader, "xref_free_entry", {})
    ids: set[ObjectId] = set()
    for generation, entries in reader.xref.items():
        free = free_entries.get(generation, {})
        for idnum in entries:
            if idnum > 0 and not free.get(idnum, False):
                ids.add((idnum, generation))
    for idnum in reader.xref_objStm:
        ids.add((idnum, 0))
    return sorted(ids)


def _header_version(reader: PdfReader) -> str:
    header = getattr(reader, "pdf_header", "") or ""
    return header[5:].strip() if header.startswith("%PDF-") else "1.4"


class PypdfBackend(PDFBackend):
    """Backend implementation that uses `pypdf` under the hood."""

    def load(self, pdf_path: str, password: str | None = None) -> Document:
        path = Path(pdf_path)
        if not path.exists() or not path.is_file():
            raise LoadError(f"PDF file not found: {pdf_path}")

        try:
            raw_bytes = path.read_bytes()
        except OSError as exc:
            raise LoadError(f"Unable to read PDF file: {pdf_path}. Error: {exc}") from exc

        try:
            reader = PdfReader(io.BytesIO(raw_bytes), strict=False)
        except PdfReadError as exc:
            raise LoadError(f"Corrupted or invalid PDF file: {pdf_path}. Error: {exc}") from exc
        except Exception as exc:
            raise LoadError(f"Unexpected error reading PDF: {pdf_path}. Error: {exc}") from exc

        if reader.is_encrypted:
            LOGGER.debug("Attempting to decrypt encrypted PDF %s", path)
            try:
                decrypted = reader.decrypt(password or "")
            except Exception as exc:  # pragma: no cover - decrypt errors vary
                raise EncryptedPDFError(f"Unable to decrypt encrypted PDF: {pdf_path}") from exc
            if decrypted == 0:
                raise EncryptedPDFError(f"Unable to decrypt encrypted PDF: {pdf_path}")

        try:
            document = self._build_document(reader, path)
        except LoadError:
            raise
        except Exception as exc:
            raise LoadError(f"Unable to read objects from PDF: {pdf_path}. Error: {exc}") from exc

        LOGGER.debug("Loaded %d object(s) from %s", len(document.objects), path)
        return document

    def _build_document(self, reader: PdfReader, path: Path) -> Document:
        document = Document(version=_header_version(reader), source=path)

        skipped: set[ObjectId] = set()
        encrypt = reader.trailer.get("/Encrypt")
        if isinstance(encrypt, IndirectObject):
            skipped.add(object_id(encrypt))

        for target in _object_ids(reader):
            if target in skipped:
                continue
            obj = reader.get_object(IndirectObject(target[0], target[1], reader))
            if obj is None or isinstance(obj, NullObject):
                continue
            if object_type(obj) in CONTAINER_TYPES:
                continue
            document.objects[target] = document.adopt(obj)

        trailer = DictionaryObject()
        for key in TRAILER_KEYS:
            value = reader.trailer.get(key)
            if value is not None:
                trailer[NameObject(key)] = document.adopt(value)
        document.trailer = trailer
        document.recompute_max_id()
        return document

    def new_writer(self, document: Document) -> PdfWriter:
        """Copy the page tree, catalog and metadata of *document* into a writer.

        Pages are added in page-tree order under the writer's own page tree.
        Entries of the document's Pages root are kept as inherited page
        attributes and the catalog entries are copied onto the writer's root.
        """

        catalog_id = document.catalog_id
        if catalog_id is None or catalog_id not in document.objects:
            raise WriteError("Document has no catalog to write.")

        # pypdf keys cloned objects by their indirect reference.
        for target, obj in document.objects.items():
            obj.indirect_reference = document.reference(target)

        writer = PdfWriter()
        writer.pdf_header = f"%PDF-{document.version}"

        pages = enumerate_pages(document)
        added = []
        for page_id, page in pages:
            source = PageObject(indirect_reference=document.reference(page_id))
            source.update(page)
            source[NameObject("/Type")] = NameObject("/Page")
            added.append(writer.add_page(source, excluded_keys=PAGE_DEFERRED_KEYS))

        for (_, page), written in zip(pages, added):
            for key in PAGE_DEFERRED_KEYS:
                if key in page:
                    written[NameObject(key)] = page.get(key).clone(writer)
            struct_parents = page.get("/StructParents")
            if struct_parents is not None:
                written[NameObject("/StructParents")] = struct_parents.clone(writer)

        catalog = document.get_dictionary(catalog_id)
        root = writer._root_object  # type: ignore[attr-defined]
        pages_root = document.resolve(catalog.get("/Pages"))
        if isinstance(pages_root, DictionaryObject):
            writer_pages = root["/Pages"]
            for key, value in pages_root.items():
                if key not in PAGE_TREE_OWN_KEYS:
                    writer_pages[NameObject(key)] = value.clone(writer)

        for key, value in catalog.items():
            if key not in CATALOG_OWN_KEYS:
                root[NameObject(key)] = value.clone(writer)

        info = document.resolve(document.trailer.get("/Info"))
        if isinstance(info, DictionaryObject) and info:
            writer.add_metadata(dict(info.items()))

        LOGGER.debug("Prepared writer with %d page(s)", len(added))
        return writer

    def save(
        self,
        document: Document,
        destination: str | Path,
        bookmarks: Sequence[Bookmark] = (),
    ) -> Path:
        try:
            writer = self.new_writer(document)
            page_refs = {
                page_id: page.indirect_reference
                for (page_id, _), page in zip(enumerate_pages(document), writer.pages)
            }
            add_outline(writer, bookmarks, page_refs)
        except WriteError:
            raise
        except Exception as exc:
            LOGGER.error("Failed to prepare PDF for %s: %s", destination, exc)
            raise WriteError(f"Failed to prepare merged PDF for {destination}. Error: {exc}") from exc
        return self.write(writer, destination)

    def write(self, writer: PdfWriter, destination: str | Path) -> Path:
        """Serialize *writer* and store it at *destination*.

        The file is only created once serialization has succeeded.
        """

        path = Path(destination)
        buffer = io.BytesIO()
        try:
            writer.write(buffer)
        except Exception as exc:
            LOGGER.error("Failed to serialize PDF for %s: %s", path, exc)
            raise WriteError(f"Failed to serialize merged PDF for {path}. Error: {exc}") from exc

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("wb") as handle:
                handle.write(buffer.getvalue())
        except OSError as exc:
            LOGGER.error("Failed to write PDF to %s: %s", path, exc)
            raise WriteError(f"Failed to write merged PDF to {path}. Error: {exc}") from exc
        LOGGER.debug("Wrote %d page(s) to %s", len(writer.pages), path)
        return path


__all__ = ["PypdfBackend"]
