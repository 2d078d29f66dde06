"""Merge functionality for the :mod:`combinepdf.merge` package."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Sequence

from pypdf.generic import IndirectObject

from ..backends import PDFBackend, PypdfBackend
from ..config import MergeSettings
from ..document import Document
from ..exceptions import LoadError, MergeError, WriteError
from ..types import Bookmark, LoadFailure, MergeResult
from ..utils import PathLike, ensure_iterable, ensure_path
from .bookmarks import collect_pages
from .classifier import classify_objects
from .finalizer import finalize_document
from .renumber import renumber_documents

LOGGER = logging.getLogger("combinepdf.merge")


@dataclass
class MergedDocument:
    """The merged object graph together with the bookmarks written into it."""

    document: Document
    page_count: int
    bookmarks: list[Bookmark] = field(default_factory=list)


def load_documents(
    paths: Iterable[PathLike],
    *,
    backend: PDFBackend | None = None,
    workers: int = 1,
) -> tuple[list[Document], list[LoadFailure]]:
    """Load *paths* in order, skipping files that cannot be read.

    With ``workers > 1`` files are read on a thread pool; the returned
    documents are always in input order.
    """

    backend = backend or PypdfBackend()
    pdf_paths = ensure_iterable(paths)

    def _load(path: Path) -> tuple[Optional[Document], Optional[LoadFailure]]:
        try:
            return backend.load(str(path)), None
        except LoadError as exc:
            return None, LoadFailure(path=str(path), reason=exc.message)

    if workers > 1 and len(pdf_paths) > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            outcomes = list(executor.map(_load, pdf_paths))
    else:
        outcomes = [_load(path) for path in pdf_paths]

    documents: list[Document] = []
    failures: list[LoadFailure] = []
    for path, (document, failure) in zip(pdf_paths, outcomes):
        if failure is not None:
            LOGGER.warning("Skipping %s: %s", path, failure.reason)
            failures.append(failure)
        else:
            LOGGER.info("Added %s to the merge", path)
            documents.append(document)
    return documents, failures


def _first_info(documents: Sequence[Document]) -> IndirectObject | None:
    for document in documents:
        info = document.trailer.get("/Info")
        if isinstance(info, IndirectObject):
            return info
    return None


def merge_documents(
    documents: Sequence[Document],
    *,
    settings: MergeSettings | None = None,
) -> MergedDocument:
    """Combine loaded *documents* into a new :class:`Document`.

    The inputs are renumbered in place into disjoint identifier ranges and
    must not be reused afterwards.

    Raises:
        MissingPagesRootError: If no input contributes a Pages object.
        MissingCatalogRootError: If no input contributes a Catalog object.
    """

    settings = settings or MergeSettings()
    output = Document(version=settings.pdf_version)

    renumber_documents(documents)
    pages, bookmarks = collect_pages(documents)
    roots = classify_objects(documents, output)
    info = _first_info(documents) if settings.copy_metadata else None

    bookmarks = finalize_document(
        output,
        roots,
        pages,
        bookmarks,
        info=info,
        compress_streams=settings.compress,
        prune=settings.prune,
    )
    LOGGER.info("Merged %d document(s) into %d page(s)", len(documents), len(pages))
    return MergedDocument(document=output, page_count=len(pages), bookmarks=bookmarks)


def merge_files(
    paths: Iterable[PathLike],
    *,
    settings: MergeSettings | None = None,
    backend: PDFBackend | None = None,
) -> tuple[MergedDocument, list[LoadFailure]]:
    """Load *paths* and merge the readable ones.

    Raises:
        MergeError: If the readable inputs cannot form a merged document.
    """

    settings = settings or MergeSettings()
    documents, failures = load_documents(paths, backend=backend, workers=settings.workers)
    return merge_documents(documents, settings=settings), failures


def merge_pdfs(
    inputs: Iterable[PathLike],
    output: PathLike,
    *,
    settings: MergeSettings | None = None,
    backend: PDFBackend | None = None,
) -> MergeResult:
    """Merge *inputs* into *output* and report the outcome.

    Unlike :func:`merge_documents` this never raises for merge or write
    failures: they are logged and returned as ``MergeResult(success=False)``
    and no output file is written.

    Args:
        inputs: Paths of the PDFs to merge, in merge order.
        output: Destination path of the merged PDF.
        settings: Merge options; read from the environment when omitted.
        backend: Loader/writer to use; defaults to :class:`PypdfBackend`.
    """

    settings = settings or MergeSettings.from_env()
    backend = backend or PypdfBackend()
    output_path = ensure_path(output)
    pdf_paths = ensure_iterable(inputs)

    if not pdf_paths:
        LOGGER.error("No input PDFs provided")
        return MergeResult(success=False, output_path=str(output_path), error="No input PDFs provided")

    documents, failures = load_documents(pdf_paths, backend=backend, workers=settings.workers)
    sources = [str(document.source) for document in documents]

    try:
        merged = merge_documents(documents, settings=settings)
        backend.save(merged.document, output_path, merged.bookmarks)
    except (MergeError, WriteError) as exc:
        LOGGER.error("Merge into %s failed: %s", output_path, exc.message)
        return MergeResult(
            success=False,
            output_path=str(output_path),
            sources=sources,
            skipped=failures,
            error=exc.message,
        )

    LOGGER.info("Merged %d PDF(s) into %s", len(documents), output_path)
    return MergeResult(
        success=True,
        output_path=str(output_path),
        total_pages=merged.page_count,
        sources=sources,
        skipped=failures,
        bookmarks=[bookmark.title for bookmark in merged.bookmarks],
    )


__all__ = ["MergedDocument", "load_documents", "merge_documents", "merge_files", "merge_pdfs"]
