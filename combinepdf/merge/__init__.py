"""Merge pipeline: renumbering, classification, bookmarks and finalization."""

from .bookmarks import BOOKMARK_COLOR, BOOKMARK_TITLE_PREFIX, collect_pages
from .classifier import MergedRoots, classify_objects
from .finalizer import finalize_document
from .merger import MergedDocument, load_documents, merge_documents, merge_files, merge_pdfs
from .renumber import renumber_documents

__all__ = [
    "BOOKMARK_COLOR",
    "BOOKMARK_TITLE_PREFIX",
    "MergedDocument",
    "MergedRoots",
    "classify_objects",
    "collect_pages",
    "finalize_document",
    "load_documents",
    "merge_documents",
    "merge_files",
    "merge_pdfs",
    "renumber_documents",
]
