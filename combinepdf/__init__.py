"""
combinepdf - Merge independently authored PDF files into one document.

Each input keeps its page order, the inputs are concatenated in the order
given, and every input that contributes pages gets one top-level bookmark
pointing at its first page.

Quick Start:
    >>> from combinepdf import merge_pdfs
    >>> result = merge_pdfs(['a.pdf', 'b.pdf'], 'combined.pdf')
    >>> result.success, result.total_pages

Main Functions:
    - merge_pdfs: Merge files on disk and report a MergeResult
    - merge_files: Load and merge files, returning the merged document
    - merge_documents: Merge already loaded documents

Object Store:
    - Document: In-memory object graph of one PDF
    - PypdfBackend: Loads and saves documents using pypdf

Exceptions:
    - CombinePDFError: Base exception
    - LoadError: Input could not be loaded (skipped during a merge)
    - MissingPagesRootError / MissingCatalogRootError: Merge aborted
    - WriteError: Destination could not be written

For CLI usage, use the 'combinepdf' command after installation.
"""

# Core functions
from combinepdf.merge import (
    MergedDocument,
    load_documents,
    merge_documents,
    merge_files,
    merge_pdfs,
)

# Object store
from combinepdf.backends import PDFBackend, PypdfBackend
from combinepdf.document import Document, enumerate_pages, object_type

# Configuration and data types
from combinepdf.config import MergeSettings
from combinepdf.types import Bookmark, LoadFailure, MergeResult, ObjectId

# Exceptions
from combinepdf.exceptions import (
    CombinePDFError,
    EncryptedPDFError,
    LoadError,
    MergeError,
    MissingCatalogRootError,
    MissingPagesRootError,
    WriteError,
)

# Utility functions
from combinepdf.utils import configure_logging, find_pdf_files

__version__ = "1.0.0"
__license__ = "MIT"

__all__ = [
    # Main functions
    "merge_pdfs",
    "merge_files",
    "merge_documents",
    "load_documents",
    "MergedDocument",
    # Object store
    "Document",
    "PDFBackend",
    "PypdfBackend",
    "enumerate_pages",
    "object_type",
    # Data types
    "MergeSettings",
    "Bookmark",
    "LoadFailure",
    "MergeResult",
    "ObjectId",
    # Exceptions
    "CombinePDFError",
    "EncryptedPDFError",
    "LoadError",
    "MergeError",
    "MissingCatalogRootError",
    "MissingPagesRootError",
    "WriteError",
    # Utility functions
    "configure_logging",
    "find_pdf_files",
    # Version info
    "__version__",
]
