"""Backend protocol for reading and writing PDF files."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, Sequence

from ..document import Document
from ..types import Bookmark


class PDFBackend(Protocol):
    """Protocol defining how documents are loaded from and saved to disk."""

    def load(self, pdf_path: str, password: str | None = None) -> Document:
        """Load a PDF file into an in-memory :class:`Document`.

        Implementations raise :class:`~combinepdf.exceptions.LoadError` when
        the file is missing, unreadable or malformed.
        """

    def save(
        self,
        document: Document,
        destination: str | Path,
        bookmarks: Sequence[Bookmark] = (),
    ) -> Path:
        """Write *document* with an outline built from *bookmarks*.

        Bookmark targets are page identifiers of *document*. Implementations
        raise :class:`~combinepdf.exceptions.WriteError` when the document
        cannot be serialized or the destination cannot be written.
        """
