"""Backend abstractions for loading and saving documents."""

from .base import PDFBackend
from .pypdf_backend import PypdfBackend

__all__ = [
    "PDFBackend",
    "PypdfBackend",
]
