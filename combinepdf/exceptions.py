"""
Custom exceptions for combinepdf.

This module defines all custom exceptions used throughout the library.
"""


class CombinePDFError(Exception):
    """Base exception for all combinepdf errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown PDF merge error occurred."


class LoadError(CombinePDFError):
    """Raised when a source PDF is missing, unreadable or malformed."""

    @property
    def default_message(self) -> str:
        return "Unable to load PDF file."


class EncryptedPDFError(LoadError):
    """Raised when a source PDF is encrypted and cannot be opened."""

    @property
    def default_message(self) -> str:
        return "PDF is encrypted and cannot be decrypted with an empty password."


class MergeError(CombinePDFError):
    """Raised when the merged object graph cannot be assembled."""

    @property
    def default_message(self) -> str:
        return "Unable to merge the supplied PDF documents."


class MissingPagesRootError(MergeError):
    """Raised when none of the inputs contributes a Pages object."""

    @property
    def default_message(self) -> str:
        return "Pages root not found."


class MissingCatalogRootError(MergeError):
    """Raised when none of the inputs contributes a Catalog object."""

    @property
    def default_message(self) -> str:
        return "Catalog root not found."


class WriteError(CombinePDFError):
    """Raised when the merged PDF cannot be written to its destination."""

    @property
    def default_message(self) -> str:
        return "Unable to write merged PDF."
