"""Custom exception classes for phrase locator errors."""

from __future__ import annotations


class PhraseLocatorException(Exception):
    """Base exception for phrase locator errors."""
    pass


class PDFValidationError(PhraseLocatorException):
    """Raised when PDF path validation fails."""
    pass


class DocumentLoadFailure(PhraseLocatorException):
    """Raised when the document cannot be opened or parsed."""
    pass


class PDFDecryptionError(DocumentLoadFailure):
    """Raised when PDF decryption fails."""
    pass


class PageLoadFailure(PhraseLocatorException):
    """Raised when a single page fails to load or yield its text mid-scan."""

    def __init__(self, page_number: int, message: str):
        super().__init__(message)
        self.page_number = page_number


class InvalidTransitionError(PhraseLocatorException):
    """Raised when the highlight state machine is asked for an illegal transition."""
    pass


class PDFAnnotationError(PhraseLocatorException):
    """Raised when annotation operations fail."""
    pass


class JSONExportError(PhraseLocatorException):
    """Raised when JSON export fails."""
    pass
