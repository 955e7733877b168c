"""PDF file reading, validation, decryption, and fragment extraction."""

from __future__ import annotations

import asyncio
import logging
import unicodedata
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import fitz  # PyMuPDF

from exceptions import DocumentLoadFailure, PageLoadFailure, PDFDecryptionError, PDFValidationError
from interfaces import TextSourcePort
from models import Fragment, PageText, TextDirection

logger = logging.getLogger(__name__)

# Bidi classes of strong right-to-left characters
RTL_BIDI_CLASSES = {"R", "AL"}


def detect_direction(text: str) -> TextDirection:
    """Direction of the first strongly directional character in text."""
    for char in text:
        bidi = unicodedata.bidirectional(char)
        if bidi in RTL_BIDI_CLASSES:
            return TextDirection.RTL
        if bidi == "L":
            return TextDirection.LTR
    return TextDirection.LTR


def span_to_fragment(
    span: Dict[str, Any],
    line_dir: Tuple[float, float],
    page_height: float
) -> Fragment:
    """
    Convert a PyMuPDF text span into a Fragment in document space.

    PyMuPDF reports span origins with a top-left origin and y growing
    downwards; fragments use a bottom-left origin with y growing upwards,
    so the y axis is flipped against the page height.

    Args:
        span: Span dictionary from page.get_text("dict")
        line_dir: Writing direction (cos, sin) of the span's line, y-down
        page_height: Page height in points

    Returns:
        Fragment for the span
    """
    size = span["size"]
    cos, sin = line_dir
    origin_x, origin_y = span["origin"]
    x0, y0, x1, y1 = span["bbox"]

    # Rotation by the line angle in y-up space, scaled by the font size
    transform = (
        size * cos,
        -size * sin,
        size * sin,
        size * cos,
        origin_x,
        page_height - origin_y,
    )

    # Extent along the writing direction
    if abs(cos) >= abs(sin):
        width = abs(x1 - x0)
    else:
        width = abs(y1 - y0)

    return Fragment(
        text=span["text"],
        transform=transform,
        width=width,
        direction=detect_direction(span["text"]),
    )


class PDFTextSource(TextSourcePort):
    """Handle PDF file reading, validation, decryption, and fragment extraction."""

    def __init__(self, pdf_path: Path):
        """
        Initialize PDFTextSource with PDF file path.

        Args:
            pdf_path: Path to the PDF file
        """
        self.pdf_path = Path(pdf_path)
        self.pdf_document: Optional[fitz.Document] = None
        self.pdf_name = self.pdf_path.name

    @property
    def document_id(self) -> str:
        """Identity of the document, used to detect document changes."""
        return str(self.pdf_path.resolve())

    def validate_path(self) -> bool:
        """
        Validate PDF file path and existence.

        Returns:
            True if path is valid

        Raises:
            PDFValidationError: If path is invalid or file doesn't exist
        """
        if not self.pdf_path.exists():
            error_msg = f"PDF file not found: {self.pdf_path}"
            logger.error(error_msg)
            raise PDFValidationError(error_msg)

        if not self.pdf_path.is_file():
            error_msg = f"Path is not a file: {self.pdf_path}"
            logger.error(error_msg)
            raise PDFValidationError(error_msg)

        if self.pdf_path.suffix.lower() != '.pdf':
            error_msg = f"File is not a PDF: {self.pdf_path}"
            logger.error(error_msg)
            raise PDFValidationError(error_msg)

        logger.info(f"PDF path validated: {self.pdf_path}")
        return True

    def open_pdf(self) -> fitz.Document:
        """
        Open PDF file.

        Returns:
            Opened PyMuPDF Document object

        Raises:
            DocumentLoadFailure: If PDF cannot be opened
        """
        try:
            self.pdf_document = fitz.open(self.pdf_path)
            logger.info(f"PDF opened successfully: {self.pdf_path}")
            return self.pdf_document
        except Exception as e:
            error_msg = f"Failed to open PDF: {self.pdf_path}. Error: {str(e)}"
            logger.error(error_msg)
            raise DocumentLoadFailure(error_msg) from e

    def decrypt_pdf(self, password: Optional[str] = None) -> bool:
        """
        Decrypt PDF if encrypted.

        Args:
            password: Optional password for encrypted PDF

        Returns:
            True if decryption successful or PDF is not encrypted

        Raises:
            PDFDecryptionError: If decryption fails
        """
        document = self._require_document()

        if not document.needs_pass:
            logger.info("PDF is not encrypted")
            return True

        try:
            # An empty password unlocks documents that only carry an owner password
            result = document.authenticate(password or "")
        except Exception as e:
            error_msg = f"Failed to decrypt PDF: {str(e)}"
            logger.error(error_msg)
            raise PDFDecryptionError(error_msg) from e

        if result:
            logger.info("PDF decrypted successfully")
            return True

        if password:
            error_msg = "PDF decryption failed: Invalid password"
        else:
            error_msg = "PDF is encrypted and requires a password"
        logger.error(error_msg)
        raise PDFDecryptionError(error_msg)

    def _require_document(self) -> fitz.Document:
        if self.pdf_document is None:
            raise DocumentLoadFailure("PDF document not opened. Call open_pdf() first.")
        return self.pdf_document

    @property
    def page_count(self) -> int:
        return len(self._require_document())

    def get_page_dimensions(self, page_number: int) -> Tuple[float, float]:
        """
        Get page dimensions in points.

        Args:
            page_number: Page number (1-indexed)

        Returns:
            Tuple of (width, height) in points
        """
        document = self._require_document()

        if page_number < 1 or page_number > len(document):
            raise ValueError(f"Invalid page number: {page_number}")

        rect = document[page_number - 1].rect
        return rect.width, rect.height

    def extract_fragments(self, page_number: int) -> PageText:
        """
        Extract the positioned text spans of one page.

        Args:
            page_number: Page number (1-indexed)

        Returns:
            PageText with fragments in content order

        Raises:
            PageLoadFailure: If the page cannot be loaded or its text extracted
        """
        document = self._require_document()

        if page_number < 1 or page_number > len(document):
            error_msg = f"Page {page_number} is out of range (1-{len(document)})"
            logger.error(error_msg)
            raise PageLoadFailure(page_number, error_msg)

        try:
            page = document[page_number - 1]
            page_width, page_height = self.get_page_dimensions(page_number)
            text_dict = page.get_text("dict")

            fragments: List[Fragment] = []
            for block in text_dict.get("blocks", []):
                # Skip image blocks
                if block.get("type", 0) != 0:
                    continue

                for line in block.get("lines", []):
                    line_dir = tuple(line.get("dir", (1.0, 0.0)))
                    for span in line.get("spans", []):
                        fragments.append(span_to_fragment(span, line_dir, page_height))

            logger.debug(f"Extracted {len(fragments)} fragments from page {page_number}")

            return PageText(
                page_number=page_number,
                fragments=tuple(fragments),
                width=page_width,
                height=page_height
            )

        except Exception as e:
            error_msg = f"Failed to extract text from page {page_number}: {str(e)}"
            logger.error(error_msg)
            raise PageLoadFailure(page_number, error_msg) from e

    async def load_page(self, page_number: int) -> PageText:
        """Extract a page's fragments in a worker thread."""
        return await asyncio.to_thread(self.extract_fragments, page_number)

    def get_pdf_metadata(self) -> Dict[str, Any]:
        """
        Get PDF metadata.

        Returns:
            Dictionary containing PDF metadata

        Raises:
            DocumentLoadFailure: If PDF is not opened
        """
        document = self._require_document()

        metadata = {
            'pdf_name': self.pdf_name,
            'total_pages': len(document),
            'is_encrypted': document.needs_pass,
            'metadata': document.metadata
        }
        return metadata

    def close(self) -> None:
        """Close the PDF document."""
        if self.pdf_document is not None:
            self.pdf_document.close()
            self.pdf_document = None
            logger.info("PDF document closed")
