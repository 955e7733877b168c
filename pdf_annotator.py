"""Draw located phrase highlights back into the PDF using PyMuPDF annotations."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

import fitz  # PyMuPDF

from exceptions import DocumentLoadFailure, PDFAnnotationError
from models import PageHighlight, Rect

logger = logging.getLogger(__name__)

# Highlight colour (yellow)
HIGHLIGHT_COLOR = (1.0, 0.85, 0.0)


class HighlightAnnotator:
    """Draw pixel-space highlight rectangles as highlight annotations on PDF pages."""

    def __init__(self, pdf_document: fitz.Document, pdf_path: Path, render_scale: float):
        """
        Initialize HighlightAnnotator.

        Args:
            pdf_document: PyMuPDF Document object
            pdf_path: Path to the original PDF file
            render_scale: Scale the highlight rects were computed for
        """
        if pdf_document is None:
            raise DocumentLoadFailure("PDF document cannot be None")

        if render_scale <= 0:
            raise ValueError(f"render_scale must be positive, got {render_scale}")

        self.pdf_document = pdf_document
        self.pdf_path = Path(pdf_path)
        self.render_scale = render_scale
        self.output_path: Optional[Path] = None

    def to_page_rect(self, rect: Rect) -> fitz.Rect:
        """Convert a pixel rect back to page points (both top-left origin)."""
        scale = self.render_scale
        x0, x1 = sorted((rect.left / scale, rect.right / scale))
        y0, y1 = sorted((rect.top / scale, rect.bottom / scale))
        return fitz.Rect(x0, y0, x1, y1)

    def annotate_page(self, highlight: PageHighlight) -> int:
        """
        Annotate a single page with its highlight rectangles.

        Args:
            highlight: PageHighlight for the page

        Returns:
            Number of annotations added

        Raises:
            PDFAnnotationError: If annotation fails
        """
        page_number = highlight.page_number
        if page_number < 1 or page_number > len(self.pdf_document):
            raise ValueError(f"Invalid page number: {page_number}")

        try:
            page = self.pdf_document[page_number - 1]

            for rect in highlight.rects:
                annot = page.add_highlight_annot(self.to_page_rect(rect))
                annot.set_colors(stroke=HIGHLIGHT_COLOR)
                annot.update()

            logger.debug(f"Annotated page {page_number} with {len(highlight.rects)} highlight(s)")
            return len(highlight.rects)

        except Exception as e:
            error_msg = f"Failed to annotate page {page_number}: {str(e)}"
            logger.error(error_msg)
            raise PDFAnnotationError(error_msg) from e

    def draw_highlights(self, highlights: Sequence[PageHighlight]) -> int:
        """
        Draw highlights on every page that has them.

        Args:
            highlights: PageHighlight objects in page order

        Returns:
            Total number of annotations added

        Raises:
            PDFAnnotationError: If drawing fails
        """
        if not highlights:
            logger.warning("No highlights to annotate")
            return 0

        total = sum(self.annotate_page(highlight) for highlight in highlights)
        logger.info(f"Drew {total} highlight(s) on {len(highlights)} page(s)")
        return total

    def save_pdf(self, output_path: Optional[Path] = None) -> Path:
        """
        Save the modified PDF.

        Args:
            output_path: Optional output path. If None, creates a new file with
                        "_highlighted" suffix in the same directory.

        Returns:
            Path the PDF was saved to

        Raises:
            PDFAnnotationError: If save fails
        """
        try:
            if output_path is None:
                pdf_stem = self.pdf_path.stem
                pdf_suffix = self.pdf_path.suffix
                output_path = self.pdf_path.parent / f"{pdf_stem}_highlighted{pdf_suffix}"

            self.pdf_document.save(output_path)
            self.output_path = Path(output_path)
            logger.info(f"PDF saved successfully: {output_path}")
            return self.output_path

        except Exception as e:
            error_msg = f"Failed to save PDF: {str(e)}"
            logger.error(error_msg)
            raise PDFAnnotationError(error_msg) from e
