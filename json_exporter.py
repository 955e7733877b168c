"""Export located phrase highlights to JSON format."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from config import LocatorConfig
from exceptions import JSONExportError
from highlight_state import HighlightStateMachine
from scroll_target import resolve_scroll_target

logger = logging.getLogger(__name__)


class JSONExporter:
    """Export the highlight state of a document to JSON format."""

    def __init__(self, pdf_path: Path):
        """
        Initialize JSONExporter.

        Args:
            pdf_path: Path to the PDF file
        """
        self.pdf_path = Path(pdf_path)
        self.pdf_name = self.pdf_path.name

    def _get_output_path(self, filename: Optional[str] = None) -> Path:
        """
        Get output path for JSON file.

        Args:
            filename: Optional custom filename. If None, uses default naming.

        Returns:
            Path to output JSON file
        """
        if filename is None:
            # Default: {pdfname}_highlights.json
            filename = f"{self.pdf_path.stem}_highlights.json"

        if not filename.endswith('.json'):
            filename = f"{filename}.json"

        # Output in PDF's parent directory
        return self.pdf_path.parent / filename

    def _format_data(
        self,
        state: HighlightStateMachine,
        config: LocatorConfig,
        total_pages: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Format the highlight state for JSON export.

        Args:
            state: Highlight state after a search
            config: Configuration the search ran with
            total_pages: Optional total page count of the document

        Returns:
            Dictionary formatted for JSON export
        """
        scroll_target = resolve_scroll_target(state.highlights)

        highlights_data = []
        for highlight in state.highlights:
            highlights_data.append({
                "page_number": highlight.page_number,
                "rects": [rect.to_dict() for rect in highlight.rects]
            })

        return {
            "pdf_name": self.pdf_name,
            "total_pages": total_pages,
            "phrase": config.phrase,
            "render_scale": config.render_scale,
            "measurement_scale": config.measurement_scale,
            "status": state.phase.value,
            "found": state.found,
            "first_matched_page": state.first_matched_page,
            "scroll_target": scroll_target.to_dict() if scroll_target else None,
            "highlights": highlights_data
        }

    def export(
        self,
        state: HighlightStateMachine,
        config: LocatorConfig,
        output_filename: Optional[str] = None,
        total_pages: Optional[int] = None
    ) -> Path:
        """
        Export the highlight state to a JSON file.

        Args:
            state: Highlight state after a search
            config: Configuration the search ran with
            output_filename: Optional custom output filename
            total_pages: Optional total page count from PDF

        Returns:
            Path to the exported JSON file

        Raises:
            JSONExportError: If export fails
        """
        try:
            output_path = self._get_output_path(output_filename)
            data = self._format_data(state, config, total_pages=total_pages)

            with open(output_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)

            logger.info(f"JSON exported successfully: {output_path}")
            return output_path

        except Exception as e:
            error_msg = f"Failed to export JSON: {str(e)}"
            logger.error(error_msg)
            raise JSONExportError(error_msg) from e
