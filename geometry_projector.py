"""Project matched fragments from document space into pixel-space rectangles."""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence

import fitz  # PyMuPDF

from models import Fragment, PhraseWindow, Rect, Token
from phrase_matcher import matched_fragment_indices

logger = logging.getLogger(__name__)

# Glyph height used when a fragment's transform has no vertical extent
DEFAULT_GLYPH_HEIGHT = 10.0

# Width used when the extractor reported none for a fragment
DEFAULT_FRAGMENT_WIDTH = 50.0


class GeometryProjector:
    """
    Convert fragment geometry to rectangles on a page rendered at a given scale.

    Positions and heights are scaled by ``render_scale``. Widths are first
    divided by ``measurement_scale`` (the scale the extractor measured them
    at) and then multiplied by ``render_scale``. When the two factors differ
    the widths drift from the rendered glyphs.
    """

    def __init__(self, render_scale: float, measurement_scale: float = 1.0):
        """
        Initialize GeometryProjector.

        Args:
            render_scale: Document units to displayed pixels
            measurement_scale: Scale the fragment widths were measured at
        """
        if render_scale <= 0 or measurement_scale <= 0:
            raise ValueError(
                f"Scales must be positive, got render={render_scale}, "
                f"measurement={measurement_scale}"
            )

        self.render_scale = render_scale
        self.measurement_scale = measurement_scale

    def device_matrix(self, page_height_px: float) -> fitz.Matrix:
        """Matrix mapping document space (y-up) to device pixels (y-down)."""
        return fitz.Matrix(self.render_scale, 0, 0, -self.render_scale, 0, page_height_px)

    @staticmethod
    def glyph_height(fragment: Fragment) -> float:
        """Approximate glyph height from the transform's vertical basis vector."""
        _, _, c, d, _, _ = fragment.transform
        return math.hypot(c, d) or DEFAULT_GLYPH_HEIGHT

    @staticmethod
    def fragment_width(fragment: Fragment) -> float:
        """Reported fragment width, or the fixed default when missing or zero."""
        return fragment.width or DEFAULT_FRAGMENT_WIDTH

    def project_fragment(self, fragment: Fragment, page_height_px: float) -> Rect:
        """
        Compute the pixel rectangle of a single fragment.

        The rectangle's bottom edge sits on the text baseline and it extends
        upwards by the glyph height.

        Args:
            fragment: Fragment to project
            page_height_px: Height of the rendered page in pixels

        Returns:
            Rect in pixel space
        """
        origin = fitz.Point(*fragment.origin) * self.device_matrix(page_height_px)
        height = self.glyph_height(fragment) * self.render_scale
        width = self.fragment_width(fragment) / self.measurement_scale * self.render_scale

        return Rect(left=origin.x, top=origin.y - height, width=width, height=height)

    def project(
        self,
        window: Optional[PhraseWindow],
        tokens: Sequence[Token],
        fragments: Sequence[Fragment],
        page_height_px: float
    ) -> List[Rect]:
        """
        Compute one rectangle per distinct fragment touched by a window.

        Args:
            window: Matched window, or None
            tokens: Token stream the window refers to
            fragments: The page's fragments
            page_height_px: Height of the rendered page in pixels

        Returns:
            List of Rect objects in fragment order; empty when window is None
        """
        rects = []
        for fragment_index in matched_fragment_indices(tokens, window):
            rects.append(self.project_fragment(fragments[fragment_index], page_height_px))

        if rects:
            logger.debug(f"Projected {len(rects)} fragment(s) at render scale {self.render_scale}")
        return rects
