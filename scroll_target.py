"""Scroll-into-view target for the first highlighted page, using Shapely."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from shapely.geometry import Polygon, box
from shapely.ops import unary_union

from models import PageHighlight, Rect

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScrollTarget:
    """Region on a page that the viewer should bring to the centre of the screen."""
    page_number: int
    region: Rect

    @property
    def center(self) -> Tuple[float, float]:
        return (
            self.region.left + self.region.width / 2,
            self.region.top + self.region.height / 2,
        )

    def to_dict(self) -> dict:
        return {
            "page_number": self.page_number,
            "region": self.region.to_dict(),
            "center": list(self.center),
        }


def rect_to_polygon(rect: Rect) -> Polygon:
    """
    Convert a pixel Rect to a Shapely Polygon.

    Negative widths or heights are normalized so the polygon is well formed.
    """
    x0, x1 = sorted((rect.left, rect.right))
    y0, y1 = sorted((rect.top, rect.bottom))
    return box(x0, y0, x1, y1)


def highlight_region(highlight: PageHighlight) -> Optional[Rect]:
    """
    Bounding region covering all rectangles of one page highlight.

    Args:
        highlight: PageHighlight with at least one rect

    Returns:
        Rect of the union bounds, or None if the highlight has no rects
    """
    if not highlight.rects:
        return None

    union = unary_union([rect_to_polygon(rect) for rect in highlight.rects])
    if union.is_empty:
        # Every rect was degenerate; fall back to the first one
        logger.warning(
            f"Highlight region on page {highlight.page_number} has no area, "
            f"using first rect"
        )
        return highlight.rects[0]

    x0, y0, x1, y1 = union.bounds
    return Rect(left=x0, top=y0, width=x1 - x0, height=y1 - y0)


def resolve_scroll_target(highlights: Sequence[PageHighlight]) -> Optional[ScrollTarget]:
    """
    Pick the region to scroll to: the first matched page's highlight bounds.

    Args:
        highlights: Highlights in page order

    Returns:
        ScrollTarget, or None when nothing was highlighted
    """
    for highlight in highlights:
        region = highlight_region(highlight)
        if region is not None:
            logger.debug(f"Scroll target: page {highlight.page_number}, region {region}")
            return ScrollTarget(page_number=highlight.page_number, region=region)

    return None
