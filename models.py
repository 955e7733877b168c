"""Data models for phrase location and highlight geometry."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class TextDirection(str, Enum):
    """Writing direction of a text fragment."""
    LTR = "ltr"
    RTL = "rtl"


@dataclass(frozen=True)
class Fragment:
    """One positioned text run as extracted from a page (document space, y-up)."""
    text: str
    transform: Tuple[float, float, float, float, float, float]  # (a, b, c, d, e, f)
    width: Optional[float] = None
    direction: TextDirection = TextDirection.LTR

    def __post_init__(self) -> None:
        """Validate Fragment data after initialization."""
        if len(self.transform) != 6:
            raise ValueError(
                f"transform must have 6 elements, got {len(self.transform)}"
            )

        if not all(math.isfinite(value) for value in self.transform):
            raise ValueError(f"transform contains non-finite values: {self.transform}")

        # Normalize lists to tuples so the fragment stays hashable
        object.__setattr__(self, "transform", tuple(float(v) for v in self.transform))

    @property
    def origin(self) -> Tuple[float, float]:
        """Text origin (e, f) in document space."""
        return self.transform[4], self.transform[5]


@dataclass(frozen=True)
class Token:
    """A single word split from a fragment, with a back-reference to it."""
    word: str
    fragment_index: int
    page_number: int


@dataclass(frozen=True)
class PhraseWindow:
    """Half-open word-index range [start, end) on one page's token stream."""
    start_word_index: int
    end_word_index_exclusive: int

    def __post_init__(self) -> None:
        if self.start_word_index < 0:
            raise ValueError(
                f"start_word_index must be non-negative, got {self.start_word_index}"
            )
        if self.end_word_index_exclusive <= self.start_word_index:
            raise ValueError(
                f"Empty phrase window: [{self.start_word_index}, "
                f"{self.end_word_index_exclusive})"
            )

    def __len__(self) -> int:
        return self.end_word_index_exclusive - self.start_word_index

    def indices(self) -> range:
        return range(self.start_word_index, self.end_word_index_exclusive)


@dataclass(frozen=True)
class Rect:
    """Highlight rectangle in pixel space of the rendered page (top-left origin)."""
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def to_dict(self) -> dict:
        return {
            "left": self.left,
            "top": self.top,
            "width": self.width,
            "height": self.height,
        }


@dataclass(frozen=True)
class PageHighlight:
    """All highlight rectangles found on one page."""
    page_number: int  # 1-based
    rects: Tuple[Rect, ...]

    def __post_init__(self) -> None:
        """Validate PageHighlight data after initialization."""
        if self.page_number < 1:
            raise ValueError(f"page_number must be >= 1, got {self.page_number}")

        object.__setattr__(self, "rects", tuple(self.rects))


@dataclass(frozen=True)
class PageText:
    """Fragments and native dimensions of a single page, as delivered by a text source."""
    page_number: int  # 1-based
    fragments: Tuple[Fragment, ...]
    width: float
    height: float

    def __post_init__(self) -> None:
        """Validate PageText data after initialization."""
        if self.page_number < 1:
            raise ValueError(f"page_number must be >= 1, got {self.page_number}")

        # Validate page dimensions are positive
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Invalid page dimensions: {self.width}x{self.height}")

        object.__setattr__(self, "fragments", tuple(self.fragments))

    def pixel_height(self, render_scale: float) -> float:
        """Page height in pixels when rendered at ``render_scale``."""
        return self.height * render_scale
