"""Locator configuration: target phrase and the two scale factors."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List

from phrase_matcher import split_phrase

# Scale at which pages are displayed by the viewer
DEFAULT_RENDER_SCALE = 1.5

# Scale at which fragment widths were measured by the extractor
DEFAULT_MEASUREMENT_SCALE = 1.0

DEFAULT_SEARCH_PHRASE = "Gain on sale of non-current assets, etc"


@dataclass(frozen=True)
class LocatorConfig:
    """Configuration passed to the page scanner at construction."""
    phrase: str
    render_scale: float = DEFAULT_RENDER_SCALE
    measurement_scale: float = DEFAULT_MEASUREMENT_SCALE

    def __post_init__(self) -> None:
        """Validate LocatorConfig data after initialization."""
        if not isinstance(self.phrase, str):
            raise ValueError(f"phrase must be a string, got {type(self.phrase).__name__}")

        for name in ("render_scale", "measurement_scale"):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0:
                raise ValueError(f"{name} must be a positive finite number, got {value}")

    @property
    def phrase_words(self) -> List[str]:
        return split_phrase(self.phrase)
