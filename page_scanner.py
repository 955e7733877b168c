"""Drive tokenize -> match -> project across every page of a document."""

from __future__ import annotations

import logging
from typing import List, Optional

from config import LocatorConfig
from exceptions import PageLoadFailure
from geometry_projector import GeometryProjector
from interfaces import TextSourcePort
from models import PageHighlight, PageText
from phrase_matcher import find_phrase_window
from tokenizer import tokenize_page

logger = logging.getLogger(__name__)


class PageScanner:
    """Scan all pages of a text source for the configured phrase."""

    def __init__(self, source: TextSourcePort, config: LocatorConfig):
        """
        Initialize PageScanner.

        Args:
            source: Text source of the open document
            config: Phrase and scale configuration
        """
        self.source = source
        self.config = config
        self.phrase_words = config.phrase_words
        self.projector = GeometryProjector(
            render_scale=config.render_scale,
            measurement_scale=config.measurement_scale
        )

    def scan_page(self, page_text: PageText) -> Optional[PageHighlight]:
        """
        Run the per-page pipeline on already loaded page text.

        Args:
            page_text: Fragments and dimensions of one page

        Returns:
            PageHighlight for the page, or None if the phrase is not on it
        """
        tokens = tokenize_page(page_text.fragments, page_text.page_number)
        window = find_phrase_window(tokens, self.phrase_words)
        if window is None:
            return None

        rects = self.projector.project(
            window,
            tokens,
            page_text.fragments,
            page_text.pixel_height(self.config.render_scale)
        )

        logger.debug(
            f"Phrase matched on page {page_text.page_number} at words "
            f"[{window.start_word_index}, {window.end_word_index_exclusive}), "
            f"{len(rects)} rect(s)"
        )
        return PageHighlight(page_number=page_text.page_number, rects=tuple(rects))

    async def scan(self) -> List[PageHighlight]:
        """
        Scan every page in order and collect the pages that contain the phrase.

        Pages are loaded one at a time and the scan never stops early, so a
        phrase repeated across pages yields one entry per page.

        Returns:
            PageHighlight list in page order (possibly empty)

        Raises:
            PageLoadFailure: If any page fails to load; remaining pages are not scanned
        """
        page_count = self.source.page_count
        highlights = []

        logger.info(f"Scanning {page_count} page(s) for phrase: {self.config.phrase!r}")

        for page_number in range(1, page_count + 1):
            try:
                page_text = await self.source.load_page(page_number)
            except PageLoadFailure:
                logger.error(f"Scan aborted at page {page_number}")
                raise

            highlight = self.scan_page(page_text)
            if highlight is not None:
                highlights.append(highlight)

        logger.info(
            f"Scan finished: phrase found on {len(highlights)} of {page_count} page(s)"
        )
        return highlights
