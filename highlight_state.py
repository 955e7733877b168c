"""Highlight lifecycle for one open document."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Dict, FrozenSet, Hashable, Optional, Tuple

from exceptions import InvalidTransitionError
from models import PageHighlight, Rect
from page_scanner import PageScanner

logger = logging.getLogger(__name__)


class HighlightPhase(str, Enum):
    """Phases of the highlight state machine."""
    IDLE = "idle"
    SEARCHING = "searching"
    POPULATED = "populated"
    NOT_FOUND = "not_found"


# IDLE is reachable from every phase through a document change
_TRANSITIONS: Dict[HighlightPhase, FrozenSet[HighlightPhase]] = {
    HighlightPhase.IDLE: frozenset({HighlightPhase.IDLE, HighlightPhase.SEARCHING}),
    HighlightPhase.SEARCHING: frozenset({
        HighlightPhase.IDLE, HighlightPhase.POPULATED, HighlightPhase.NOT_FOUND
    }),
    HighlightPhase.POPULATED: frozenset({HighlightPhase.IDLE, HighlightPhase.SEARCHING}),
    HighlightPhase.NOT_FOUND: frozenset({HighlightPhase.IDLE, HighlightPhase.SEARCHING}),
}


class HighlightStateMachine:
    """
    Own the current highlight set of a document and its lifecycle.

    Results of a scan are applied only if the document generation has not
    changed while the scan was running; a document change bumps the
    generation and drops back to IDLE at once, so a late scan result is
    discarded instead of overwriting the new document's state.

    A locate request issued while a scan is in flight for the same document
    and phrase joins that scan and returns its outcome. A request for a
    different phrase while searching is rejected.
    """

    def __init__(self, document_id: Optional[Hashable] = None):
        """
        Initialize HighlightStateMachine.

        Args:
            document_id: Identity of the initially open document, if any
        """
        self._phase = HighlightPhase.IDLE
        self._highlights: Tuple[PageHighlight, ...] = ()
        self._document_id = document_id
        self._generation = 0
        self._in_flight: Optional[asyncio.Future] = None
        self._in_flight_phrase: Optional[str] = None

    @property
    def phase(self) -> HighlightPhase:
        return self._phase

    @property
    def document_id(self) -> Optional[Hashable]:
        return self._document_id

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def highlights(self) -> Tuple[PageHighlight, ...]:
        return self._highlights

    @property
    def found(self) -> bool:
        """Whether the last completed search found the phrase."""
        return self._phase is HighlightPhase.POPULATED

    @property
    def first_matched_page(self) -> Optional[int]:
        """Page number to scroll into view, if anything was found."""
        if not self.found:
            return None
        return self._highlights[0].page_number

    def rects_for_page(self, page_number: int) -> Tuple[Rect, ...]:
        """Highlight rectangles for a page (1-indexed); empty if none."""
        for highlight in self._highlights:
            if highlight.page_number == page_number:
                return highlight.rects
        return ()

    def _transition(self, target: HighlightPhase) -> None:
        if target not in _TRANSITIONS[self._phase]:
            error_msg = f"Invalid highlight transition: {self._phase.value} -> {target.value}"
            logger.error(error_msg)
            raise InvalidTransitionError(error_msg)

        logger.debug(f"Highlight state: {self._phase.value} -> {target.value}")
        self._phase = target

    def reset(self) -> None:
        """Drop all results and return to IDLE, invalidating any in-flight scan."""
        self._generation += 1
        self._highlights = ()
        self._in_flight = None
        self._in_flight_phrase = None
        self._transition(HighlightPhase.IDLE)

    def set_document(self, document_id: Hashable) -> bool:
        """
        Record the active document, resetting to IDLE if its identity changed.

        Args:
            document_id: Identity of the now active document

        Returns:
            True if the document changed and the state was reset
        """
        if document_id == self._document_id:
            return False

        logger.info(f"Active document changed: {self._document_id!r} -> {document_id!r}")
        self._document_id = document_id
        self.reset()
        return True

    async def _run_scan(self, scanner: PageScanner, generation: int) -> HighlightPhase:
        try:
            results = await scanner.scan()
        except BaseException:
            # Includes cancellation of the scan task itself
            if generation == self._generation:
                self._in_flight = None
                self._in_flight_phrase = None
                self._transition(HighlightPhase.IDLE)
            raise

        if generation != self._generation:
            logger.info(
                f"Discarding stale scan results (generation {generation}, "
                f"current {self._generation})"
            )
            return self._phase

        self._in_flight = None
        self._in_flight_phrase = None
        self._highlights = tuple(results)
        self._transition(HighlightPhase.POPULATED if results else HighlightPhase.NOT_FOUND)
        return self._phase

    async def locate(self, scanner: PageScanner) -> HighlightPhase:
        """
        Search the current document and apply the result.

        Args:
            scanner: Page scanner bound to the current document

        Returns:
            Phase after the search completes

        Raises:
            InvalidTransitionError: If the scanner reads another document, or a
                different phrase is requested while searching
            PageLoadFailure: If the scan aborts; the state returns to IDLE
        """
        phrase = scanner.config.phrase

        source_id = getattr(scanner.source, "document_id", None)
        if source_id is not None and self._document_id is not None and source_id != self._document_id:
            error_msg = (
                f"Scanner reads document {source_id!r}, "
                f"but the active document is {self._document_id!r}"
            )
            logger.error(error_msg)
            raise InvalidTransitionError(error_msg)

        if self._phase is HighlightPhase.SEARCHING and self._in_flight is not None:
            if phrase != self._in_flight_phrase:
                error_msg = (
                    f"Search for {self._in_flight_phrase!r} already in progress, "
                    f"rejecting {phrase!r}"
                )
                logger.error(error_msg)
                raise InvalidTransitionError(error_msg)

            logger.info("Search already in progress, joining it")
            return await asyncio.shield(self._in_flight)

        self._transition(HighlightPhase.SEARCHING)
        self._in_flight = asyncio.ensure_future(self._run_scan(scanner, self._generation))
        self._in_flight_phrase = phrase
        # A cancelled caller leaves the scan running to completion
        return await asyncio.shield(self._in_flight)
