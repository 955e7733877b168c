"""Ports for the external collaborators the locator depends on."""

from __future__ import annotations

from abc import ABC, abstractmethod

from models import PageText


class TextSourcePort(ABC):
    """
    Port for any source of positioned page text.

    Implementations own the document; the scanner only reads from them.
    """

    @property
    @abstractmethod
    def page_count(self) -> int: ...

    @abstractmethod
    async def load_page(self, page_number: int) -> PageText:
        """
        Load one page (1-indexed) and return its fragments and dimensions.

        Raises PageLoadFailure when the page cannot be read.
        """
        ...
