import asyncio
from typing import Dict, List, Optional, Sequence

import fitz
import pytest

from exceptions import PageLoadFailure
from interfaces import TextSourcePort
from models import Fragment, PageText

PAGE_WIDTH = 612.0
PAGE_HEIGHT = 792.0


def make_fragment(text: str, x: float = 72.0, y: float = 700.0, size: float = 12.0,
                  width: Optional[float] = 80.0) -> Fragment:
    return Fragment(text=text, transform=(size, 0, 0, size, x, y), width=width)


def make_page(page_number: int, texts: Sequence[str]) -> PageText:
    fragments = [
        make_fragment(text, y=700.0 - 20.0 * i)
        for i, text in enumerate(texts)
    ]
    return PageText(page_number=page_number, fragments=fragments,
                    width=PAGE_WIDTH, height=PAGE_HEIGHT)


class FakeTextSource(TextSourcePort):
    """In-memory text source that records the order pages are loaded in."""

    def __init__(self, pages: Dict[int, Sequence[str]], page_count: int,
                 failing_page: Optional[int] = None):
        self._pages = pages
        self._page_count = page_count
        self.failing_page = failing_page
        self.loaded: List[int] = []

    @property
    def page_count(self) -> int:
        return self._page_count

    async def load_page(self, page_number: int) -> PageText:
        self.loaded.append(page_number)
        if page_number == self.failing_page:
            raise PageLoadFailure(page_number, f"Broken page {page_number}")
        return make_page(page_number, self._pages.get(page_number, ["nothing to see here"]))


class GatedTextSource(FakeTextSource):
    """Text source whose first page load blocks until the gate is opened."""

    def __init__(self, pages: Dict[int, Sequence[str]], page_count: int):
        super().__init__(pages, page_count)
        self.started = asyncio.Event()
        self.gate = asyncio.Event()

    async def load_page(self, page_number: int) -> PageText:
        self.started.set()
        await self.gate.wait()
        return await super().load_page(page_number)


EXAMPLE_TEXTS = ["Gain on sale of", "non-current assets,", "etc and other"]
EXAMPLE_PHRASE = "Gain on sale of non-current assets, etc"


@pytest.fixture
def example_page() -> PageText:
    return make_page(1, EXAMPLE_TEXTS)


@pytest.fixture
def sample_pdf(tmp_path):
    """Two-page PDF with the example phrase split over three lines on page 1."""
    path = tmp_path / "report.pdf"
    doc = fitz.open()
    page = doc.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
    for i, text in enumerate(EXAMPLE_TEXTS):
        page.insert_text((72, 100 + 20 * i), text, fontsize=11)
    page = doc.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
    page.insert_text((72, 100), "Unrelated closing remarks", fontsize=11)
    doc.save(path)
    doc.close()
    return path
