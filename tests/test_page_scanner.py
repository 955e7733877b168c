import pytest

from config import LocatorConfig
from conftest import EXAMPLE_PHRASE, EXAMPLE_TEXTS, FakeTextSource, make_page
from exceptions import PageLoadFailure
from page_scanner import PageScanner


def _make_scanner(source, phrase=EXAMPLE_PHRASE):
    return PageScanner(source, LocatorConfig(phrase=phrase))


def test_scan_page_produces_highlight_for_matching_page(example_page):
    scanner = _make_scanner(FakeTextSource({}, page_count=1))

    highlight = scanner.scan_page(example_page)

    assert highlight is not None
    assert highlight.page_number == 1
    assert len(highlight.rects) == 3


def test_scan_page_returns_none_without_match(example_page):
    scanner = _make_scanner(FakeTextSource({}, page_count=1), phrase="not present here")

    assert scanner.scan_page(example_page) is None


def test_scan_page_with_blank_phrase_returns_none(example_page):
    scanner = _make_scanner(FakeTextSource({}, page_count=1), phrase="   ")

    assert scanner.scan_page(example_page) is None


@pytest.mark.asyncio
async def test_scan_collects_every_matching_page_in_order():
    source = FakeTextSource({2: EXAMPLE_TEXTS, 5: EXAMPLE_TEXTS}, page_count=10)
    scanner = _make_scanner(source)

    highlights = await scanner.scan()

    assert [h.page_number for h in highlights] == [2, 5]
    assert all(len(h.rects) == 3 for h in highlights)
    # No early exit after the first match
    assert source.loaded == list(range(1, 11))


@pytest.mark.asyncio
async def test_scan_without_matches_is_empty():
    source = FakeTextSource({}, page_count=3)

    assert await _make_scanner(source).scan() == []
    assert source.loaded == [1, 2, 3]


@pytest.mark.asyncio
async def test_scan_of_empty_document():
    assert await _make_scanner(FakeTextSource({}, page_count=0)).scan() == []


@pytest.mark.asyncio
async def test_page_load_failure_aborts_scan():
    source = FakeTextSource({1: EXAMPLE_TEXTS}, page_count=5, failing_page=3)
    scanner = _make_scanner(source)

    with pytest.raises(PageLoadFailure) as excinfo:
        await scanner.scan()

    assert excinfo.value.page_number == 3
    assert source.loaded == [1, 2, 3]


@pytest.mark.asyncio
async def test_scan_is_idempotent():
    source = FakeTextSource({4: EXAMPLE_TEXTS}, page_count=6)
    scanner = _make_scanner(source)

    first = await scanner.scan()
    second = await scanner.scan()

    assert first == second


def test_scanner_takes_scales_from_config():
    config = LocatorConfig(phrase="x", render_scale=2.0, measurement_scale=0.5)
    scanner = PageScanner(FakeTextSource({}, page_count=1), config)

    assert scanner.projector.render_scale == 2.0
    assert scanner.projector.measurement_scale == 0.5


def test_rects_use_page_pixel_height():
    config = LocatorConfig(phrase="Gain", render_scale=2.0)
    scanner = PageScanner(FakeTextSource({}, page_count=1), config)
    page = make_page(1, ["Gain"])

    rect = scanner.scan_page(page).rects[0]

    # Baseline y=700 on a 792pt page at 2x
    assert rect.bottom == pytest.approx((792 - 700) * 2.0)
