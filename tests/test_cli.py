import argparse
import json

import fitz
import pytest

from cli_handler import CLIHandler
from config import DEFAULT_MEASUREMENT_SCALE, DEFAULT_RENDER_SCALE, DEFAULT_SEARCH_PHRASE, LocatorConfig
from highlight_state import HighlightPhase
from main import run


def test_parse_arguments_defaults(sample_pdf):
    args = CLIHandler.parse_arguments([str(sample_pdf)])

    assert args.phrase == DEFAULT_SEARCH_PHRASE
    assert args.render_scale == DEFAULT_RENDER_SCALE
    assert args.measurement_scale == DEFAULT_MEASUREMENT_SCALE
    assert args.save_json is None
    assert args.no_annotate is False
    assert args.log_level == "INFO"


def test_parse_arguments_save_json_without_filename(sample_pdf):
    args = CLIHandler.parse_arguments([str(sample_pdf), "--save-json"])

    assert args.save_json == ""


def test_parse_arguments_rejects_non_positive_scale(sample_pdf):
    with pytest.raises(SystemExit):
        CLIHandler.parse_arguments([str(sample_pdf), "--render-scale", "0"])


def test_positive_float():
    assert CLIHandler.positive_float("1.25") == 1.25
    with pytest.raises(argparse.ArgumentTypeError):
        CLIHandler.positive_float("abc")
    with pytest.raises(argparse.ArgumentTypeError):
        CLIHandler.positive_float("inf")


def test_validate_arguments_rejects_non_pdf(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("hello")
    args = CLIHandler.parse_arguments([str(path)])

    with pytest.raises(ValueError, match="not a PDF"):
        CLIHandler.validate_arguments(args)


def test_validate_arguments_rejects_blank_phrase(sample_pdf):
    args = CLIHandler.parse_arguments([str(sample_pdf), "--phrase", "  "])

    with pytest.raises(ValueError, match="cannot be empty"):
        CLIHandler.validate_arguments(args)


def test_build_config(sample_pdf):
    args = CLIHandler.parse_arguments([
        str(sample_pdf), "--phrase", "etc and", "--render-scale", "2", "--measurement-scale", "0.5"
    ])

    assert CLIHandler.build_config(args) == LocatorConfig(
        phrase="etc and", render_scale=2.0, measurement_scale=0.5
    )


@pytest.mark.parametrize("field,value", [("render_scale", 0), ("measurement_scale", float("nan"))])
def test_config_rejects_invalid_scales(field, value):
    with pytest.raises(ValueError, match=field):
        LocatorConfig(phrase="x", **{field: value})


def test_config_phrase_words():
    assert LocatorConfig(phrase="Gain  on sale").phrase_words == ["Gain", "on", "sale"]


@pytest.mark.asyncio
async def test_run_writes_highlighted_pdf_and_json(sample_pdf):
    args = CLIHandler.parse_arguments([str(sample_pdf), "--save-json"])

    state = await run(args)

    assert state.phase is HighlightPhase.POPULATED
    assert state.first_matched_page == 1

    highlighted = sample_pdf.parent / "report_highlighted.pdf"
    saved = fitz.open(highlighted)
    try:
        assert len(list(saved[0].annots())) == 3
    finally:
        saved.close()

    data = json.loads((sample_pdf.parent / "report_highlights.json").read_text(encoding="utf-8"))
    assert data["total_pages"] == 2
    assert [h["page_number"] for h in data["highlights"]] == [1]


@pytest.mark.asyncio
async def test_run_reports_not_found_without_annotating(sample_pdf):
    args = CLIHandler.parse_arguments([str(sample_pdf), "--phrase", "not present here"])

    state = await run(args)

    assert state.phase is HighlightPhase.NOT_FOUND
    assert not (sample_pdf.parent / "report_highlighted.pdf").exists()
