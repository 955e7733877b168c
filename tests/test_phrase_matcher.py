import pytest

from conftest import EXAMPLE_PHRASE, EXAMPLE_TEXTS, make_fragment
from models import PhraseWindow
from phrase_matcher import find_phrase_window, matched_fragment_indices, split_phrase
from tokenizer import tokenize_page


@pytest.fixture
def example_tokens():
    return tokenize_page([make_fragment(text) for text in EXAMPLE_TEXTS], page_number=1)


def test_split_phrase_normalizes_spaces():
    assert split_phrase(" Gain  on sale ") == ["Gain", "on", "sale"]


def test_finds_phrase_across_fragments(example_tokens):
    window = find_phrase_window(example_tokens, split_phrase(EXAMPLE_PHRASE))

    assert window == PhraseWindow(0, 7)


def test_no_window_for_absent_phrase(example_tokens):
    assert find_phrase_window(example_tokens, split_phrase("not present here")) is None


def test_matching_is_case_sensitive(example_tokens):
    assert find_phrase_window(example_tokens, split_phrase("gain on sale")) is None


def test_matching_is_exact_on_punctuation(example_tokens):
    assert find_phrase_window(example_tokens, split_phrase("non-current assets etc")) is None


def test_empty_phrase_never_matches(example_tokens):
    assert find_phrase_window(example_tokens, []) is None


def test_phrase_longer_than_page_never_matches():
    tokens = tokenize_page([make_fragment("Gain on")], page_number=1)

    assert find_phrase_window(tokens, ["Gain", "on", "sale"]) is None


def test_only_first_occurrence_is_reported():
    tokens = tokenize_page(
        [make_fragment("etc and"), make_fragment("more etc and")], page_number=1
    )

    assert find_phrase_window(tokens, ["etc", "and"]) == PhraseWindow(0, 2)


def test_window_in_middle_of_stream():
    tokens = tokenize_page([make_fragment("a b c"), make_fragment("d e")], page_number=1)

    assert find_phrase_window(tokens, ["c", "d"]) == PhraseWindow(2, 4)


def test_matched_fragment_indices_are_distinct_and_ordered(example_tokens):
    indices = matched_fragment_indices(example_tokens, PhraseWindow(0, 7))

    assert indices == [0, 1, 2]


def test_matched_fragment_indices_for_no_match(example_tokens):
    assert matched_fragment_indices(example_tokens, None) == []


def test_matched_fragment_indices_rejects_out_of_range_window(example_tokens):
    with pytest.raises(ValueError, match="exceeds token stream"):
        matched_fragment_indices(example_tokens, PhraseWindow(5, 20))
