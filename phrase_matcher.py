"""Word-level phrase matching over a page's token stream."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from models import PhraseWindow, Token
from tokenizer import split_words

logger = logging.getLogger(__name__)


def split_phrase(phrase: str) -> List[str]:
    """Split the target phrase into words using the tokenizer's rule."""
    return split_words(phrase)


def find_phrase_window(
    tokens: Sequence[Token],
    phrase_words: Sequence[str]
) -> Optional[PhraseWindow]:
    """
    Find the first window of tokens whose words equal the phrase words.

    Matching is exact and case-sensitive, on whole words. Because it compares
    post-split words rather than raw strings, a phrase still matches when the
    extractor broke it across several fragments.

    Args:
        tokens: Token stream for one page
        phrase_words: Target phrase, already split into words

    Returns:
        The leftmost matching PhraseWindow, or None if there is no match
    """
    phrase_length = len(phrase_words)
    if phrase_length == 0:
        logger.debug("Empty phrase, nothing to match")
        return None

    if len(tokens) < phrase_length:
        return None

    target = list(phrase_words)
    words = [token.word for token in tokens]

    for start in range(len(words) - phrase_length + 1):
        if words[start:start + phrase_length] == target:
            return PhraseWindow(start, start + phrase_length)

    return None


def matched_fragment_indices(
    tokens: Sequence[Token],
    window: Optional[PhraseWindow]
) -> List[int]:
    """
    Collect the distinct fragment indices touched by a window.

    Args:
        tokens: Token stream the window was found in
        window: Matched window, or None

    Returns:
        Fragment indices in order of first appearance (empty when window is None)
    """
    if window is None:
        return []

    if window.end_word_index_exclusive > len(tokens):
        raise ValueError(
            f"Window [{window.start_word_index}, {window.end_word_index_exclusive}) "
            f"exceeds token stream of length {len(tokens)}"
        )

    indices = []
    seen = set()
    for word_index in window.indices():
        fragment_index = tokens[word_index].fragment_index
        if fragment_index not in seen:
            seen.add(fragment_index)
            indices.append(fragment_index)

    return indices
