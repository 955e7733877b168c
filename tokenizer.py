"""Split a page's fragments into a word token stream with fragment provenance."""

from __future__ import annotations

import logging
from typing import List, Sequence

from models import Fragment, Token

logger = logging.getLogger(__name__)

WORD_SEPARATOR = " "


def split_words(text: str) -> List[str]:
    """
    Split text on single spaces, dropping zero-length pieces.

    Only the space character separates words; punctuation stays attached to
    the word it touches, so "assets," is one word.

    Args:
        text: Text to split

    Returns:
        List of non-empty words in order
    """
    return [word for word in text.split(WORD_SEPARATOR) if word]


def tokenize_page(fragments: Sequence[Fragment], page_number: int) -> List[Token]:
    """
    Build the ordered token stream for one page.

    Args:
        fragments: The page's fragments in extraction order
        page_number: Page number (1-indexed)

    Returns:
        List of Token objects, each pointing back at its fragment index
    """
    tokens = []
    for fragment_index, fragment in enumerate(fragments):
        for word in split_words(fragment.text):
            tokens.append(Token(word=word, fragment_index=fragment_index, page_number=page_number))

    logger.debug(
        f"Tokenized page {page_number}: {len(fragments)} fragments -> {len(tokens)} tokens"
    )
    return tokens
