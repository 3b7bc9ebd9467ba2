"""Splitting raw document text into word tokens."""

from __future__ import annotations

import re
from enum import StrEnum


class TokenMode(StrEnum):
    """How raw text is split into tokens."""

    NON_WORD = "non_word"  # Split on runs of non-word characters (batch build)
    WHITESPACE = "whitespace"  # Split on whitespace only (single add)


_SPLITTERS: dict[TokenMode, re.Pattern[str]] = {
    TokenMode.NON_WORD: re.compile(r"\W+"),
    TokenMode.WHITESPACE: re.compile(r"\s+"),
}


def tokenize(text: str, mode: TokenMode = TokenMode.NON_WORD) -> list[str]:
    """
    Split text into non-empty raw tokens.

    Tokens are not normalized here; FrequencyVector.add_word lowercases
    them and strips non-alphanumerics.

    Args:
        text: Raw document text
        mode: Splitting rule

    Returns:
        Tokens in document order
    """
    if not text:
        return []
    return [token for token in _SPLITTERS[TokenMode(mode)].split(text) if token]
