"""Transcript tokenization."""

from __future__ import annotations

import unicodedata

KEPT_PUNCTUATION = "'-"


def _is_word_char(ch: str) -> bool:
    # letters, combining marks and numbers
    return unicodedata.category(ch)[0] in "LMN"


def tokenize(text: str) -> list[str]:
    """Lowercase ``text`` and split it into word tokens.

    Only alphanumerics (including combining marks), whitespace, apostrophes
    and hyphens survive; leading and trailing apostrophes/hyphens are stripped
    from every token.
    """
    normalized = text.lower()
    cleaned = "".join(
        ch for ch in normalized if _is_word_char(ch) or ch.isspace() or ch in KEPT_PUNCTUATION
    )
    tokens = (piece.strip(KEPT_PUNCTUATION) for piece in cleaned.split())
    return [token for token in tokens if token]


__all__ = ["tokenize"]
