"""Transcript statistics: word counts, filler words, vocabulary and pace."""

from __future__ import annotations

import re
from collections import Counter
from typing import Dict, List, Optional, Sequence, Tuple

from ..schemas import TranscriptStats, WordCount
from .lexicon import Lexicon, load_lexicon
from .tokenizer import tokenize

TOP_WORDS_LIMIT = 10


class StatsEngine:
    """Compute :class:`TranscriptStats` for a transcript against a lexicon."""

    def __init__(self, lexicon: Lexicon | None = None) -> None:
        self.lexicon = lexicon if lexicon is not None else load_lexicon()
        self._multi_patterns = [
            (phrase, re.compile(r"\b" + re.escape(phrase) + r"\b")) for phrase in self.lexicon.filler_multi
        ]

    def calculate_stats(self, transcript: str, duration: Optional[float] = None) -> TranscriptStats:
        tokens = tokenize(transcript)
        filler_count, filler_breakdown = self.count_filler_words(transcript)
        return TranscriptStats(
            total_words=len(tokens),
            unique_words=len(set(tokens)),
            filler_word_count=filler_count,
            filler_word_breakdown=filler_breakdown,
            top_words=self.find_top_words(tokens, limit=TOP_WORDS_LIMIT),
            words_per_minute=words_per_minute(len(tokens), duration),
        )

    def count_filler_words(self, text: str) -> Tuple[int, Dict[str, int]]:
        # Phrases are matched on the raw text and single words on tokens; a word
        # inside a matched phrase is still counted again by the single-word pass.
        normalized = text.lower()
        breakdown: Dict[str, int] = {}
        total = 0
        for phrase, pattern in self._multi_patterns:
            hits = len(pattern.findall(normalized))
            if hits:
                breakdown[phrase] = hits
                total += hits

        for token in tokenize(text):
            if token in self.lexicon.filler_single:
                breakdown[token] = breakdown.get(token, 0) + 1
                total += 1
        return total, breakdown

    def find_top_words(self, tokens: Sequence[str], limit: int = TOP_WORDS_LIMIT) -> List[WordCount]:
        """Most frequent meaningful words; equal counts keep first-seen order."""
        excluded = self.lexicon.stop_words | self.lexicon.filler_single
        counts = Counter(token for token in tokens if token not in excluded)
        return [WordCount(word=word, count=count) for word, count in counts.most_common(max(limit, 0))]


def words_per_minute(word_count: int, duration_seconds: Optional[float]) -> Optional[float]:
    if duration_seconds is None or duration_seconds <= 0:
        return None
    return word_count / (duration_seconds / 60.0)


__all__ = ["StatsEngine", "TOP_WORDS_LIMIT", "words_per_minute"]
