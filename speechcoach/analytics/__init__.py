"""Transcript analytics (tokenizer, lexicon, stats)."""

from .lexicon import Lexicon, load_lexicon
from .stats import StatsEngine, words_per_minute
from .tokenizer import tokenize

__all__ = ["Lexicon", "StatsEngine", "load_lexicon", "tokenize", "words_per_minute"]
