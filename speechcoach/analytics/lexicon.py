"""Stop-word and filler-word lists used by the stats engine."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

LOGGER = logging.getLogger("speechcoach.lexicon")

DATA_DIR = Path(__file__).resolve().parent / "data"
DEFAULT_STOP_WORDS_PATH = DATA_DIR / "stop-words.json"
DEFAULT_FILLER_WORDS_PATH = DATA_DIR / "filler-words.json"


@dataclass(frozen=True, slots=True)
class Lexicon:
    stop_words: frozenset[str] = field(default_factory=frozenset)
    filler_single: frozenset[str] = field(default_factory=frozenset)
    filler_multi: tuple[str, ...] = ()

    @classmethod
    def build(
        cls,
        *,
        stop_words: Iterable[str] = (),
        filler_single: Iterable[str] = (),
        filler_multi: Iterable[str] = (),
    ) -> "Lexicon":
        """Normalize word lists; multi-word phrases are ordered longest first."""
        return cls(
            stop_words=frozenset(word.lower() for word in stop_words),
            filler_single=frozenset(word.lower() for word in filler_single),
            filler_multi=tuple(sorted((phrase.lower() for phrase in filler_multi), key=len, reverse=True)),
        )

    @classmethod
    def empty(cls) -> "Lexicon":
        return cls()


def load_lexicon(
    stop_words_path: Path | str | None = None,
    filler_words_path: Path | str | None = None,
) -> Lexicon:
    """Load both word lists; an unreadable file yields an empty list, never an error."""
    stop_words = _load_stop_words(Path(stop_words_path or DEFAULT_STOP_WORDS_PATH))
    single, multi = _load_filler_words(Path(filler_words_path or DEFAULT_FILLER_WORDS_PATH))
    return Lexicon.build(stop_words=stop_words, filler_single=single, filler_multi=multi)


def _read_json(path: Path):
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        LOGGER.warning("Could not load %s (%s); using empty set", path, exc)
        return None


def _load_stop_words(path: Path) -> list[str]:
    data = _read_json(path)
    if data is None:
        return []
    if not isinstance(data, list):
        LOGGER.warning("Could not decode %s: expected a list of strings", path)
        return []
    return [str(word) for word in data if isinstance(word, str)]


def _load_filler_words(path: Path) -> tuple[list[str], list[str]]:
    data = _read_json(path)
    if data is None:
        return [], []
    if not isinstance(data, dict):
        LOGGER.warning("Could not decode %s: expected {single: [...], multi: [...]}", path)
        return [], []
    single = [word for word in data.get("single") or [] if isinstance(word, str)]
    multi = [phrase for phrase in data.get("multi") or [] if isinstance(phrase, str)]
    return single, multi


__all__ = ["Lexicon", "load_lexicon"]
