import pytest

from speechcoach.analytics import Lexicon, StatsEngine, load_lexicon, tokenize, words_per_minute
from speechcoach.schemas import TranscriptStats, WordCount


@pytest.fixture(scope="module")
def engine() -> StatsEngine:
    return StatsEngine(load_lexicon())


def test_empty_transcript(engine):
    stats = engine.calculate_stats("", None)
    assert stats.total_words == 0
    assert stats.unique_words == 0
    assert stats.filler_word_count == 0
    assert stats.filler_word_breakdown == {}
    assert stats.top_words == []
    assert stats.words_per_minute is None


def test_word_counts(engine):
    stats = engine.calculate_stats("Hello hello world world world.")
    assert stats.total_words == 5
    assert stats.unique_words == 2


def test_filler_example_with_custom_lexicon():
    lexicon = Lexicon.build(filler_single=["um", "uh"], filler_multi=["you know"])
    total, breakdown = StatsEngine(lexicon).count_filler_words("Um, you know, uh, I mean it")
    assert total == 3
    assert breakdown == {"um": 1, "uh": 1, "you know": 1}


def test_phrase_words_are_counted_again_as_single_fillers():
    lexicon = Lexicon.build(filler_single=["know"], filler_multi=["you know"])
    total, breakdown = StatsEngine(lexicon).count_filler_words("You know, I know.")
    assert breakdown == {"you know": 1, "know": 2}
    assert total == 3


def test_multi_word_match_respects_word_boundaries():
    lexicon = Lexicon.build(filler_multi=["i mean"])
    total, _ = StatsEngine(lexicon).count_filler_words("Hi meaning, I meant, I mean it")
    assert total == 1


def test_default_lexicon_filler_breakdown(engine):
    stats = engine.calculate_stats("Um, like, um, uh, like, like.")
    assert stats.filler_word_count == 6
    assert stats.filler_word_breakdown == {"um": 2, "like": 3, "uh": 1}


def test_default_lexicon_multi_word_fillers(engine):
    stats = engine.calculate_stats("I mean, you know, we should do this, you know what I mean?")
    assert stats.filler_word_breakdown["i mean"] == 2
    assert stats.filler_word_breakdown["you know"] == 2


def test_empty_lexicon_yields_zero_fillers():
    stats = StatsEngine(Lexicon.empty()).calculate_stats("um uh like, you know")
    assert stats.filler_word_count == 0
    assert stats.filler_word_breakdown == {}
    assert stats.total_words == 5


def test_top_words_exclude_stop_and_filler_words(engine):
    stats = engine.calculate_stats("the cat sat on the mat the cat was happy")
    words = [entry.word for entry in stats.top_words]
    assert stats.top_words[0] == WordCount(word="cat", count=2)
    assert "the" not in words
    assert "on" not in words
    assert "was" not in words


def test_top_words_sorted_by_frequency(engine):
    stats = engine.calculate_stats("apple banana apple cherry apple banana apple.")
    assert [(entry.word, entry.count) for entry in stats.top_words] == [
        ("apple", 4),
        ("banana", 2),
        ("cherry", 1),
    ]


def test_top_word_ties_keep_first_seen_order(engine):
    top = engine.find_top_words(tokenize("zeta alpha zeta alpha beta gamma"))
    assert [entry.word for entry in top] == ["zeta", "alpha", "beta", "gamma"]


def test_top_words_limit(engine):
    stats = engine.calculate_stats(" ".join(f"word{i}" for i in range(1, 21)))
    assert len(stats.top_words) == 10
    assert engine.find_top_words(tokenize("alpha beta"), limit=1) == [WordCount(word="alpha", count=1)]


def test_only_filler_words(engine):
    stats = engine.calculate_stats("um uh like literally um uh.")
    assert stats.total_words == 6
    assert stats.filler_word_count == 6
    assert stats.top_words == []


def test_words_per_minute_examples():
    assert words_per_minute(120, 60.0) == 120.0
    assert words_per_minute(10, 0) is None
    assert words_per_minute(10, None) is None
    assert words_per_minute(10, -5.0) is None


def test_words_per_minute_in_stats(engine):
    stats = engine.calculate_stats("Hello world this is a test of words per minute.", 30.0)
    assert stats.words_per_minute == pytest.approx(20.0)


def test_stats_round_trip_json(engine):
    stats = engine.calculate_stats("So, um, the launch went well. You know, the launch was late.", 12.5)
    restored = TranscriptStats.model_validate_json(stats.model_dump_json())
    assert restored == stats
    assert restored.top_words == stats.top_words
