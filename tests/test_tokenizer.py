import unicodedata

from speechcoach.analytics import tokenize


def test_tokenize_strips_punctuation():
    assert tokenize("Hello, world!") == ["hello", "world"]


def test_tokenize_is_deterministic():
    text = "Well -- I'm not sure, 'really' sure..."
    assert tokenize(text) == tokenize(text)


def test_tokenize_keeps_contractions_and_hyphens():
    assert tokenize("I'm well-known, don't you think?") == ["i'm", "well-known", "don't", "you", "think"]


def test_tokenize_strips_edge_apostrophes_and_hyphens():
    assert tokenize("'quoted' -dash- -- ''") == ["quoted", "dash"]


def test_tokenize_normalizes_case_and_newlines():
    assert tokenize("Hello HELLO\nhello\tHeLLo.") == ["hello"] * 4


def test_tokenize_keeps_numbers():
    assert tokenize("I have 3 apples") == ["i", "have", "3", "apples"]


def test_tokenize_empty():
    assert tokenize("") == []
    assert tokenize("?! ...") == []


def test_tokenize_keeps_combining_marks():
    decomposed = unicodedata.normalize("NFD", "Café")
    assert tokenize(decomposed) == [unicodedata.normalize("NFD", "café")]


def test_tokenize_keeps_devanagari_vowel_signs():
    assert tokenize("हिन्दी, भाषा!") == ["हिन्दी", "भाषा"]
