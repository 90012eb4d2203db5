from dictone.core.models import Token
from dictone.core.tokenizer import (
    LineIndex,
    iter_document_tokens,
    iter_tokens,
    line_index_at,
    tokenize,
)


def test_tokenize_returns_words_with_offsets():
    tokens = tokenize("I see the light")

    assert [token.word for token in tokens] == ["I", "see", "the", "light"]
    assert tokens[3] == Token("light", 10, 15)


def test_apostrophes_allow_a_single_suffix():
    words = [token.word for token in tokenize("don't stop rock'n'roll")]

    assert words == ["don't", "stop", "rock'n", "roll"]


def test_punctuation_and_digits_split_tokens():
    words = [token.word for token in tokenize("yeah,yeah! 2pac... 'quoted'")]

    assert words == ["yeah", "yeah", "pac", "quoted"]


def test_empty_input_yields_nothing():
    assert tokenize("") == []
    assert list(iter_tokens("  \n\t ")) == []


def test_iter_tokens_is_restartable():
    text = "one two"
    assert list(iter_tokens(text)) == list(iter_tokens(text))


def test_line_index_at_counts_preceding_newlines():
    text = "first\nsecond\n\nfourth"

    assert line_index_at(text, 0) == 0
    assert line_index_at(text, 5) == 0
    assert line_index_at(text, 6) == 1
    assert line_index_at(text, 14) == 3


def test_line_index_matches_naive_count():
    text = "a\nbb\n\nccc\n"
    index = LineIndex(text)

    for offset in range(len(text) + 1):
        assert index.line_of(offset) == line_index_at(text, offset)
    assert index.line_count == 5
    assert index.line_start(3) == 6


def test_iter_document_tokens_reports_lines():
    pairs = [(token.word, line) for token, line in iter_document_tokens("I see the light\nShining so bright")]

    assert pairs[-2:] == [("so", 1), ("bright", 1)]
    assert pairs[0] == ("I", 0)
