import pytest

from dictone.core.phonetics import normalize_word, phonetic_form, phonetic_tail, split_tail


def test_normalize_word_strips_case_and_punctuation():
    assert normalize_word("Don't!") == "dont"
    assert normalize_word("") == ""


@pytest.mark.parametrize(
    "word, tail",
    [
        ("light", "iyt"),
        ("bright", "iyt"),
        ("love", "uv"),
        ("above", "uv"),
        ("most", "ohst"),
        ("ghost", "ohst"),
        ("lost", "awst"),
        ("times", "iymz"),
        ("rhymes", "iymz"),
        ("heart", "art"),
        ("start", "art"),
        ("word", "urd"),
        ("bird", "urd"),
        ("fire", "iyr"),
        ("desire", "iyr"),
        ("you", "oo"),
        ("true", "oo"),
        ("place", "ays"),
        ("plays", "ayz"),
        ("rain", "ain"),
        ("lane", "ayn"),
    ],
)
def test_phonetic_tail_examples(word, tail):
    assert phonetic_tail(word) == tail


def test_long_o_rule_runs_before_ost_rule():
    assert phonetic_tail("most") != phonetic_tail("lost")


def test_silent_k_does_not_turn_know_into_now():
    assert phonetic_form("know") == "now"
    assert phonetic_form("now") == "naow"
    assert phonetic_tail("know") != phonetic_tail("now")


def test_short_words_are_returned_normalized():
    assert phonetic_tail("I") == "i"
    assert phonetic_tail("'a'") == "a"
    assert phonetic_tail("") == ""


def test_tail_falls_back_to_last_letters_without_vowel_sound():
    assert phonetic_tail("hmm") == "hmm"
    assert phonetic_tail("shhh") == "hhh"


def test_phonetic_tail_is_case_insensitive():
    assert phonetic_tail("LIGHT") == phonetic_tail("light")


def test_split_tail():
    assert split_tail("iyt") == ("iy", "t")
    assert split_tail("ohst") == ("oh", "st")
    assert split_tail("aow") == ("aow", "")
    assert split_tail("hmm") == ("", "hmm")
