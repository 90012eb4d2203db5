import itertools

import pytest

from dictone.core.scorer import (
    WordSound,
    explain_pair,
    explain_sounds,
    rhyme_strength,
    rhymes,
    score_pair,
    score_sounds,
    word_sound,
)


WORDS = [
    "light", "bright", "love", "above", "time", "rhyme", "day", "way", "you",
    "true", "most", "lost", "ghost", "note", "see", "seed", "place", "plays",
    "mint", "mist", "cat", "cab", "cap", "rain", "lane", "paint", "late", "cow",
    "snow", "dog", "I", "a",
]


@pytest.mark.parametrize(
    "word_a, word_b, expected",
    [
        ("light", "bright", 5.0),
        ("time", "rhyme", 5.0),
        ("times", "rhymes", 5.0),
        ("heart", "start", 5.0),
        ("word", "bird", 5.0),
        ("fire", "desire", 5.0),
        ("most", "ghost", 5.0),
        ("love", "above", 4.5),
        ("day", "way", 4.5),
        ("you", "true", 4.5),
        ("see", "seed", 4.25),
        ("most", "note", 4.25),
        ("mint", "mist", 3.75),
        ("place", "plays", 3.25),
        ("cap", "cab", 3.25),
        ("cat", "cab", 2.5),
        ("rain", "lane", 2.0),
        ("most", "lost", 2.0),
        ("paint", "late", 1.5),
        ("cow", "snow", 1.5),
        ("cat", "dog", 0.0),
    ],
)
def test_score_pair_examples(word_a, word_b, expected):
    assert score_pair(word_a, word_b) == pytest.approx(expected)


def test_same_word_never_rhymes_with_itself():
    assert score_pair("light", "light") == 0.0
    assert score_pair("Light", "light!") == 0.0


def test_words_shorter_than_two_letters_score_zero():
    assert score_pair("a", "at") == 0.0
    assert score_pair("I", "eye") == 0.0


def test_scores_are_symmetric():
    for word_a, word_b in itertools.combinations(WORDS, 2):
        assert score_pair(word_a, word_b) == score_pair(word_b, word_a), (word_a, word_b)


def test_scores_stay_in_range():
    for word_a, word_b in itertools.combinations(WORDS, 2):
        assert 0.0 <= score_pair(word_a, word_b) <= 5.0


def test_threshold_is_monotonic():
    for word_a, word_b in itertools.combinations(WORDS, 2):
        for low, high in ((1.0, 2.0), (2.0, 3.5), (3.5, 5.0)):
            if rhymes(word_a, word_b, threshold=high):
                assert rhymes(word_a, word_b, threshold=low)


def test_rhymes_uses_default_threshold():
    assert rhymes("rain", "lane")
    assert not rhymes("paint", "late")


def test_rhyme_strength_is_scaled_score():
    assert rhyme_strength("light", "bright") == 1.0
    assert rhyme_strength("cat", "cab") == pytest.approx(0.5)
    assert rhyme_strength("cat", "dog") == 0.0


def test_explain_pair_reports_rule_and_tails():
    result = explain_pair("light", "bright")

    assert result.rule == "identical_tail"
    assert (result.tail_a, result.tail_b) == ("iyt", "iyt")

    assert explain_pair("place", "plays").rule == "near_final_consonant"
    assert explain_pair("rain", "lane").rule == "assonance_same_consonants"
    assert explain_pair("most", "lost").rule == "spelling_suffix_3"


def test_word_sound_splits_the_tail_once():
    assert word_sound("Light!") == WordSound("light", "iyt", "iy", "t")
    assert word_sound("a") == WordSound("a")
    assert word_sound("light") is word_sound("light")


def test_precomputed_sounds_score_like_words():
    for word_a, word_b in itertools.combinations(WORDS, 2):
        sound_a, sound_b = word_sound(word_a), word_sound(word_b)
        assert explain_sounds(sound_a, sound_b) == explain_pair(word_a, word_b), (word_a, word_b)
        assert score_sounds(sound_a, sound_b) == score_pair(word_a, word_b)
