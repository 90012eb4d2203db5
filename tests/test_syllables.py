import pytest

from dictone.core.models import Token
from dictone.utils.syllables import count_syllables


@pytest.mark.parametrize(
    "word, expected",
    [
        ("rhyme", 1),
        ("wonderful", 3),
        ("cat", 1),
        ("the", 1),
        ("shining", 2),
        ("jumped", 1),
        ("wanted", 2),
        ("faded", 2),
        ("rhythm", 1),
        ("beautiful", 3),
        ("", 1),
    ],
)
def test_count_syllables(word, expected):
    assert count_syllables(word) == expected


def test_non_letters_are_ignored():
    assert count_syllables("Wonder-ful!") == count_syllables("wonderful")


def test_count_is_never_below_one():
    assert count_syllables("shhh") == 1
    assert count_syllables("...") == 1


def test_token_exposes_syllables():
    assert Token("wonderful", 0, 9).syllables == 3
