"""Graded rhyme scoring between two words on a 0-5 scale."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import FrozenSet, Tuple

from .phonetics import normalize_word, phonetic_tail, split_tail


MAX_SCORE = 5.0
DEFAULT_THRESHOLD = 2.0

# Voiced/unvoiced consonant pairs that still make a passable rhyme.
_NEAR_CONSONANT_PAIRS: FrozenSet[FrozenSet[str]] = frozenset(
    frozenset(pair) for pair in (("s", "z"), ("t", "d"), ("p", "b"), ("k", "g"), ("f", "v"))
)

# Spellings of roughly the same vowel sound.
ASSONANCE_GROUPS: Tuple[FrozenSet[str], ...] = (
    frozenset({"oo", "ou", "ew"}),
    frozenset({"ee", "ea", "ie"}),
    frozenset({"ay", "ai", "ey"}),
    frozenset({"iy", "igh", "ie"}),
    frozenset({"oh", "oa", "ow"}),
)


@dataclass(frozen=True)
class RhymeScore:
    """Score for a word pair together with the rule that produced it."""

    score: float
    rule: str
    tail_a: str = ""
    tail_b: str = ""

    @property
    def strength(self) -> float:
        return min(1.0, self.score / MAX_SCORE)


def _identical_tail_score(tail: str) -> float:
    if len(tail) >= 3:
        return 5.0
    if len(tail) == 2:
        return 4.5
    return 3.5


def _same_vowel_score(consonants_a: str, consonants_b: str) -> Tuple[float, str]:
    if consonants_a == consonants_b:
        return 5.0, "same_vowel_same_consonants"

    shorter, longer = sorted((consonants_a, consonants_b), key=len)
    if longer.endswith(shorter):
        if len(longer) - len(shorter) == 1:
            return 4.25, "consonant_suffix_close"
        return 4.0, "consonant_suffix"

    if consonants_a and consonants_b:
        final_a, final_b = consonants_a[-1], consonants_b[-1]
        if final_a == final_b:
            return 3.75, "shared_final_consonant"
        if frozenset((final_a, final_b)) in _NEAR_CONSONANT_PAIRS:
            return 3.25, "near_final_consonant"

    return 2.5, "vowel_only"


def _share_assonance_group(vowel_a: str, vowel_b: str) -> bool:
    return any(vowel_a in group and vowel_b in group for group in ASSONANCE_GROUPS)


@dataclass(frozen=True)
class WordSound:
    """The parts of a word that pairwise scoring looks at."""

    normalized: str
    tail: str = ""
    vowel: str = ""
    consonants: str = ""


@lru_cache(maxsize=8192)
def word_sound(word: str) -> WordSound:
    """Normalize ``word`` and split its phonetic tail once."""

    normalized = normalize_word(word)
    if len(normalized) < 2:
        return WordSound(normalized)
    tail = phonetic_tail(normalized)
    vowel, consonants = split_tail(tail)
    return WordSound(normalized, tail, vowel, consonants)


def _score_sounds(sound_a: WordSound, sound_b: WordSound) -> Tuple[float, str]:
    normalized_a, normalized_b = sound_a.normalized, sound_b.normalized

    if normalized_a == normalized_b:
        return 0.0, "same_word"
    if len(normalized_a) < 2 or len(normalized_b) < 2:
        return 0.0, "too_short"

    if sound_a.tail == sound_b.tail:
        return _identical_tail_score(sound_a.tail), "identical_tail"

    vowel_a, consonants_a = sound_a.vowel, sound_a.consonants
    vowel_b, consonants_b = sound_b.vowel, sound_b.consonants

    if vowel_a and vowel_a == vowel_b:
        return _same_vowel_score(consonants_a, consonants_b)

    if vowel_a and vowel_b and _share_assonance_group(vowel_a, vowel_b):
        if consonants_a == consonants_b:
            return 2.0, "assonance_same_consonants"
        if consonants_a and consonants_b and consonants_a[-1] == consonants_b[-1]:
            return 1.5, "assonance_final_consonant"

    if len(normalized_a) >= 3 and len(normalized_b) >= 3 and normalized_a[-3:] == normalized_b[-3:]:
        return 2.0, "spelling_suffix_3"
    if normalized_a[-2:] == normalized_b[-2:]:
        return 1.5, "spelling_suffix_2"

    return 0.0, "no_match"


def explain_sounds(sound_a: WordSound, sound_b: WordSound) -> RhymeScore:
    """Like :func:`explain_pair` for words already passed through :func:`word_sound`."""

    score, rule = _score_sounds(sound_a, sound_b)
    if rule in ("same_word", "too_short"):
        return RhymeScore(score, rule)
    return RhymeScore(score, rule, sound_a.tail, sound_b.tail)


def score_sounds(sound_a: WordSound, sound_b: WordSound) -> float:
    return _score_sounds(sound_a, sound_b)[0]


def explain_pair(word_a: str, word_b: str) -> RhymeScore:
    """Score ``word_a`` against ``word_b`` and report which rule decided it.

    Rules are tried from strongest to weakest and the first that applies
    wins. The result does not depend on argument order.
    """

    return explain_sounds(word_sound(word_a), word_sound(word_b))


def score_pair(word_a: str, word_b: str) -> float:
    """Return the rhyme score of two words in ``[0, 5]``."""

    return score_sounds(word_sound(word_a), word_sound(word_b))


def rhymes(word_a: str, word_b: str, threshold: float = DEFAULT_THRESHOLD) -> bool:
    """Whether the pair scores at least ``threshold``."""

    return score_pair(word_a, word_b) >= threshold


def rhyme_strength(word_a: str, word_b: str) -> float:
    """Score rescaled to ``[0, 1]``."""

    return explain_pair(word_a, word_b).strength


__all__ = [
    "ASSONANCE_GROUPS",
    "DEFAULT_THRESHOLD",
    "MAX_SCORE",
    "RhymeScore",
    "WordSound",
    "explain_pair",
    "explain_sounds",
    "rhyme_strength",
    "rhymes",
    "score_pair",
    "score_sounds",
    "word_sound",
]
