"""Shared syllable estimation logic.

The count is a spelling heuristic, not a dictionary lookup. Per-line syllable
totals and the default accent tier for manual annotations are derived from
it, so its exact output is part of the public behaviour.
"""

from __future__ import annotations

import re


__all__ = ["count_syllables"]


_NON_LETTER_PATTERN = re.compile(r"[^a-z]")
_VOWEL_GROUP_PATTERN = re.compile(r"[aeiouy]+")


def count_syllables(word: str) -> int:
    """Estimate the number of syllables in ``word`` (always at least one)."""

    normalized = _NON_LETTER_PATTERN.sub("", (word or "").lower())
    if len(normalized) <= 3:
        return 1

    vowel_groups = _VOWEL_GROUP_PATTERN.findall(normalized)
    if not vowel_groups:
        return 1

    syllable_count = len(vowel_groups)

    if normalized.endswith("e") and len(normalized) > 2:
        syllable_count -= 1

    if (
        normalized.endswith("ed")
        and not normalized.endswith("ted")
        and not normalized.endswith("ded")
    ):
        syllable_count -= 1

    return max(1, syllable_count)
