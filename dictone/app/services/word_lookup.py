"""Boundary for external word suggestion services.

Rhyme, near-rhyme and synonym suggestions come from a network service that
is not part of this package. Anything that satisfies
:class:`WordLookupService` can be plugged into the application; the helpers
here only post-process what such a service returns.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Protocol, runtime_checkable

from dictone.utils.syllables import count_syllables


class SuggestionCategory(str, Enum):
    RHYMES = "rhymes"
    NEAR_RHYMES = "near_rhymes"
    SYNONYMS = "synonyms"


@dataclass(frozen=True)
class WordSuggestion:
    """A candidate word with the provider's relevance score."""

    word: str
    relevance_score: float
    syllable_count: Optional[int] = None

    def with_syllables(self) -> "WordSuggestion":
        if self.syllable_count is not None:
            return self
        return WordSuggestion(self.word, self.relevance_score, count_syllables(self.word))


@runtime_checkable
class WordLookupService(Protocol):
    def lookup(
        self,
        word: str,
        category: SuggestionCategory,
        max_results: int,
    ) -> List[WordSuggestion]:
        ...


def merge_suggestions(
    *groups: Iterable[WordSuggestion],
    max_results: Optional[int] = None,
) -> List[WordSuggestion]:
    """Combine suggestion lists into one ranked list.

    Words are compared case-insensitively; the first spelling seen wins but
    keeps the highest relevance reported for it. Results are ordered by
    relevance, highest first, ties keeping first-seen order. Missing
    syllable counts are estimated.
    """

    merged: dict[str, WordSuggestion] = {}
    for group in groups:
        for suggestion in group:
            key = suggestion.word.strip().lower()
            if not key:
                continue
            existing = merged.get(key)
            if existing is None:
                merged[key] = suggestion
            elif suggestion.relevance_score > existing.relevance_score:
                merged[key] = WordSuggestion(
                    existing.word,
                    suggestion.relevance_score,
                    existing.syllable_count
                    if existing.syllable_count is not None
                    else suggestion.syllable_count,
                )

    ranked = sorted(merged.values(), key=lambda item: item.relevance_score, reverse=True)
    if max_results is not None:
        ranked = ranked[: max(0, int(max_results))]
    return [suggestion.with_syllables() for suggestion in ranked]


def fetch_rhyme_suggestions(
    service: WordLookupService,
    word: str,
    max_results: int = 20,
) -> List[WordSuggestion]:
    """Ask ``service`` for rhymes and near rhymes of ``word`` and merge them."""

    if not (word or "").strip():
        return []
    rhymes = service.lookup(word, SuggestionCategory.RHYMES, max_results)
    near_rhymes = service.lookup(word, SuggestionCategory.NEAR_RHYMES, max_results)
    return merge_suggestions(rhymes, near_rhymes, max_results=max_results)


__all__ = [
    "SuggestionCategory",
    "WordLookupService",
    "WordSuggestion",
    "fetch_rhyme_suggestions",
    "merge_suggestions",
]
