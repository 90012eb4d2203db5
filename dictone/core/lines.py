"""Per-line views of a document: tokens, syllable totals and internal rhymes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from .brackets import BracketIndex
from .models import AccentTier, Token
from .scorer import score_pair
from .tokenizer import iter_tokens
from dictone.utils.syllables import count_syllables


# Pairs inside one line must beat a vowel-only match to count as internal rhymes.
INTERNAL_RHYME_SCORE = 3.0


@dataclass(frozen=True)
class LineSummary:
    """One line of the document with document-relative token offsets."""

    line_index: int
    start_index: int
    text: str
    tokens: Tuple[Token, ...]
    syllable_count: int

    @property
    def end_index(self) -> int:
        return self.start_index + len(self.text)

    @property
    def last_token(self):
        return self.tokens[-1] if self.tokens else None


@dataclass(frozen=True)
class InternalRhyme:
    line_index: int
    first: Token
    second: Token
    score: float


def annotate_lines(document: str) -> List[LineSummary]:
    """Split ``document`` into lines and summarise each one.

    Tokens touching a bracket region are left out and add no syllables.
    An empty document is a single empty line.
    """

    document = document or ""
    brackets = BracketIndex.from_text(document)
    summaries: List[LineSummary] = []

    offset = 0
    for line_index, line in enumerate(document.split("\n")):
        tokens = tuple(
            token
            for token in (raw.shifted(offset) for raw in iter_tokens(line))
            if not brackets.overlaps(token.start_index, token.end_index)
        )
        summaries.append(
            LineSummary(
                line_index=line_index,
                start_index=offset,
                text=line,
                tokens=tokens,
                syllable_count=sum(count_syllables(token.word) for token in tokens),
            )
        )
        offset += len(line) + 1

    return summaries


def find_internal_rhymes(
    document: str,
    min_score: float = INTERNAL_RHYME_SCORE,
) -> List[InternalRhyme]:
    """Return rhyming word pairs that sit on the same line."""

    pairs: List[InternalRhyme] = []
    for summary in annotate_lines(document):
        tokens = summary.tokens
        for left in range(len(tokens) - 1):
            for right in range(left + 1, len(tokens)):
                score = score_pair(tokens[left].word, tokens[right].word)
                if score >= min_score:
                    pairs.append(InternalRhyme(summary.line_index, tokens[left], tokens[right], score))
    return pairs


def suggest_accent_tier(word: str) -> AccentTier:
    """Default accent for a hand-placed annotation, by syllable count."""

    syllables = count_syllables(word)
    if syllables >= 3:
        return AccentTier.HIGH
    if syllables == 2:
        return AccentTier.MEDIUM
    return AccentTier.LOW


__all__ = [
    "INTERNAL_RHYME_SCORE",
    "InternalRhyme",
    "LineSummary",
    "annotate_lines",
    "find_internal_rhymes",
    "suggest_accent_tier",
]
