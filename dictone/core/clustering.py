"""Whole-document rhyme clustering.

Tokens are visited left to right. Each token not yet in a cluster becomes an
anchor and collects every later free token that scores at least the
sensitivity threshold against it. A group of two or more takes the next free
scheme identifier from the palette. Membership is decided against the anchor
only, so clusters are not transitive.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from .brackets import BracketIndex
from .models import SCHEME_PALETTE, AccentTier, Annotation, SchemeId, Token
from .scorer import DEFAULT_THRESHOLD, score_sounds, word_sound
from .tokenizer import iter_document_tokens


MIN_CLUSTER_WORD_LENGTH = 3

HIGH_ACCENT_SCORE = 4.0
MEDIUM_ACCENT_SCORE = 2.5


def accent_tier_for_score(score: float) -> AccentTier:
    """Map a rhyme score onto the display accent tier."""

    if score >= HIGH_ACCENT_SCORE:
        return AccentTier.HIGH
    if score >= MEDIUM_ACCENT_SCORE:
        return AccentTier.MEDIUM
    return AccentTier.LOW


@dataclass(frozen=True)
class ClusterMember:
    token: Token
    line_index: int
    score: float

    @property
    def accent_tier(self) -> AccentTier:
        return accent_tier_for_score(self.score)


@dataclass(frozen=True)
class RhymeCluster:
    """One group of mutually assigned rhyme words, anchor first."""

    scheme: SchemeId
    members: Tuple[ClusterMember, ...] = field(default_factory=tuple)

    @property
    def anchor(self) -> ClusterMember:
        return self.members[0]

    @property
    def words(self) -> List[str]:
        return [member.token.word for member in self.members]


def _candidate_tokens(document: str) -> List[Tuple[Token, int]]:
    brackets = BracketIndex.from_text(document)
    candidates: List[Tuple[Token, int]] = []
    for token, line_index in iter_document_tokens(document):
        if brackets.overlaps(token.start_index, token.end_index):
            continue
        if len(token.word) < MIN_CLUSTER_WORD_LENGTH:
            continue
        candidates.append((token, line_index))
    return candidates


def find_rhyme_clusters(
    document: str,
    sensitivity: float = DEFAULT_THRESHOLD,
    *,
    reserved: Iterable[SchemeId] = (),
    palette: Sequence[SchemeId] = SCHEME_PALETTE,
) -> List[RhymeCluster]:
    """Group the words of ``document`` into rhyme clusters.

    Identifiers in ``reserved`` are skipped when handing out schemes. Once
    the palette runs out no further clusters are formed, so every returned
    cluster has a scheme.
    """

    if not document or not document.strip():
        return []

    reserved_schemes: Set[SchemeId] = set(reserved)
    available = [scheme for scheme in palette if scheme not in reserved_schemes]
    candidates = _candidate_tokens(document)
    sounds = [word_sound(token.word) for token, _ in candidates]
    claimed = [False] * len(candidates)
    clusters: List[RhymeCluster] = []

    for anchor_position, (anchor, anchor_line) in enumerate(candidates):
        if claimed[anchor_position]:
            continue
        if len(clusters) >= len(available):
            break

        matches: List[Tuple[int, float]] = []
        for position in range(anchor_position + 1, len(candidates)):
            if claimed[position]:
                continue
            score = score_sounds(sounds[anchor_position], sounds[position])
            if score >= sensitivity:
                matches.append((position, score))

        if not matches:
            continue

        claimed[anchor_position] = True
        # The anchor scores nothing against itself, so it always sits in the lowest tier.
        members = [ClusterMember(anchor, anchor_line, 0.0)]
        for position, score in matches:
            claimed[position] = True
            token, line_index = candidates[position]
            members.append(ClusterMember(token, line_index, score))

        clusters.append(RhymeCluster(available[len(clusters)], tuple(members)))

    return clusters


def detect_rhyme_schemes(
    document: str,
    manual_annotations: Optional[Iterable[Annotation]] = None,
    sensitivity: float = DEFAULT_THRESHOLD,
    *,
    palette: Sequence[SchemeId] = SCHEME_PALETTE,
) -> List[Annotation]:
    """Return the full annotation set for ``document``.

    Manual annotations come first, untouched and in their input order,
    followed by one automatic annotation per clustered word in discovery
    order. A clustered word that already carries a manual annotation at the
    same offset gets no automatic one. Automatic annotations in the input are
    ignored; they are always recomputed.
    """

    manual = [annotation for annotation in manual_annotations or () if annotation.is_manual]
    if not document or not document.strip():
        return manual

    manual_starts = {annotation.start_index for annotation in manual}
    clusters = find_rhyme_clusters(
        document,
        sensitivity,
        reserved=(annotation.scheme for annotation in manual),
        palette=palette,
    )

    results = list(manual)
    for cluster in clusters:
        for member in cluster.members:
            token = member.token
            if token.start_index in manual_starts:
                continue
            results.append(
                Annotation(
                    word=token.word,
                    start_index=token.start_index,
                    end_index=token.end_index,
                    line_index=member.line_index,
                    scheme=cluster.scheme,
                    accent_tier=member.accent_tier,
                    is_manual=False,
                )
            )
    return results


__all__ = [
    "ClusterMember",
    "MIN_CLUSTER_WORD_LENGTH",
    "RhymeCluster",
    "accent_tier_for_score",
    "detect_rhyme_schemes",
    "find_rhyme_clusters",
]
