"""Keep annotations anchored to their words across arbitrary text edits."""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Sequence, Set, Tuple

from .models import Annotation
from .tokenizer import iter_document_tokens


Occurrence = Tuple[int, int, int]


def index_word_occurrences(text: str) -> Dict[str, List[Occurrence]]:
    """Map each lower-cased word of ``text`` to its ``(start, end, line)`` spans."""

    occurrences: Dict[str, List[Occurrence]] = defaultdict(list)
    for token, line_index in iter_document_tokens(text):
        occurrences[token.word.lower()].append((token.start_index, token.end_index, line_index))
    return dict(occurrences)


def reconcile_annotations(
    old_text: str,
    new_text: str,
    annotations: Sequence[Annotation],
) -> List[Annotation]:
    """Relocate ``annotations`` from ``old_text`` onto ``new_text``.

    Annotations are matched in order of their old offset; each takes the
    nearest occurrence of its word (case-insensitively) that no earlier
    annotation has claimed, preferring the earlier occurrence on a tie.
    Annotations whose word no longer occurs anywhere, or whose occurrences
    are all claimed, are dropped. Survivors keep their input order and
    everything but their position.

    The matching is greedy. When two instances of the same word are edited
    so that they swap places, their annotations may swap too.
    """

    if old_text == new_text:
        return list(annotations)

    occurrences = index_word_occurrences(new_text)
    claimed: Set[int] = set()
    relocated: Dict[int, Annotation] = {}

    order = sorted(range(len(annotations)), key=lambda position: annotations[position].start_index)
    for position in order:
        annotation = annotations[position]
        candidates = [
            occurrence
            for occurrence in occurrences.get(annotation.word.lower(), ())
            if occurrence[0] not in claimed
        ]
        if not candidates:
            continue

        start, end, line_index = min(
            candidates,
            key=lambda occurrence: (abs(occurrence[0] - annotation.start_index), occurrence[0]),
        )
        claimed.add(start)
        relocated[position] = annotation.with_position(start, end, line_index)

    return [relocated[position] for position in range(len(annotations)) if position in relocated]


__all__ = ["index_word_occurrences", "reconcile_annotations"]
