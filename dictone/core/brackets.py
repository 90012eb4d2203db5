"""Bracketed annotation regions (stage directions, ad-libs, section tags).

Words inside ``[...]`` are excluded from rhyme clustering and from syllable
totals. Regions are found in a single pass with a depth counter; a nested
``[`` only deepens the region its outer bracket opened.
"""

from __future__ import annotations

import bisect
from typing import Iterable, List, Sequence

from .models import BracketRegion


def scan_bracket_regions(text: str) -> List[BracketRegion]:
    """Return the non-overlapping bracket regions of ``text`` in order.

    A ``]`` at depth zero is ignored. A region that is never closed runs to
    the end of the text.
    """

    regions: List[BracketRegion] = []
    depth = 0
    start = 0
    for position, char in enumerate(text or ""):
        if char == "[":
            if depth == 0:
                start = position
            depth += 1
        elif char == "]" and depth > 0:
            depth -= 1
            if depth == 0:
                regions.append(BracketRegion(start, position + 1))

    if depth > 0:
        regions.append(BracketRegion(start, len(text)))
    return regions


class BracketIndex:
    """Offset queries over a sorted list of bracket regions."""

    def __init__(self, regions: Iterable[BracketRegion]) -> None:
        self._regions: Sequence[BracketRegion] = sorted(regions, key=lambda region: region.start)
        self._starts = [region.start for region in self._regions]

    @classmethod
    def from_text(cls, text: str) -> "BracketIndex":
        return cls(scan_bracket_regions(text))

    @property
    def regions(self) -> List[BracketRegion]:
        return list(self._regions)

    def contains(self, offset: int) -> bool:
        return self.overlaps(offset, offset + 1)

    def overlaps(self, start: int, end: int) -> bool:
        """Whether ``[start, end)`` touches any region."""

        # Only the last region starting before ``end`` can overlap.
        position = bisect.bisect_left(self._starts, end) - 1
        if position < 0:
            return False
        return self._regions[position].overlaps(start, end)

    def __len__(self) -> int:
        return len(self._regions)


__all__ = ["BracketIndex", "scan_bracket_regions"]
