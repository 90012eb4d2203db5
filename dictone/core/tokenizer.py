"""Word tokenization and offset-to-line lookups."""

from __future__ import annotations

import bisect
import re
from typing import Iterator, List, Tuple

from .models import Token


# One optional apostrophe group: "don't" is one token, "rock'n'roll" is two.
TOKEN_PATTERN = re.compile(r"[A-Za-z]+(?:'[A-Za-z]+)?")


def iter_tokens(text: str) -> Iterator[Token]:
    """Yield the tokens of ``text`` left to right with offsets into ``text``."""

    for match in TOKEN_PATTERN.finditer(text or ""):
        yield Token(match.group(0), match.start(), match.end())


def tokenize(text: str) -> List[Token]:
    """Return every token of ``text`` as a list."""

    return list(iter_tokens(text))


class LineIndex:
    """Map document offsets to 0-based line numbers."""

    def __init__(self, text: str) -> None:
        self._newlines = [position for position, char in enumerate(text or "") if char == "\n"]

    def line_of(self, offset: int) -> int:
        return bisect.bisect_left(self._newlines, offset)

    def line_start(self, line_index: int) -> int:
        if line_index <= 0:
            return 0
        return self._newlines[line_index - 1] + 1

    @property
    def line_count(self) -> int:
        return len(self._newlines) + 1


def line_index_at(text: str, offset: int) -> int:
    """Number of newlines in ``text`` before ``offset``."""

    return (text or "")[: max(0, offset)].count("\n")


def iter_document_tokens(text: str) -> Iterator[Tuple[Token, int]]:
    """Yield ``(token, line_index)`` pairs for a whole document."""

    lines = LineIndex(text)
    for token in iter_tokens(text):
        yield token, lines.line_of(token.start_index)


__all__ = [
    "LineIndex",
    "TOKEN_PATTERN",
    "iter_document_tokens",
    "iter_tokens",
    "line_index_at",
    "tokenize",
]
