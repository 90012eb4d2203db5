"""Records shared by the tokenizer, clustering engine and reconciler."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Mapping, Tuple

from dictone.utils.syllables import count_syllables


class SchemeStyle(str, Enum):
    """Text decoration used to tell schemes apart beyond their colour."""

    UNDERLINE = "underline"
    DOUBLE_UNDERLINE = "double-underline"
    STRIKETHROUGH = "strikethrough"


class SchemeId(str, Enum):
    """Ordered palette of rhyme-scheme identifiers."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"
    G = "G"
    H = "H"
    I = "I"  # noqa: E741
    J = "J"
    K = "K"
    L = "L"
    M = "M"
    N = "N"
    O = "O"  # noqa: E741
    P = "P"
    Q = "Q"
    R = "R"
    S = "S"
    T = "T"
    U = "U"
    V = "V"
    W = "W"
    X = "X"

    @property
    def swatch(self) -> "SchemeSwatch":
        return SCHEME_SWATCHES[self]


class AccentTier(str, Enum):
    """Visual emphasis of a matched rhyme."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def opacity(self) -> float:
        return ACCENT_OPACITY[self]


@dataclass(frozen=True)
class SchemeSwatch:
    """Display colour and decoration for one scheme identifier."""

    color: str
    style: SchemeStyle

    @property
    def background(self) -> str:
        # 0x33 alpha is a 20% tint of the foreground colour.
        return f"{self.color}33"


_SCHEME_COLORS: Tuple[str, ...] = (
    "#f87171",  # A red
    "#60a5fa",  # B blue
    "#4ade80",  # C green
    "#c084fc",  # D purple
    "#fb923c",  # E orange
    "#f472b6",  # F pink
    "#2dd4bf",  # G teal
    "#facc15",  # H yellow
    "#f59e0b",  # I amber
    "#84cc16",  # J lime
    "#0ea5e9",  # K sky
    "#d946ef",  # L fuchsia
    "#f43f5e",  # M rose
    "#6366f1",  # N indigo
    "#10b981",  # O emerald
    "#ea580c",  # P orange
    "#8b5cf6",  # Q violet
    "#06b6d4",  # R cyan
    "#ec4899",  # S pink
    "#14b8a6",  # T teal
    "#eab308",  # U yellow
    "#dc2626",  # V red
    "#2563eb",  # W blue
    "#16a34a",  # X green
)


def _style_for_position(position: int) -> SchemeStyle:
    if position < 8:
        return SchemeStyle.UNDERLINE
    if position < 16:
        return SchemeStyle.DOUBLE_UNDERLINE
    return SchemeStyle.STRIKETHROUGH


SCHEME_PALETTE: Tuple[SchemeId, ...] = tuple(SchemeId)
BASIC_PALETTE: Tuple[SchemeId, ...] = SCHEME_PALETTE[:8]

SCHEME_SWATCHES: Dict[SchemeId, SchemeSwatch] = {
    scheme: SchemeSwatch(color=_SCHEME_COLORS[position], style=_style_for_position(position))
    for position, scheme in enumerate(SCHEME_PALETTE)
}

ACCENT_OPACITY: Dict[AccentTier, float] = {
    AccentTier.LOW: 0.4,
    AccentTier.MEDIUM: 0.7,
    AccentTier.HIGH: 1.0,
}


@dataclass(frozen=True)
class Token:
    """A word extracted from text with half-open character offsets."""

    word: str
    start_index: int
    end_index: int

    @property
    def syllables(self) -> int:
        return count_syllables(self.word)

    def shifted(self, offset: int) -> "Token":
        return Token(self.word, self.start_index + offset, self.end_index + offset)


@dataclass(frozen=True)
class BracketRegion:
    """A ``[start, end)`` span delimited by a bracket pair."""

    start: int
    end: int

    def overlaps(self, start: int, end: int) -> bool:
        return start < self.end and end > self.start


@dataclass(frozen=True)
class Annotation:
    """A rhyme annotation anchored to one word of the document."""

    word: str
    start_index: int
    end_index: int
    line_index: int
    scheme: SchemeId
    accent_tier: AccentTier
    is_manual: bool = False

    def with_position(self, start_index: int, end_index: int, line_index: int) -> "Annotation":
        return replace(
            self,
            start_index=start_index,
            end_index=end_index,
            line_index=line_index,
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            "word": self.word,
            "start_index": self.start_index,
            "end_index": self.end_index,
            "line_index": self.line_index,
            "scheme": self.scheme.value,
            "accent_tier": self.accent_tier.value,
            "is_manual": self.is_manual,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Annotation":
        return cls(
            word=str(payload["word"]),
            start_index=int(payload["start_index"]),
            end_index=int(payload["end_index"]),
            line_index=int(payload["line_index"]),
            scheme=SchemeId(payload["scheme"]),
            accent_tier=AccentTier(payload["accent_tier"]),
            is_manual=bool(payload.get("is_manual", False)),
        )


__all__ = [
    "ACCENT_OPACITY",
    "AccentTier",
    "Annotation",
    "BASIC_PALETTE",
    "BracketRegion",
    "SCHEME_PALETTE",
    "SCHEME_SWATCHES",
    "SchemeId",
    "SchemeStyle",
    "SchemeSwatch",
    "Token",
]
