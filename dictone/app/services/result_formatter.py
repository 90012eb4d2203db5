"""Result formatting helpers for annotated lyrics."""

from __future__ import annotations

from collections import OrderedDict
from html import escape
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from dictone.core.lines import InternalRhyme, LineSummary
from dictone.core.models import Annotation, SchemeId, SchemeStyle
from dictone.core.scorer import explain_pair


_TEXT_DECORATION: Dict[SchemeStyle, str] = {
    SchemeStyle.UNDERLINE: "underline",
    SchemeStyle.DOUBLE_UNDERLINE: "underline double",
    SchemeStyle.STRIKETHROUGH: "line-through",
}


_RULE_LABELS: Dict[str, str] = {
    "same_word": "Same word",
    "too_short": "Too short to compare",
    "identical_tail": "Perfect rhyme",
    "same_vowel_same_consonants": "Perfect rhyme",
    "consonant_suffix_close": "Near-perfect rhyme",
    "consonant_suffix": "Strong rhyme",
    "shared_final_consonant": "Slant rhyme (shared final consonant)",
    "near_final_consonant": "Slant rhyme (voiced/unvoiced pair)",
    "vowel_only": "Assonance",
    "assonance_same_consonants": "Loose assonance",
    "assonance_final_consonant": "Weak assonance",
    "spelling_suffix_3": "Eye rhyme",
    "spelling_suffix_2": "Weak eye rhyme",
    "no_match": "No rhyme",
}


def _ordered(annotations: Iterable[Annotation]) -> List[Annotation]:
    return sorted(annotations, key=lambda annotation: (annotation.start_index, annotation.end_index))


def _segments(
    text: str,
    annotations: Sequence[Annotation],
) -> Iterator[Tuple[str, Optional[Annotation]]]:
    # Stale spans and spans overlapping an earlier one are skipped. Words match
    # case-insensitively, as in the reconciler.
    cursor = 0
    for annotation in _ordered(annotations):
        start, end = annotation.start_index, annotation.end_index
        if start < cursor or end > len(text) or text[start:end].lower() != annotation.word.lower():
            continue
        if start > cursor:
            yield text[cursor:start], None
        yield text[start:end], annotation
        cursor = end
    if cursor < len(text):
        yield text[cursor:], None


class LyricsResultFormatter:
    """Render annotations as highlight spans, HTML, and markdown summaries."""

    def highlight_spans(
        self,
        text: str,
        annotations: Sequence[Annotation],
    ) -> List[Tuple[str, Optional[str]]]:
        """Split ``text`` into ``(segment, scheme)`` pairs for ``gr.HighlightedText``.

        Unannotated stretches carry ``None``. Annotations whose span no
        longer matches the text, or that overlap an earlier one, are skipped.
        """

        return [
            (segment, annotation.scheme.value if annotation is not None else None)
            for segment, annotation in _segments(text, annotations)
        ]

    def color_map(self, schemes: Optional[Iterable[SchemeId]] = None) -> Dict[str, str]:
        selected = list(schemes) if schemes is not None else list(SchemeId)
        return {scheme.value: scheme.swatch.color for scheme in selected}

    def render_html(self, text: str, annotations: Sequence[Annotation]) -> str:
        """Render ``text`` as HTML with each annotated word styled by scheme."""

        parts: List[str] = []
        for segment, annotation in _segments(text, annotations):
            if annotation is None:
                parts.append(escape(segment).replace("\n", "<br>"))
            else:
                parts.append(self.style_annotation(annotation, segment))
        return f'<div class="dictone-lyrics">{"".join(parts)}</div>'

    def style_annotation(self, annotation: Annotation, segment: Optional[str] = None) -> str:
        """Wrap ``segment`` (the annotated text, ``annotation.word`` by default) in a styled span."""

        swatch = annotation.scheme.swatch
        style = "; ".join(
            (
                f"color: {swatch.color}",
                f"background: {swatch.background}",
                f"text-decoration: {_TEXT_DECORATION[swatch.style]}",
                f"opacity: {annotation.accent_tier.opacity}",
            )
        )
        marker = " data-manual=\"true\"" if annotation.is_manual else ""
        return (
            f'<span class="scheme-{annotation.scheme.value}" style="{style}"{marker}>'
            f"{escape(annotation.word if segment is None else segment)}</span>"
        )

    def format_legend(self, annotations: Sequence[Annotation]) -> str:
        """Markdown list of schemes in use and the words assigned to each."""

        if not annotations:
            return "No rhyme schemes yet. Turn on auto-highlight or mark words by hand."

        grouped: "OrderedDict[SchemeId, List[Annotation]]" = OrderedDict()
        for annotation in sorted(annotations, key=lambda a: list(SchemeId).index(a.scheme)):
            grouped.setdefault(annotation.scheme, []).append(annotation)

        lines = ["### Rhyme schemes"]
        for scheme, members in grouped.items():
            words = ", ".join(
                f"{member.word}{'*' if member.is_manual else ''}" for member in _ordered(members)
            )
            lines.append(f"- **{scheme.value}** ({scheme.swatch.style.value}): {words}")
        if any(annotation.is_manual for annotation in annotations):
            lines.append("")
            lines.append("_* marked by hand_")
        return "\n".join(lines)

    def format_line_counts(self, summaries: Sequence[LineSummary]) -> str:
        """Markdown table of per-line syllable totals."""

        rows = ["| Line | Syllables | Text |", "| ---: | ---: | --- |"]
        for summary in summaries:
            if not summary.text.strip():
                continue
            text = summary.text.replace("|", "\\|")
            rows.append(f"| {summary.line_index + 1} | {summary.syllable_count} | {text} |")
        if len(rows) == 2:
            return "_Start writing to see syllable counts._"
        return "\n".join(rows)

    def format_internal_rhymes(self, pairs: Sequence[InternalRhyme]) -> str:
        if not pairs:
            return "_No internal rhymes found._"
        lines = ["### Internal rhymes"]
        for pair in pairs:
            lines.append(
                f"- Line {pair.line_index + 1}: **{pair.first.word}** / "
                f"**{pair.second.word}** ({pair.score:.2f})"
            )
        return "\n".join(lines)

    def format_pair(self, word_a: str, word_b: str) -> str:
        """Explain how two words were scored."""

        if not (word_a or "").strip() or not (word_b or "").strip():
            return "❌ Enter two words to compare."

        result = explain_pair(word_a, word_b)
        label = _RULE_LABELS.get(result.rule, result.rule.replace("_", " ").title())
        lines = [
            f"### {word_a.strip()} / {word_b.strip()}",
            f"- Score: **{result.score:.2f}** / 5 ({label})",
            f"- Strength: {result.strength:.0%}",
        ]
        if result.tail_a or result.tail_b:
            lines.append(f"- Sound endings: `{result.tail_a}` / `{result.tail_b}`")
        return "\n".join(lines)


__all__ = ["LyricsResultFormatter"]
