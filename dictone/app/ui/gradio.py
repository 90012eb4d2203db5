"""User interface assembly for the Gradio front-end."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import gradio as gr

from dictone.core.lines import find_internal_rhymes
from dictone.core.models import AccentTier, SchemeId
from dictone.core.tokenizer import iter_tokens
from dictone.utils.observability import get_logger

from ..data.database import SQLiteStateRepository
from ..services.editor_service import (
    MAX_DOCUMENT_LENGTH,
    MAX_SENSITIVITY,
    MIN_SENSITIVITY,
    AnnotationError,
    EditorState,
    LyricsEditorService,
)
from ..services.result_formatter import LyricsResultFormatter


_logger = get_logger(__name__).bind(component="gradio_ui")

_ACCENT_CHOICES = ["auto"] + [tier.value for tier in AccentTier]


def _format_live_events(snapshot: Dict[str, Any]) -> str:
    """Return a markdown representation of the latest edit's telemetry."""

    if not snapshot:
        return ""

    events = snapshot.get("events") or []
    counters = snapshot.get("counters") or {}

    if not events and not counters:
        return ""

    output: List[str] = [f"#### Last pass: `{snapshot.get('name') or 'edit'}`"]

    if events:
        output.append("")
        for event in events[-8:]:
            name = str(event.get("name", "event"))
            duration = event.get("duration")
            metadata = event.get("metadata") or {}
            meta_chunks = [f"{key}={value}" for key, value in metadata.items()]
            meta_suffix = f" ({', '.join(meta_chunks)})" if meta_chunks else ""
            if isinstance(duration, (float, int)):
                output.append(f"- `{name}` took {float(duration) * 1000:.1f}ms{meta_suffix}")
            else:
                output.append(f"- `{name}`{meta_suffix}")

    if counters:
        output.append("")
        output.append("**Counters**")
        output.append(", ".join(f"`{key}`: {value:g}" for key, value in counters.items()))

    return "\n".join(output)


def find_word_offset(text: str, word: str, occurrence: int = 1) -> Optional[int]:
    """Start offset of the ``occurrence``-th (1-based) token equal to ``word``."""

    target = (word or "").strip().lower()
    if not target:
        return None
    seen = 0
    for token in iter_tokens(text):
        if token.word.lower() == target:
            seen += 1
            if seen == max(1, int(occurrence or 1)):
                return token.start_index
    return None


def render_state(
    state: EditorState,
    formatter: LyricsResultFormatter,
    service: LyricsEditorService,
) -> Tuple[List[Tuple[str, Optional[str]]], str, str, str, str]:
    """Outputs shown for ``state``: preview spans, legend, counts, internal rhymes, telemetry."""

    return (
        formatter.highlight_spans(state.text, state.annotations),
        formatter.format_legend(state.annotations),
        formatter.format_line_counts(service.line_summaries(state)),
        formatter.format_internal_rhymes(find_internal_rhymes(state.text)),
        _format_live_events(service.get_latest_telemetry()),
    )


def create_interface(
    editor_service: LyricsEditorService,
    repository: Optional[SQLiteStateRepository] = None,
    *,
    formatter: Optional[LyricsResultFormatter] = None,
    initial_state: Optional[EditorState] = None,
) -> gr.Blocks:
    """Construct the interactive Gradio Blocks UI."""

    formatter = formatter or LyricsResultFormatter()
    start_state = initial_state or editor_service.new_state()

    def _outputs(state: EditorState, status: str):
        return (state, *render_state(state, formatter, editor_service), status)

    def _persist(state: EditorState) -> None:
        if repository is None:
            return
        try:
            repository.save(state)
        except Exception as exc:
            _logger.warning("Autosave failed", context={"error": str(exc)})

    def on_text_change(text: str, state: EditorState):
        state = editor_service.set_text(state, text)
        _persist(state)
        return _outputs(state, f"{len(state.text)} / {MAX_DOCUMENT_LENGTH} characters")

    def on_auto_toggle(enabled: bool, state: EditorState):
        state = editor_service.set_auto_highlight(state, enabled)
        _persist(state)
        return _outputs(state, "Auto-highlight on" if state.auto_highlight else "Auto-highlight off")

    def on_sensitivity(value: float, state: EditorState):
        state = editor_service.set_sensitivity(state, value)
        _persist(state)
        return _outputs(state, f"Sensitivity {state.sensitivity:.2f}")

    def on_mark(word: str, occurrence: float, scheme: str, accent: str, state: EditorState):
        offset = find_word_offset(state.text, word, int(occurrence or 1))
        if offset is None:
            return _outputs(state, f"❌ '{word}' not found in the lyrics.")
        tier = None if accent == "auto" else AccentTier(accent)
        try:
            state = editor_service.add_manual_annotation(state, offset, SchemeId(scheme), tier)
        except AnnotationError as exc:
            return _outputs(state, f"❌ {exc}")
        _persist(state)
        return _outputs(state, f"Marked '{word}' as {scheme}")

    def on_unmark(word: str, occurrence: float, state: EditorState):
        offset = find_word_offset(state.text, word, int(occurrence or 1))
        if offset is None or state.annotation_at(offset) is None:
            return _outputs(state, f"❌ '{word}' has no annotation.")
        state = editor_service.remove_annotation(state, offset)
        _persist(state)
        return _outputs(state, f"Removed annotation from '{word}'")

    def on_clear(state: EditorState):
        state = editor_service.clear_annotations(state)
        _persist(state)
        return _outputs(state, "All annotations cleared")

    def on_compare(word_a: str, word_b: str) -> str:
        return formatter.format_pair(word_a, word_b)

    with gr.Blocks(title="Dictone - Lyric Rhyme Highlighter", theme=gr.themes.Soft()) as interface:
        editor_state = gr.State(start_state)

        gr.Markdown(
            "<h2>🎤 Dictone</h2>\n"
            "<p>Write lyrics and watch rhyme schemes light up as you type.</p>"
        )

        with gr.Tabs():
            with gr.Tab("Writer"):
                with gr.Row():
                    with gr.Column(scale=3):
                        lyrics_input = gr.Textbox(
                            value=start_state.text,
                            label="Lyrics",
                            placeholder="Write your bars here. [Bracketed notes] are ignored.",
                            lines=16,
                            max_length=MAX_DOCUMENT_LENGTH,
                        )
                        with gr.Row():
                            auto_toggle = gr.Checkbox(
                                value=start_state.auto_highlight,
                                label="Auto-highlight rhymes",
                            )
                            sensitivity = gr.Slider(
                                minimum=MIN_SENSITIVITY,
                                maximum=MAX_SENSITIVITY,
                                value=start_state.sensitivity,
                                step=0.25,
                                label="Sensitivity",
                                info="Minimum rhyme score (out of 5) for words to share a scheme.",
                            )
                        status_md = gr.Markdown(value="Ready.")
                        preview = gr.HighlightedText(
                            label="Rhyme schemes",
                            combine_adjacent=False,
                            show_legend=True,
                            color_map=formatter.color_map(editor_service.palette),
                        )

                    with gr.Column(scale=2):
                        with gr.Accordion("Mark a word", open=True):
                            mark_word = gr.Textbox(label="Word", lines=1)
                            mark_occurrence = gr.Number(value=1, precision=0, label="Occurrence")
                            mark_scheme = gr.Dropdown(
                                choices=[scheme.value for scheme in editor_service.palette],
                                value=start_state.selected_scheme.value,
                                label="Scheme",
                            )
                            mark_accent = gr.Radio(choices=_ACCENT_CHOICES, value="auto", label="Accent")
                            with gr.Row():
                                mark_btn = gr.Button("Mark", variant="primary")
                                unmark_btn = gr.Button("Unmark")
                                clear_btn = gr.Button("Clear all")
                        legend_md = gr.Markdown()
                        lines_md = gr.Markdown()
                        internal_md = gr.Markdown()
                        telemetry_md = gr.Markdown()

            with gr.Tab("Compare words"):
                with gr.Row():
                    word_a = gr.Textbox(label="First word", lines=1)
                    word_b = gr.Textbox(label="Second word", lines=1)
                compare_btn = gr.Button("Score pair", variant="primary")
                compare_md = gr.Markdown()

        outputs = [editor_state, preview, legend_md, lines_md, internal_md, telemetry_md, status_md]

        lyrics_input.change(on_text_change, [lyrics_input, editor_state], outputs)
        auto_toggle.change(on_auto_toggle, [auto_toggle, editor_state], outputs)
        sensitivity.release(on_sensitivity, [sensitivity, editor_state], outputs)
        mark_btn.click(
            on_mark,
            [mark_word, mark_occurrence, mark_scheme, mark_accent, editor_state],
            outputs,
        )
        unmark_btn.click(on_unmark, [mark_word, mark_occurrence, editor_state], outputs)
        clear_btn.click(on_clear, [editor_state], outputs)
        compare_btn.click(on_compare, [word_a, word_b], [compare_md])
        word_b.submit(on_compare, [word_a, word_b], [compare_md])

        interface.load(lambda state: _outputs(state, "Ready."), [editor_state], outputs)

    return interface


__all__ = ["create_interface", "find_word_offset", "render_state"]
