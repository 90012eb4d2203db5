"""Editor state and the service that applies edits to it.

The engine functions are pure, so everything the editor needs between calls
lives in an immutable :class:`EditorState`. :class:`LyricsEditorService`
takes a state and an edit and returns the next state: on a text change it
first reconciles the existing annotations against the new text and then,
when automatic highlighting is on, reclusters the document from the
surviving manual annotations.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Sequence, Tuple

from dictone.core.clustering import detect_rhyme_schemes
from dictone.core.lines import LineSummary, annotate_lines, suggest_accent_tier
from dictone.core.models import SCHEME_PALETTE, AccentTier, Annotation, SchemeId
from dictone.core.reconciler import reconcile_annotations
from dictone.core.tokenizer import iter_document_tokens
from dictone.utils.observability import (
    add_span_attributes,
    create_counter,
    create_histogram,
    get_logger,
    record_exception,
    start_span,
)
from dictone.utils.telemetry import StructuredTelemetry


MAX_DOCUMENT_LENGTH = 5000
DEFAULT_SENSITIVITY = 2.0
MIN_SENSITIVITY = 1.0
MAX_SENSITIVITY = 5.0
DEFAULT_DB_PATH = "dictone.db"


class AnnotationError(ValueError):
    """Raised when an annotation edit does not fit the current text."""


def clamp_sensitivity(value: Any) -> float:
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return DEFAULT_SENSITIVITY
    return min(MAX_SENSITIVITY, max(MIN_SENSITIVITY, numeric))


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class EditorSettings:
    """Runtime configuration read from ``DICTONE_*`` environment variables."""

    db_path: str = DEFAULT_DB_PATH
    share: bool = False
    sensitivity: float = DEFAULT_SENSITIVITY
    log_level: Optional[str] = None

    @classmethod
    def from_env(cls) -> "EditorSettings":
        return cls(
            db_path=os.environ.get("DICTONE_DB_PATH") or DEFAULT_DB_PATH,
            share=_env_flag("DICTONE_SHARE"),
            sensitivity=clamp_sensitivity(
                os.environ.get("DICTONE_SENSITIVITY", DEFAULT_SENSITIVITY)
            ),
            log_level=os.environ.get("DICTONE_LOG_LEVEL") or None,
        )


@dataclass(frozen=True)
class EditorState:
    """Everything the editor remembers between two calls."""

    text: str = ""
    annotations: Tuple[Annotation, ...] = field(default_factory=tuple)
    auto_highlight: bool = False
    sensitivity: float = DEFAULT_SENSITIVITY
    selected_scheme: SchemeId = SchemeId.A
    selected_accent: Optional[AccentTier] = None

    @property
    def manual_annotations(self) -> List[Annotation]:
        return [annotation for annotation in self.annotations if annotation.is_manual]

    @property
    def automatic_annotations(self) -> List[Annotation]:
        return [annotation for annotation in self.annotations if not annotation.is_manual]

    def annotation_at(self, start_index: int) -> Optional[Annotation]:
        for annotation in self.annotations:
            if annotation.start_index == start_index:
                return annotation
        return None


class LyricsEditorService:
    """Apply edits to an :class:`EditorState` and keep annotations in step."""

    def __init__(
        self,
        *,
        palette: Sequence[SchemeId] = SCHEME_PALETTE,
        telemetry: Optional[StructuredTelemetry] = None,
        default_sensitivity: float = DEFAULT_SENSITIVITY,
    ) -> None:
        self.palette: Tuple[SchemeId, ...] = tuple(palette)
        self.telemetry = telemetry or StructuredTelemetry()
        self.default_sensitivity = clamp_sensitivity(default_sensitivity)
        self._latest_trace: Dict[str, Any] = {}

        self._logger = get_logger(__name__).bind(component="lyrics_editor_service")

        self._metric_edits = create_counter(
            "dictone_text_edits_total",
            "Text edits applied by the editor service.",
        )
        self._metric_edit_failures = create_counter(
            "dictone_text_edit_failures_total",
            "Text edits that raised an exception.",
        )
        self._metric_edit_duration = create_histogram(
            "dictone_text_edit_seconds",
            "Latency of reconciling and reclustering one text edit.",
        )
        self._metric_dropped = create_counter(
            "dictone_annotations_dropped_total",
            "Annotations dropped because their word left the text.",
            label_names=("kind",),
        )

        self._logger.info(
            "Lyrics editor service initialised",
            context={
                "palette_size": len(self.palette),
                "default_sensitivity": self.default_sensitivity,
                "max_document_length": MAX_DOCUMENT_LENGTH,
            },
        )

    def new_state(self, text: str = "", *, auto_highlight: bool = False) -> EditorState:
        state = EditorState(
            text=(text or "")[:MAX_DOCUMENT_LENGTH],
            auto_highlight=auto_highlight,
            sensitivity=self.default_sensitivity,
        )
        if auto_highlight:
            return self.run_auto_highlight(state)
        return state

    def get_latest_telemetry(self) -> Dict[str, Any]:
        return dict(self._latest_trace)

    def set_text(self, state: EditorState, text: str) -> EditorState:
        """Replace the document text and carry the annotations across.

        Text beyond :data:`MAX_DOCUMENT_LENGTH` characters is cut off.
        """

        new_text = (text or "")[:MAX_DOCUMENT_LENGTH]
        if new_text == state.text:
            return state

        telemetry = self.telemetry
        edit_context = {
            "old_length": len(state.text),
            "new_length": len(new_text),
            "auto_highlight": state.auto_highlight,
        }
        if len(text or "") > MAX_DOCUMENT_LENGTH:
            edit_context["truncated_from"] = len(text)
            self._logger.warning("Document truncated to length limit", context=edit_context)

        telemetry.start_trace("set_text")
        telemetry.annotate("input.old_length", len(state.text))
        telemetry.annotate("input.new_length", len(new_text))
        self._metric_edits.inc()

        with start_span("editor.set_text", edit_context) as span:
            try:
                with self._metric_edit_duration.time():
                    with telemetry.timer("reconcile") as details:
                        annotations = reconcile_annotations(state.text, new_text, state.annotations)
                        details["kept"] = len(annotations)
                        details["dropped"] = len(state.annotations) - len(annotations)

                    self._record_dropped(state.annotations, annotations)
                    next_state = replace(state, text=new_text, annotations=tuple(annotations))

                    if next_state.auto_highlight:
                        next_state = self._recluster(next_state)
            except Exception as exc:
                self._metric_edit_failures.inc()
                failure_context = dict(edit_context)
                failure_context["error"] = str(exc)
                self._logger.error("Text edit failed", context=failure_context)
                record_exception(span, exc)
                telemetry.increment("edit.failed")
                self._latest_trace = telemetry.snapshot()
                raise

            add_span_attributes(span, {"annotations.total": len(next_state.annotations)})

        telemetry.increment("edit.completed")
        self._latest_trace = telemetry.snapshot()
        self._logger.debug(
            "Text edit applied",
            context={"annotations": len(next_state.annotations), **edit_context},
        )
        return next_state

    def _record_dropped(
        self,
        before: Sequence[Annotation],
        after: Sequence[Annotation],
    ) -> None:
        dropped_manual = sum(1 for a in before if a.is_manual) - sum(1 for a in after if a.is_manual)
        dropped_auto = (len(before) - len(after)) - dropped_manual
        if dropped_manual:
            self._metric_dropped.labels(kind="manual").inc(dropped_manual)
            self.telemetry.increment("annotations.dropped.manual", dropped_manual)
        if dropped_auto:
            self._metric_dropped.labels(kind="automatic").inc(dropped_auto)
            self.telemetry.increment("annotations.dropped.automatic", dropped_auto)

    def _recluster(self, state: EditorState) -> EditorState:
        with self.telemetry.timer("cluster") as details:
            annotations = detect_rhyme_schemes(
                state.text,
                state.manual_annotations,
                state.sensitivity,
                palette=self.palette,
            )
            details["annotations"] = len(annotations)
        return replace(state, annotations=tuple(annotations))

    def run_auto_highlight(self, state: EditorState) -> EditorState:
        """Recompute the automatic annotations of ``state`` from scratch."""

        self.telemetry.start_trace("run_auto_highlight")
        next_state = self._recluster(state)
        self._latest_trace = self.telemetry.snapshot()
        return next_state

    def set_auto_highlight(self, state: EditorState, enabled: bool) -> EditorState:
        """Toggle automatic highlighting; switching it on reclusters at once.

        Switching it off leaves the current automatic annotations in place.
        """

        next_state = replace(state, auto_highlight=bool(enabled))
        if next_state.auto_highlight:
            return self.run_auto_highlight(next_state)
        return next_state

    def set_sensitivity(self, state: EditorState, value: float) -> EditorState:
        next_state = replace(state, sensitivity=clamp_sensitivity(value))
        if next_state.auto_highlight and next_state.sensitivity != state.sensitivity:
            return self.run_auto_highlight(next_state)
        return next_state

    def select_scheme(self, state: EditorState, scheme: SchemeId) -> EditorState:
        return replace(state, selected_scheme=SchemeId(scheme))

    def select_accent(self, state: EditorState, accent_tier: Optional[AccentTier]) -> EditorState:
        tier = AccentTier(accent_tier) if accent_tier is not None else None
        return replace(state, selected_accent=tier)

    def add_manual_annotation(
        self,
        state: EditorState,
        start_index: int,
        scheme: Optional[SchemeId] = None,
        accent_tier: Optional[AccentTier] = None,
    ) -> EditorState:
        """Pin a manual annotation on the word starting at ``start_index``.

        The scheme defaults to the state's selected scheme. The accent
        defaults to the selected accent, or failing that to a tier derived
        from the word's syllable count. Any annotation already at that
        offset is replaced.
        """

        for token, line_index in iter_document_tokens(state.text):
            if token.start_index == start_index:
                break
        else:
            raise AnnotationError(f"No word starts at offset {start_index}")

        tier = accent_tier or state.selected_accent or suggest_accent_tier(token.word)
        annotation = Annotation(
            word=token.word,
            start_index=token.start_index,
            end_index=token.end_index,
            line_index=line_index,
            scheme=SchemeId(scheme or state.selected_scheme),
            accent_tier=AccentTier(tier),
            is_manual=True,
        )
        remaining = tuple(a for a in state.annotations if a.start_index != start_index)
        self._logger.debug(
            "Manual annotation added",
            context={"word": token.word, "start_index": start_index, "scheme": annotation.scheme.value},
        )
        return replace(state, annotations=remaining + (annotation,))

    def remove_annotation(self, state: EditorState, start_index: int) -> EditorState:
        remaining = tuple(a for a in state.annotations if a.start_index != start_index)
        return replace(state, annotations=remaining)

    def update_annotation(
        self,
        state: EditorState,
        start_index: int,
        scheme: Optional[SchemeId] = None,
        accent_tier: Optional[AccentTier] = None,
    ) -> EditorState:
        """Change the scheme and/or accent of the annotation at ``start_index``.

        Offsets without an annotation leave the state unchanged.
        """

        updated = []
        for annotation in state.annotations:
            if annotation.start_index == start_index:
                annotation = replace(
                    annotation,
                    scheme=SchemeId(scheme) if scheme is not None else annotation.scheme,
                    accent_tier=(
                        AccentTier(accent_tier) if accent_tier is not None else annotation.accent_tier
                    ),
                )
            updated.append(annotation)
        return replace(state, annotations=tuple(updated))

    def clear_annotations(self, state: EditorState) -> EditorState:
        return replace(state, annotations=())

    def line_summaries(self, state: EditorState) -> List[LineSummary]:
        return annotate_lines(state.text)


__all__ = [
    "AnnotationError",
    "DEFAULT_SENSITIVITY",
    "EditorSettings",
    "EditorState",
    "LyricsEditorService",
    "MAX_DOCUMENT_LENGTH",
    "clamp_sensitivity",
]
