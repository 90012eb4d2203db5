"""Application wiring for the Dictone project."""

from __future__ import annotations

from typing import Optional

if __package__ in {None, ""}:
    import sys
    from pathlib import Path

    repo_root = Path(__file__).resolve().parents[2]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))

from dictone.core.models import SCHEME_PALETTE
from dictone.utils.logging_config import configure_logging
from dictone.utils.observability import get_logger
from dictone.utils.telemetry import StructuredTelemetry, TelemetryLogger

from dictone.app.data.database import STORAGE_NAME, SQLiteStateRepository
from dictone.app.services.editor_service import EditorSettings, EditorState, LyricsEditorService
from dictone.app.services.result_formatter import LyricsResultFormatter
from dictone.app.ui.gradio import create_interface


class DictoneApp:
    """High-level application facade bundling dependencies."""

    def __init__(
        self,
        settings: Optional[EditorSettings] = None,
        *,
        repository: Optional[SQLiteStateRepository] = None,
        editor_service: Optional[LyricsEditorService] = None,
        formatter: Optional[LyricsResultFormatter] = None,
    ) -> None:
        self.settings = settings or EditorSettings.from_env()
        self._logger = get_logger(__name__).bind(component="app_facade")
        self._logger.info(
            "Initialising application facade",
            context={"db_path": self.settings.db_path, "sensitivity": self.settings.sensitivity},
        )

        self.repository = repository or SQLiteStateRepository(self.settings.db_path)

        if editor_service is None:
            telemetry = StructuredTelemetry(listeners=[TelemetryLogger()])
            editor_service = LyricsEditorService(
                palette=SCHEME_PALETTE,
                telemetry=telemetry,
                default_sensitivity=self.settings.sensitivity,
            )
        self.editor_service = editor_service
        self.formatter = formatter or LyricsResultFormatter()

        self._logger.info(
            "Application dependencies wired",
            context={"repository": type(self.repository).__name__},
        )

    # Public API ------------------------------------------------------------
    def load_state(self, name: str = STORAGE_NAME) -> EditorState:
        """Return the saved editor state, or a fresh one if none is stored."""

        try:
            state = self.repository.load(name)
        except Exception as exc:
            self._logger.error(
                "Loading saved state failed",
                context={"name": name, "error": str(exc)},
            )
            raise

        if state is None:
            self._logger.info("No saved state; starting empty", context={"name": name})
            return self.editor_service.new_state()

        self._logger.info(
            "Saved state restored",
            context={"name": name, "text_length": len(state.text), "annotations": len(state.annotations)},
        )
        if state.auto_highlight:
            return self.editor_service.run_auto_highlight(state)
        return state

    def save_state(self, state: EditorState, name: str = STORAGE_NAME) -> None:
        self.repository.save(state, name)

    def create_gradio_interface(self):
        return create_interface(
            self.editor_service,
            self.repository,
            formatter=self.formatter,
            initial_state=self.load_state(),
        )


def main() -> None:
    settings = EditorSettings.from_env()
    configure_logging(settings.log_level)
    app = DictoneApp(settings)
    interface = app.create_gradio_interface()
    interface.launch(
        server_name="0.0.0.0",
        server_port=7860,
        share=app.settings.share,
    )


__all__ = ["DictoneApp", "main"]
