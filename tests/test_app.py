import pytest

from dictone.app.app import DictoneApp
from dictone.app.data.database import SQLiteStateRepository
from dictone.app.services.editor_service import EditorSettings, EditorState
from dictone.app.services.result_formatter import LyricsResultFormatter
from dictone.app.ui.gradio import find_word_offset, render_state
from dictone.core.models import SchemeId


SCENARIO = "I see the light\nShining so bright"


@pytest.fixture
def app(tmp_path, editor_service):
    settings = EditorSettings(db_path=str(tmp_path / "app.db"))
    application = DictoneApp(settings, editor_service=editor_service)
    yield application
    application.repository.close()


def test_app_wires_dependencies_from_settings(app, tmp_path):
    assert isinstance(app.repository, SQLiteStateRepository)
    assert app.repository.db_path == str(tmp_path / "app.db")
    assert isinstance(app.formatter, LyricsResultFormatter)


def test_load_state_without_saved_data_starts_empty(app):
    assert app.load_state() == EditorState()


def test_load_state_reclusters_saved_auto_highlight_state(app):
    app.save_state(EditorState(text=SCENARIO, auto_highlight=True))

    state = app.load_state()

    assert [a.word for a in state.annotations] == ["light", "bright"]


def test_find_word_offset_counts_occurrences():
    text = "Love you, love me\nlove"

    assert find_word_offset(text, "love") == 0
    assert find_word_offset(text, "LOVE", 2) == 10
    assert find_word_offset(text, "love", 3) == 18
    assert find_word_offset(text, "love", 4) is None
    assert find_word_offset(text, "") is None


def test_render_state_produces_every_panel(app):
    state = app.editor_service.set_auto_highlight(app.editor_service.new_state(SCENARIO), True)

    spans, legend, counts, internal, telemetry = render_state(state, app.formatter, app.editor_service)

    assert ("light", SchemeId.A.value) in spans
    assert "light, bright" in legend
    assert "| 2 | 4 | Shining so bright |" in counts
    assert "No internal rhymes" in internal
    assert "run_auto_highlight" in telemetry
