import json
import logging
import sqlite3

import pytest

from dictone.app.data.database import (
    STORAGE_NAME,
    SQLiteStateRepository,
    deserialize_state,
    serialize_state,
)
from dictone.app.services.editor_service import MAX_DOCUMENT_LENGTH, EditorState
from dictone.core.models import AccentTier, Annotation, SchemeId


@pytest.fixture
def repository(tmp_path):
    repo = SQLiteStateRepository(str(tmp_path / "nested" / "dictone.db"))
    yield repo
    repo.close()


def _state():
    return EditorState(
        text="love you",
        annotations=(Annotation("love", 0, 4, 0, SchemeId.B, AccentTier.HIGH, is_manual=True),),
        auto_highlight=True,
        sensitivity=3.5,
    )


def test_save_and_load_round_trip(repository):
    repository.save(_state())

    assert repository.load() == _state()
    assert repository.list_names() == [STORAGE_NAME]


def test_load_missing_state_returns_none(repository):
    assert repository.load("nothing-here") is None


def test_save_overwrites_previous_state(repository):
    repository.save(_state())
    repository.save(EditorState(text="fresh"))

    assert repository.load().text == "fresh"
    assert repository.load().annotations == ()


def test_delete_reports_whether_state_existed(repository):
    repository.save(_state(), name="draft")

    assert repository.delete("draft") is True
    assert repository.delete("draft") is False
    assert repository.load("draft") is None


def test_oversized_text_is_truncated_and_annotations_discarded(repository, caplog):
    oversized = EditorState(text="word " * 1200, annotations=_state().annotations)
    repository.save(oversized)

    caplog.set_level(logging.WARNING, logger="dictone.app.data.database")
    loaded = repository.load()

    assert len(loaded.text) == MAX_DOCUMENT_LENGTH
    assert loaded.annotations == ()
    assert any("length limit" in record.getMessage() for record in caplog.records)


def test_corrupt_payload_is_logged_and_ignored(repository, caplog):
    repository.save(_state())
    with sqlite3.connect(repository.db_path) as conn:
        conn.execute("UPDATE editor_state SET payload = ? WHERE name = ?", ("{not json", STORAGE_NAME))

    caplog.set_level(logging.WARNING, logger="dictone.app.data.database")

    assert repository.load() is None
    assert any("unreadable editor state" in record.getMessage() for record in caplog.records)


def test_serialized_payload_is_plain_json():
    payload = json.loads(serialize_state(_state()))

    assert payload["text"] == "love you"
    assert payload["annotations"][0]["scheme"] == "B"
    assert payload["auto_highlight"] is True
    assert payload["sensitivity"] == 3.5


def test_deserialize_rejects_malformed_annotations():
    raw = json.dumps({"text": "love", "annotations": [{"word": "love"}]})

    with pytest.raises(ValueError):
        deserialize_state(raw)

    with pytest.raises(ValueError):
        deserialize_state("[]")
