"""SQLite persistence for the lyric editor state."""

from __future__ import annotations

import json
import os
import queue
import sqlite3
import threading
from contextlib import contextmanager
from typing import Any, Dict, Generator, List, Optional, Tuple

from dictone.core.models import Annotation
from dictone.utils.observability import get_logger

from ..services.editor_service import DEFAULT_SENSITIVITY, MAX_DOCUMENT_LENGTH, EditorState


STORAGE_NAME = "dictone-storage"


def _ensure_parent_directory(path: str) -> None:
    directory = os.path.dirname(os.path.abspath(path))
    if directory and not os.path.exists(directory):
        os.makedirs(directory, exist_ok=True)


def serialize_state(state: EditorState) -> str:
    payload: Dict[str, Any] = {
        "text": state.text,
        "annotations": [annotation.as_dict() for annotation in state.annotations],
        "auto_highlight": state.auto_highlight,
        "sensitivity": state.sensitivity,
    }
    return json.dumps(payload, sort_keys=True)


def deserialize_state(raw: str) -> EditorState:
    """Rebuild an :class:`EditorState` from its stored JSON payload.

    Text longer than :data:`MAX_DOCUMENT_LENGTH` is cut down to the limit and
    every stored annotation is discarded. Malformed payloads raise
    ``ValueError``.
    """

    state, _ = _decode_state(raw)
    return state


def _decode_state(raw: str) -> Tuple[EditorState, bool]:
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Stored editor state is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ValueError("Stored editor state must be a JSON object")

    text = str(payload.get("text") or "")
    annotations: List[Annotation] = []
    truncated = len(text) > MAX_DOCUMENT_LENGTH
    if truncated:
        text = text[:MAX_DOCUMENT_LENGTH]
    else:
        try:
            annotations = [Annotation.from_dict(entry) for entry in payload.get("annotations") or ()]
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"Stored annotation is malformed: {exc}") from exc

    try:
        sensitivity = float(payload.get("sensitivity", DEFAULT_SENSITIVITY))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Stored sensitivity is malformed: {exc}") from exc

    state = EditorState(
        text=text,
        annotations=tuple(annotations),
        auto_highlight=bool(payload.get("auto_highlight", False)),
        sensitivity=sensitivity,
    )
    return state, truncated


class SQLiteStateRepository:
    """Repository encapsulating all SQLite access for saved editor state."""

    def __init__(
        self,
        db_path: str,
        *,
        pool_size: int = 4,
        pool_timeout: float = 5.0,
    ) -> None:
        self.db_path = db_path
        self._pool_size = max(1, int(pool_size))
        self._pool_timeout = max(0.0, float(pool_timeout))
        self._pool: queue.Queue = queue.Queue(maxsize=self._pool_size)
        self._pool_semaphore = threading.BoundedSemaphore(self._pool_size)
        self._schema_lock = threading.Lock()
        self._schema_ready = False
        self._logger = get_logger(__name__).bind(
            component="sqlite_state_repository",
            db_path=db_path,
        )
        self._logger.info(
            "SQLite repository initialised",
            context={"pool_size": self._pool_size, "pool_timeout": self._pool_timeout},
        )

    def _create_connection(self) -> sqlite3.Connection:
        _ensure_parent_directory(self.db_path)
        connection = sqlite3.connect(self.db_path, check_same_thread=False)
        try:
            connection.execute("PRAGMA journal_mode=WAL")
        except sqlite3.Error as exc:
            self._logger.warning(
                "SQLite WAL mode unavailable",
                context={"error": str(exc)},
            )
        return connection

    def _acquire_connection(self) -> sqlite3.Connection:
        if not self._pool_semaphore.acquire(timeout=self._pool_timeout or None):
            self._logger.error(
                "Database connection pool exhausted",
                context={"pool_size": self._pool_size, "timeout": self._pool_timeout},
            )
            raise TimeoutError("Database connection pool exhausted")

        try:
            connection = self._pool.get_nowait()
        except queue.Empty:
            connection = self._create_connection()

        return connection

    def _release_connection(self, connection: sqlite3.Connection) -> None:
        try:
            self._pool.put_nowait(connection)
        except queue.Full:
            connection.close()
        finally:
            self._pool_semaphore.release()

    @contextmanager
    def _connect(self) -> Generator[sqlite3.Connection, None, None]:
        connection = self._acquire_connection()
        try:
            self._ensure_schema(connection)
            yield connection
            if connection.in_transaction:
                connection.commit()
        except Exception as exc:
            if connection.in_transaction:
                connection.rollback()
            self._logger.error(
                "SQLite operation failed",
                context={"error": str(exc)},
            )
            raise
        finally:
            self._release_connection(connection)

    def _ensure_schema(self, connection: sqlite3.Connection) -> None:
        with self._schema_lock:
            if self._schema_ready:
                return
            connection.execute(
                """
                CREATE TABLE IF NOT EXISTS editor_state (
                    name TEXT PRIMARY KEY,
                    payload TEXT NOT NULL,
                    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
                )
                """
            )
            connection.commit()
            self._schema_ready = True

    def save(self, state: EditorState, name: str = STORAGE_NAME) -> None:
        """Store ``state`` under ``name``, replacing any earlier copy."""

        payload = serialize_state(state)
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO editor_state (name, payload, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(name) DO UPDATE SET
                    payload = excluded.payload,
                    updated_at = excluded.updated_at
                """,
                (name, payload),
            )
        self._logger.debug(
            "Editor state saved",
            context={
                "name": name,
                "text_length": len(state.text),
                "annotations": len(state.annotations),
            },
        )

    def load(self, name: str = STORAGE_NAME) -> Optional[EditorState]:
        """Return the state stored under ``name``, or ``None``.

        A payload that cannot be decoded is logged and treated as missing.
        """

        with self._connect() as conn:
            row = conn.execute(
                "SELECT payload FROM editor_state WHERE name = ?",
                (name,),
            ).fetchone()

        if row is None:
            return None

        try:
            state, truncated = _decode_state(row[0])
        except ValueError as exc:
            self._logger.warning(
                "Ignoring unreadable editor state",
                context={"name": name, "error": str(exc)},
            )
            return None

        if truncated:
            self._logger.warning(
                "Stored text exceeded the length limit; annotations discarded",
                context={"name": name, "max_length": MAX_DOCUMENT_LENGTH},
            )
        return state

    def delete(self, name: str = STORAGE_NAME) -> bool:
        """Remove the state stored under ``name``; report whether one existed."""

        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM editor_state WHERE name = ?", (name,))
            removed = cursor.rowcount > 0
        self._logger.info("Editor state deleted", context={"name": name, "removed": removed})
        return removed

    def list_names(self) -> List[str]:
        with self._connect() as conn:
            rows = conn.execute("SELECT name FROM editor_state ORDER BY name").fetchall()
        return [str(row[0]) for row in rows]

    def close(self) -> None:
        """Close every pooled connection."""

        while True:
            try:
                connection = self._pool.get_nowait()
            except queue.Empty:
                break
            connection.close()


__all__ = [
    "STORAGE_NAME",
    "SQLiteStateRepository",
    "deserialize_state",
    "serialize_state",
]
