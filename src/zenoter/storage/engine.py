"""Storage engine: owns the database connection, migrations and note CRUD."""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Callable, Mapping
from functools import wraps
from pathlib import Path
from typing import Any, TypeVar

from zenoter.core.errors import InitializationError, NotInitializedError, OperationError
from zenoter.core.notes import Note
from zenoter.core.settings import Settings, db_path
from zenoter.storage import db
from zenoter.storage.repos import notes as notes_repo
from zenoter.utils.time import utc_iso_after

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _requires_connection(method: Callable[..., T]) -> Callable[..., T]:
    @wraps(method)
    def wrapper(self: StorageEngine, *args: Any, **kwargs: Any) -> T:
        if self._conn is None:
            raise NotInitializedError(
                "Database not initialized: "
                f"call initialize() before {method.__name__}()"
            )
        try:
            return method(self, *args, **kwargs)
        except sqlite3.Error as exc:
            raise OperationError(str(exc)) from exc

    return wrapper


class StorageEngine:
    """Durable note storage with versioned schema migrations.

    All statements bind user text through placeholders. Only ``title`` and
    ``content`` can be patched; any other key in an update patch is ignored.
    """

    def __init__(self, path: Path, migrations_dir: Path | None = None) -> None:
        self._path = path
        self._migrations_dir = migrations_dir or db.MIGRATIONS_DIR
        self._conn: sqlite3.Connection | None = None
        self._last_ts = ""

    @property
    def db_path(self) -> Path:
        return self._path

    @property
    def is_initialized(self) -> bool:
        return self._conn is not None

    def initialize(self) -> None:
        if self._conn is not None:
            return
        try:
            migrations = db.load_migrations(self._migrations_dir)
        except (OSError, ValueError) as exc:
            raise InitializationError(f"Cannot load migrations: {exc}") from exc
        try:
            conn = db.connect(self._path)
        except (OSError, sqlite3.Error) as exc:
            raise InitializationError(
                f"Cannot open database at {self._path}: {exc}"
            ) from exc
        try:
            applied = db.run_migrations(conn, migrations)
        except (sqlite3.Error, ValueError) as exc:
            conn.close()
            raise InitializationError(f"Migration failed: {exc}") from exc
        self._conn = conn
        logger.info(
            "Database initialized at %s (schema v%d, applied %s)",
            self._path,
            db.current_version(conn),
            applied or "none",
        )

    def close(self) -> None:
        global _engine
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.info("Database connection closed")
        if _engine is self:
            _engine = None

    def _next_ts(self, floor: str = "") -> str:
        # Write timestamps strictly increase within this engine.
        ts = utc_iso_after(max(self._last_ts, floor))
        self._last_ts = ts
        return ts

    @_requires_connection
    def schema_version(self) -> int:
        return db.current_version(self._conn)

    @_requires_connection
    def applied_migrations(self) -> list[db.MigrationRecord]:
        return db.applied_migrations(self._conn)

    @_requires_connection
    def create_note(self, content: str, title: str | None = None) -> Note:
        if title is None:
            title = ""
        _check_text("content", content)
        _check_text("title", title)
        note = notes_repo.add_note(self._conn, title, content, self._next_ts())
        logger.debug("Created note %s (content_len=%d)", note.id, len(content))
        return note

    @_requires_connection
    def get_note_by_id(self, note_id: int) -> Note | None:
        return notes_repo.get_note(self._conn, note_id)

    @_requires_connection
    def get_all_notes(self) -> list[Note]:
        return notes_repo.list_notes(self._conn)

    @_requires_connection
    def update_note(self, note_id: int, patch: Mapping[str, Any]) -> Note | None:
        if not isinstance(patch, Mapping):
            raise OperationError("patch must be a mapping of field names to values")
        current = notes_repo.get_note(self._conn, note_id)
        if current is None:
            return None
        changes = {}
        for field in notes_repo.PATCHABLE_FIELDS:
            value = patch.get(field)
            if value is None:
                continue
            _check_text(field, value)
            changes[field] = value
        if not changes:
            return current
        notes_repo.update_note(
            self._conn, note_id, changes, self._next_ts(current.updated_at)
        )
        return notes_repo.get_note(self._conn, note_id)

    @_requires_connection
    def delete_note(self, note_id: int) -> bool:
        return notes_repo.delete_note(self._conn, note_id)

    @_requires_connection
    def search_notes(self, query: str) -> list[Note]:
        _check_text("query", query)
        return notes_repo.search_notes(self._conn, query)


def _check_text(name: str, value: object) -> None:
    if not isinstance(value, str):
        raise OperationError(f"{name} must be a string, got {type(value).__name__}")


_engine: StorageEngine | None = None


def get_engine(settings: Settings) -> StorageEngine:
    """Return the process-wide engine, creating it on first use."""
    global _engine
    if _engine is None:
        _engine = StorageEngine(db_path(settings))
    return _engine


def current_engine() -> StorageEngine | None:
    return _engine
