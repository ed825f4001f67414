"""Notes repository."""

from __future__ import annotations

import sqlite3
from collections.abc import Mapping

from zenoter.core.notes import Note

_COLUMNS = "id, title, content, created_at, updated_at"

# Patch keys that may be written, mapped to fixed SET fragments.
PATCHABLE_FIELDS: dict[str, str] = {
    "title": "title = ?",
    "content": "content = ?",
}


def add_note(conn: sqlite3.Connection, title: str, content: str, ts: str) -> Note:
    cursor = conn.execute(
        "INSERT INTO notes (title, content, created_at, updated_at) "
        "VALUES (?, ?, ?, ?)",
        (title, content, ts, ts),
    )
    return Note(
        id=cursor.lastrowid,
        title=title,
        content=content,
        created_at=ts,
        updated_at=ts,
    )


def get_note(conn: sqlite3.Connection, note_id: int) -> Note | None:
    row = conn.execute(
        f"SELECT {_COLUMNS} FROM notes WHERE id = ?", (note_id,)
    ).fetchone()
    if row is None:
        return None
    return _row_to_note(row)


def list_notes(conn: sqlite3.Connection) -> list[Note]:
    rows = conn.execute(
        f"SELECT {_COLUMNS} FROM notes ORDER BY updated_at DESC, id DESC"
    ).fetchall()
    return [_row_to_note(row) for row in rows]


def update_note(
    conn: sqlite3.Connection, note_id: int, changes: Mapping[str, str], ts: str
) -> None:
    assignments = []
    params: list[object] = []
    for field, fragment in PATCHABLE_FIELDS.items():
        if field in changes:
            assignments.append(fragment)
            params.append(changes[field])
    assignments.append("updated_at = ?")
    params.extend([ts, note_id])
    conn.execute(
        f"UPDATE notes SET {', '.join(assignments)} WHERE id = ?",
        params,
    )


def delete_note(conn: sqlite3.Connection, note_id: int) -> bool:
    cursor = conn.execute("DELETE FROM notes WHERE id = ?", (note_id,))
    return cursor.rowcount > 0


def search_notes(conn: sqlite3.Connection, query: str) -> list[Note]:
    like_query = f"%{_escape_like(query)}%"
    rows = conn.execute(
        f"SELECT {_COLUMNS} FROM notes "
        "WHERE title LIKE ? ESCAPE '\\' OR content LIKE ? ESCAPE '\\' "
        "ORDER BY updated_at DESC, id DESC",
        (like_query, like_query),
    ).fetchall()
    return [_row_to_note(row) for row in rows]


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _row_to_note(row: sqlite3.Row) -> Note:
    return Note(
        id=row[0],
        title=row[1],
        content=row[2],
        created_at=row[3],
        updated_at=row[4],
    )
