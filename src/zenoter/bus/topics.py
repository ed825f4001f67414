"""Storage operations exposed across the process boundary."""

from __future__ import annotations

CREATE_NOTE = "db:createNote"
GET_NOTE_BY_ID = "db:getNoteById"
GET_ALL_NOTES = "db:getAllNotes"
UPDATE_NOTE = "db:updateNote"
DELETE_NOTE = "db:deleteNote"
SEARCH_NOTES = "db:searchNotes"

STORAGE_TOPICS = (
    CREATE_NOTE,
    GET_NOTE_BY_ID,
    GET_ALL_NOTES,
    UPDATE_NOTE,
    DELETE_NOTE,
    SEARCH_NOTES,
)
