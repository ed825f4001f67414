"""Note records as seen by both sides of the storage boundary."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class Note:
    id: int
    title: str
    content: str
    created_at: str
    updated_at: str


def note_to_wire(value: Any) -> Any:
    if isinstance(value, Note):
        return asdict(value)
    if isinstance(value, list):
        return [note_to_wire(item) for item in value]
    return value


def note_from_wire(value: Any) -> Any:
    if isinstance(value, dict):
        return Note(**value)
    if isinstance(value, list):
        return [note_from_wire(item) for item in value]
    return value
