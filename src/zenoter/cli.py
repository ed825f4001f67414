"""Typer CLI for Zenoter."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

import typer
from rich.console import Console
from rich.markup import escape

from zenoter.app.database_client import DatabaseClient
from zenoter.app.main import connected_client
from zenoter.core.errors import ZenoterError
from zenoter.core.notes import Note
from zenoter.core.settings import db_path, load_settings
from zenoter.storage import db
from zenoter.storage.engine import StorageEngine

T = TypeVar("T")

app = typer.Typer(help="Zenoter notes CLI")
console = Console()

notes_app = typer.Typer(help="Notes operations")
db_app = typer.Typer(help="Database operations")
config_app = typer.Typer(help="Configuration")


@app.callback()
def main() -> None:
    settings = load_settings()
    logging.basicConfig(level=settings.log_level)


@notes_app.command("list")
def notes_list() -> None:
    notes = _with_client(lambda client: client.get_all_notes())
    for note in notes:
        _print_note_line(note)


@notes_app.command("add")
def notes_add(
    content: str,
    title: str | None = typer.Option(None, "--title", "-t", help="Note title"),
) -> None:
    note = _with_client(lambda client: client.create_note(content, title))
    console.print(f"created note {note.id}")


@notes_app.command("show")
def notes_show(note_id: int) -> None:
    note = _with_client(lambda client: client.get_note_by_id(note_id))
    if note is None:
        console.print(f"note {note_id} not found")
        raise typer.Exit(code=1)
    console.print(f"# {escape(note.title)}" if note.title else "# (untitled)")
    console.print(f"created={note.created_at} updated={note.updated_at}")
    console.print(escape(note.content))


@notes_app.command("edit")
def notes_edit(
    note_id: int,
    title: str | None = typer.Option(None, "--title", "-t"),
    content: str | None = typer.Option(None, "--content", "-c"),
) -> None:
    patch = {}
    if title is not None:
        patch["title"] = title
    if content is not None:
        patch["content"] = content
    note = _with_client(lambda client: client.update_note(note_id, patch))
    if note is None:
        console.print(f"note {note_id} not found")
        raise typer.Exit(code=1)
    console.print(f"updated note {note.id}")


@notes_app.command("delete")
def notes_delete(note_id: int) -> None:
    deleted = _with_client(lambda client: client.delete_note(note_id))
    if not deleted:
        console.print(f"note {note_id} not found")
        raise typer.Exit(code=1)
    console.print(f"deleted note {note_id}")


@notes_app.command("search")
def notes_search(query: str) -> None:
    notes = _with_client(lambda client: client.search_notes(query))
    for note in notes:
        _print_note_line(note)


@db_app.command("init")
def db_init() -> None:
    engine = _open_engine()
    try:
        console.print(f"database initialized (schema v{engine.schema_version()})")
    finally:
        engine.close()


@db_app.command("info")
def db_info() -> None:
    engine = _open_engine()
    try:
        console.print(f"path={engine.db_path}")
        console.print(f"schema_version={engine.schema_version()}")
        console.print(f"latest_version={db.latest_version()}")
        for record in engine.applied_migrations():
            console.print(f"migration {record.version} applied_at={record.applied_at}")
    finally:
        engine.close()


@config_app.command("show")
def config_show() -> None:
    settings = load_settings()
    console.print(f"data_dir={settings.data_dir}")
    console.print(f"db_path={db_path(settings)}")
    console.print(f"log_level={logging.getLevelName(settings.log_level)}")
    console.print(f"host_timeout_s={settings.host_timeout_s}")


app.add_typer(notes_app, name="notes")
app.add_typer(db_app, name="db")
app.add_typer(config_app, name="config")


def _with_client(action: Callable[[DatabaseClient], Awaitable[T]]) -> T:
    settings = load_settings()
    with connected_client(settings) as client:
        try:
            return asyncio.run(action(client))
        except ZenoterError as exc:
            console.print(f"[red]error:[/red] {escape(str(exc))}")
            raise typer.Exit(code=1) from exc


def _open_engine() -> StorageEngine:
    settings = load_settings()
    engine = StorageEngine(db_path(settings))
    try:
        engine.initialize()
    except ZenoterError as exc:
        console.print(f"[red]error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
    return engine


def _print_note_line(note: Note) -> None:
    title = escape(note.title) if note.title else "(untitled)"
    console.print(f"{note.id} | {title} | updated={note.updated_at}")
