from __future__ import annotations

import logging

import pytest

from zenoter.app.database_client import DatabaseClient, get_database_client
from zenoter.bus.broker import InMemoryBridge, expose_bridge
from zenoter.bus.server import StorageServer
from zenoter.core.errors import (
    BridgeUnavailableError,
    NotInitializedError,
    OperationError,
)
from zenoter.core.notes import Note
from zenoter.storage.engine import StorageEngine


@pytest.fixture
def bridge(engine) -> InMemoryBridge:
    bridge = InMemoryBridge(StorageServer(lambda: engine))
    expose_bridge(bridge)
    return bridge


def test_client_is_a_singleton() -> None:
    assert get_database_client() is DatabaseClient.get_instance()


def test_missing_bridge_logs_warning(caplog) -> None:
    with caplog.at_level(logging.WARNING):
        DatabaseClient()
    assert "Storage bridge not available" in caplog.text


@pytest.mark.asyncio
async def test_missing_bridge_fails_fast() -> None:
    client = DatabaseClient()
    with pytest.raises(BridgeUnavailableError, match="zenoter"):
        await client.get_all_notes()


@pytest.mark.asyncio
async def test_closed_bridge_fails_fast(bridge) -> None:
    client = DatabaseClient()
    bridge.close()
    with pytest.raises(BridgeUnavailableError):
        await client.create_note("never stored")


@pytest.mark.asyncio
async def test_client_passes_operations_through(bridge) -> None:
    client = DatabaseClient()
    note = await client.create_note("# Hello")
    assert isinstance(note, Note)
    assert note.title == ""

    updated = await client.update_note(note.id, {"title": "Greeting"})
    assert updated.title == "Greeting"
    assert updated.content == "# Hello"
    assert await client.get_note_by_id(note.id) == updated
    assert await client.get_all_notes() == [updated]
    assert await client.search_notes("Greet") == [updated]
    assert await client.search_notes("zzz-nonexistent") == []

    assert await client.delete_note(note.id) is True
    assert await client.delete_note(note.id) is False
    assert await client.get_note_by_id(note.id) is None
    assert await client.update_note(note.id, {"title": "gone"}) is None


@pytest.mark.asyncio
async def test_client_create_with_title(bridge) -> None:
    note = await DatabaseClient().create_note("body", title="Title")
    assert note.title == "Title"


@pytest.mark.asyncio
async def test_store_errors_surface_with_original_message(bridge) -> None:
    client = DatabaseClient()
    with pytest.raises(OperationError, match="content must be a string"):
        await client.create_note(123)


@pytest.mark.asyncio
async def test_uninitialized_store_surfaces_not_initialized(tmp_path) -> None:
    engine = StorageEngine(tmp_path / "zenoter.db")
    expose_bridge(InMemoryBridge(StorageServer(lambda: engine)))
    with pytest.raises(NotInitializedError):
        await DatabaseClient().get_all_notes()


@pytest.mark.asyncio
async def test_sqlite_failures_reach_the_client_as_operation_errors(
    engine, bridge
) -> None:
    engine._conn.execute("PRAGMA query_only = 1")
    with pytest.raises(OperationError, match="attempt to write a readonly database"):
        await DatabaseClient().create_note("rejected")
    assert await DatabaseClient().get_all_notes() == []
