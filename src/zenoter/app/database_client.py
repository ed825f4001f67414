"""UI-side proxy for the storage operations exposed by the host."""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from zenoter.bus import topics
from zenoter.bus.broker import Bridge, get_bridge
from zenoter.bus.schemas import build_request
from zenoter.core.errors import BridgeUnavailableError, remote_error
from zenoter.core.notes import Note, note_from_wire

logger = logging.getLogger(__name__)

BRIDGE_UNAVAILABLE_MESSAGE = (
    "Database is only available through the storage host. "
    'Run the app with the "zenoter" command (e.g. "zenoter notes list") '
    "instead of using the UI layer on its own."
)


class DatabaseClient:
    """Async pass-through to the six storage operations."""

    _instance: ClassVar[DatabaseClient | None] = None

    def __init__(self) -> None:
        bridge = get_bridge()
        if bridge is None or not bridge.is_connected():
            logger.warning("Storage bridge not available. Database calls will fail.")
            logger.warning(
                "Make sure the storage host is running (use the zenoter command)."
            )

    @classmethod
    def get_instance(cls) -> DatabaseClient:
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    async def create_note(self, content: str, title: str | None = None) -> Note:
        args: dict[str, Any] = {"content": content}
        if title is not None:
            args["title"] = title
        return await self._call(topics.CREATE_NOTE, **args)

    async def get_note_by_id(self, note_id: int) -> Note | None:
        return await self._call(topics.GET_NOTE_BY_ID, note_id=note_id)

    async def get_all_notes(self) -> list[Note]:
        return await self._call(topics.GET_ALL_NOTES)

    async def update_note(
        self, note_id: int, patch: dict[str, Any]
    ) -> Note | None:
        return await self._call(topics.UPDATE_NOTE, note_id=note_id, patch=patch)

    async def delete_note(self, note_id: int) -> bool:
        return await self._call(topics.DELETE_NOTE, note_id=note_id)

    async def search_notes(self, query: str) -> list[Note]:
        return await self._call(topics.SEARCH_NOTES, query=query)

    async def _call(self, topic: str, **args: Any) -> Any:
        bridge = _ensure_bridge()
        response = await bridge.invoke(build_request(topic, **args))
        if not response.ok:
            raise remote_error(response.error_type, response.error or topic)
        return note_from_wire(response.result)


def _ensure_bridge() -> Bridge:
    bridge = get_bridge()
    if bridge is None or not bridge.is_connected():
        raise BridgeUnavailableError(BRIDGE_UNAVAILABLE_MESSAGE)
    return bridge


def get_database_client() -> DatabaseClient:
    return DatabaseClient.get_instance()
