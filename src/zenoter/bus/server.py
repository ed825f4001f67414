"""Server side of the storage boundary: one handler per exposed operation."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any

from zenoter.bus import topics
from zenoter.bus.schemas import Request, Response
from zenoter.core.errors import NotInitializedError, OperationError, ZenoterError
from zenoter.core.notes import note_to_wire
from zenoter.storage.engine import StorageEngine

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]


def _create_note(engine: StorageEngine, content: str, title: str | None = None) -> Any:
    return engine.create_note(content, title)


def _get_note_by_id(engine: StorageEngine, note_id: int) -> Any:
    return engine.get_note_by_id(note_id)


def _get_all_notes(engine: StorageEngine) -> Any:
    return engine.get_all_notes()


def _update_note(engine: StorageEngine, note_id: int, patch: dict[str, Any]) -> Any:
    return engine.update_note(note_id, patch)


def _delete_note(engine: StorageEngine, note_id: int) -> Any:
    return engine.delete_note(note_id)


def _search_notes(engine: StorageEngine, query: str) -> Any:
    return engine.search_notes(query)


STORAGE_HANDLERS: dict[str, Handler] = {
    topics.CREATE_NOTE: _create_note,
    topics.GET_NOTE_BY_ID: _get_note_by_id,
    topics.GET_ALL_NOTES: _get_all_notes,
    topics.UPDATE_NOTE: _update_note,
    topics.DELETE_NOTE: _delete_note,
    topics.SEARCH_NOTES: _search_notes,
}


class StorageServer:
    """Dispatches boundary requests to the storage engine.

    ``handle`` never raises; every failure becomes an error response that
    keeps the original message and error class name.
    """

    def __init__(
        self,
        engine: Callable[[], StorageEngine | None],
        not_ready_reason: Callable[[], str | None] | None = None,
    ) -> None:
        self._engine = engine
        self._not_ready_reason = not_ready_reason
        self._handlers: dict[str, Handler] = {}
        for topic, handler in STORAGE_HANDLERS.items():
            self.register(topic, handler)

    def register(self, topic: str, handler: Handler) -> None:
        if topic not in topics.STORAGE_TOPICS:
            raise ValueError(f"Topic {topic!r} is not an exposed storage operation")
        self._handlers[topic] = handler

    def operations(self) -> list[str]:
        return sorted(self._handlers)

    def handle(self, request: Request) -> Response:
        handler = self._handlers.get(request.topic)
        if handler is None:
            logger.warning("Rejected unknown operation %r", request.topic)
            return _error_response(
                request, OperationError(f"Unknown operation: {request.topic}")
            )
        try:
            engine = self._require_engine()
            bound = _bind(handler, request, engine)
            result = handler(*bound.args, **bound.kwargs)
        except ZenoterError as exc:
            logger.warning("Operation %s failed: %s", request.topic, exc)
            return _error_response(request, exc)
        except Exception as exc:
            logger.exception("Unexpected failure in %s", request.topic)
            return _error_response(request, exc)
        return Response(
            request_id=request.request_id, ok=True, result=note_to_wire(result)
        )

    def _require_engine(self) -> StorageEngine:
        engine = self._engine()
        if engine is not None and engine.is_initialized:
            return engine
        message = "Database not initialized: the storage host has not finished startup"
        reason = self._not_ready_reason() if self._not_ready_reason else None
        if reason:
            message = f"Database not initialized: {reason}"
        raise NotInitializedError(message)


def _bind(
    handler: Handler, request: Request, engine: StorageEngine
) -> inspect.BoundArguments:
    if not isinstance(request.args, dict):
        raise OperationError(
            f"Invalid arguments for {request.topic}: expected a mapping"
        )
    try:
        return inspect.signature(handler).bind(engine, **request.args)
    except TypeError as exc:
        raise OperationError(f"Invalid arguments for {request.topic}: {exc}") from exc


def _error_response(request: Request, exc: Exception) -> Response:
    return Response(
        request_id=request.request_id,
        ok=False,
        error=str(exc),
        error_type=type(exc).__name__,
    )
