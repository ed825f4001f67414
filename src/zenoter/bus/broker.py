"""Bridges from the UI side to the storage server."""

from __future__ import annotations

import asyncio
import contextlib
import pickle
import threading
from multiprocessing.connection import Connection
from typing import TYPE_CHECKING, Protocol

from zenoter.bus.schemas import Request, Response
from zenoter.core.errors import BridgeUnavailableError, OperationError

if TYPE_CHECKING:
    from zenoter.bus.server import StorageServer


class Bridge(Protocol):
    def is_connected(self) -> bool: ...

    async def invoke(self, request: Request) -> Response: ...


class InMemoryBridge:
    def __init__(self, server: StorageServer) -> None:
        self._server = server
        self._connected = True

    def is_connected(self) -> bool:
        return self._connected

    def close(self) -> None:
        self._connected = False

    async def invoke(self, request: Request) -> Response:
        if not self._connected:
            raise BridgeUnavailableError("Storage bridge has been closed")
        return self._server.handle(request)


class PipeBridge:
    """Bridge to a storage host process over a multiprocessing pipe."""

    def __init__(self, conn: Connection) -> None:
        self._conn = conn
        self._lock = threading.Lock()
        self._connected = True

    def is_connected(self) -> bool:
        return self._connected and not self._conn.closed

    async def invoke(self, request: Request) -> Response:
        return await asyncio.to_thread(self._roundtrip, request)

    def close(self) -> None:
        with self._lock:
            if self._conn.closed:
                self._connected = False
                return
            with contextlib.suppress(OSError):
                self._conn.send(None)
            self._conn.close()
            self._connected = False

    def _roundtrip(self, request: Request) -> Response:
        with self._lock:
            if not self.is_connected():
                raise BridgeUnavailableError("Storage host connection is closed")
            # send() pickles before writing, so a failure here leaves the pipe
            # untouched.
            try:
                self._conn.send(request)
            except (AttributeError, TypeError, pickle.PicklingError) as exc:
                raise OperationError(f"Cannot send {request.topic}: {exc}") from exc
            except (EOFError, OSError) as exc:
                self._connected = False
                raise BridgeUnavailableError(
                    f"Lost connection to the storage host: {exc}"
                ) from exc
            try:
                response = self._conn.recv()
            except (EOFError, OSError) as exc:
                self._connected = False
                raise BridgeUnavailableError(
                    f"Lost connection to the storage host: {exc}"
                ) from exc
        if (
            not isinstance(response, Response)
            or response.request_id != request.request_id
        ):
            raise OperationError(f"Unexpected reply to {request.topic}")
        return response


_exposed: Bridge | None = None


def expose_bridge(bridge: Bridge) -> None:
    global _exposed
    _exposed = bridge


def get_bridge() -> Bridge | None:
    return _exposed


def clear_bridge() -> None:
    global _exposed
    _exposed = None
