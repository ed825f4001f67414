"""Privileged storage host process and its UI-side handle."""

from __future__ import annotations

import logging
import multiprocessing
from multiprocessing.connection import Connection
from multiprocessing.process import BaseProcess

from zenoter.app.lifecycle import AppLifecycle
from zenoter.bus.broker import PipeBridge
from zenoter.bus.schemas import Request, Response
from zenoter.bus.server import StorageServer
from zenoter.core.settings import Settings

logger = logging.getLogger(__name__)


def run_host(conn: Connection, settings: Settings) -> None:
    """Serve storage requests on ``conn`` until shutdown."""
    logging.basicConfig(level=settings.log_level)
    lifecycle = AppLifecycle(settings)
    lifecycle.on_ready()
    server = StorageServer(lambda: lifecycle.engine, lambda: lifecycle.init_error)
    try:
        serve(conn, server)
    finally:
        lifecycle.on_before_quit()
        conn.close()


def serve(conn: Connection, server: StorageServer) -> None:
    while True:
        try:
            message = conn.recv()
        except EOFError:
            logger.info("UI side closed the storage connection")
            return
        if message is None:
            return
        if not isinstance(message, Request):
            logger.warning("Dropping malformed message %r", type(message).__name__)
            conn.send(
                Response(
                    request_id=getattr(message, "request_id", ""),
                    ok=False,
                    error="Malformed request",
                    error_type="OperationError",
                )
            )
            continue
        conn.send(server.handle(message))


class StorageHostProcess:
    """Starts the storage host in a child process and hands out its bridge."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._process: BaseProcess | None = None
        self._bridge: PipeBridge | None = None

    @property
    def bridge(self) -> PipeBridge | None:
        return self._bridge

    def start(self) -> PipeBridge:
        if self._bridge is not None:
            return self._bridge
        # The host always starts from a fresh interpreter.
        context = multiprocessing.get_context("spawn")
        parent_conn, child_conn = context.Pipe()
        process = context.Process(
            target=run_host,
            args=(child_conn, self._settings),
            name="zenoter-storage",
            daemon=True,
        )
        process.start()
        child_conn.close()
        self._process = process
        self._bridge = PipeBridge(parent_conn)
        logger.info("Started storage host pid=%s", process.pid)
        return self._bridge

    def stop(self) -> None:
        if self._bridge is not None:
            self._bridge.close()
            self._bridge = None
        process = self._process
        if process is None:
            return
        process.join(self._settings.host_timeout_s)
        if process.is_alive():
            logger.warning("Storage host did not exit in time; terminating")
            process.terminate()
            process.join()
        self._process = None
