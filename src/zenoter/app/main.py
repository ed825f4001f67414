"""Compose the storage host, the boundary and the UI-side client."""

from __future__ import annotations

import contextlib
from collections.abc import Iterator

from zenoter.app.database_client import DatabaseClient, get_database_client
from zenoter.app.host import StorageHostProcess
from zenoter.bus.broker import clear_bridge, expose_bridge
from zenoter.core.settings import Settings


@contextlib.contextmanager
def connected_client(settings: Settings) -> Iterator[DatabaseClient]:
    host = StorageHostProcess(settings)
    expose_bridge(host.start())
    try:
        yield get_database_client()
    finally:
        clear_bridge()
        host.stop()
