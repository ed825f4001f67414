"""Wire the storage engine into the host process lifecycle."""

from __future__ import annotations

import logging
import sys

from zenoter.core.errors import InitializationError
from zenoter.core.settings import Settings
from zenoter.storage.engine import StorageEngine, get_engine

logger = logging.getLogger(__name__)


class AppLifecycle:
    """Creates the engine when the host is ready and closes it exactly once."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._engine: StorageEngine | None = None
        self._init_error: str | None = None
        self._closed = False

    @property
    def engine(self) -> StorageEngine | None:
        return self._engine

    @property
    def init_error(self) -> str | None:
        return self._init_error

    @property
    def closed(self) -> bool:
        return self._closed

    def on_ready(self) -> bool:
        self._engine = get_engine(self._settings)
        try:
            self._engine.initialize()
        except InitializationError as exc:
            self._init_error = str(exc)
            logger.exception("Failed to initialize database")
            return False
        self._init_error = None
        return True

    def on_window_all_closed(self, platform: str = sys.platform) -> bool:
        # macOS apps stay alive until explicitly quit.
        if platform == "darwin":
            return False
        self.shutdown()
        return True

    def on_before_quit(self) -> None:
        self.shutdown()

    def shutdown(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._engine is not None:
            self._engine.close()
        logger.info("Storage lifecycle shut down")
