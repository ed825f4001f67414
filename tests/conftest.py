from __future__ import annotations

import logging

import pytest

from zenoter.app.database_client import DatabaseClient
from zenoter.bus.broker import clear_bridge
from zenoter.core.settings import Settings
from zenoter.storage.engine import StorageEngine, current_engine


@pytest.fixture(autouse=True)
def _reset_process_state():
    yield
    clear_bridge()
    DatabaseClient._instance = None
    engine = current_engine()
    if engine is not None:
        engine.close()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        data_dir=tmp_path / "zenoter", log_level=logging.INFO, host_timeout_s=10.0
    )


@pytest.fixture
def engine(tmp_path):
    engine = StorageEngine(tmp_path / "data" / "zenoter.db")
    engine.initialize()
    yield engine
    engine.close()
