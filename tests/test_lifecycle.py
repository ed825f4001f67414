from __future__ import annotations

from dataclasses import replace

import pytest

from zenoter.app.lifecycle import AppLifecycle
from zenoter.storage.engine import StorageEngine, current_engine


@pytest.fixture
def close_calls(monkeypatch) -> list[StorageEngine]:
    calls: list[StorageEngine] = []
    original = StorageEngine.close

    def counting_close(self: StorageEngine) -> None:
        calls.append(self)
        original(self)

    monkeypatch.setattr(StorageEngine, "close", counting_close)
    return calls


def test_on_ready_initializes_engine(settings) -> None:
    lifecycle = AppLifecycle(settings)
    assert lifecycle.on_ready() is True
    assert lifecycle.engine is current_engine()
    assert lifecycle.engine.is_initialized
    assert lifecycle.init_error is None
    lifecycle.shutdown()


def test_shutdown_closes_exactly_once(settings, close_calls) -> None:
    lifecycle = AppLifecycle(settings)
    lifecycle.on_ready()
    assert lifecycle.on_window_all_closed(platform="linux") is True
    lifecycle.on_before_quit()
    lifecycle.shutdown()
    assert len(close_calls) == 1
    assert lifecycle.closed
    assert current_engine() is None


def test_macos_keeps_running_when_windows_close(settings, close_calls) -> None:
    lifecycle = AppLifecycle(settings)
    lifecycle.on_ready()
    assert lifecycle.on_window_all_closed(platform="darwin") is False
    assert not lifecycle.closed
    assert lifecycle.engine.is_initialized
    lifecycle.on_before_quit()
    assert len(close_calls) == 1


def test_failed_initialization_is_recorded(settings, tmp_path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    lifecycle = AppLifecycle(replace(settings, data_dir=blocker))
    assert lifecycle.on_ready() is False
    assert "Cannot open database" in lifecycle.init_error
    assert not lifecycle.engine.is_initialized
    lifecycle.on_before_quit()
    assert lifecycle.closed


def test_shutdown_without_ready_is_safe(settings, close_calls) -> None:
    lifecycle = AppLifecycle(settings)
    lifecycle.on_before_quit()
    assert lifecycle.closed
    assert close_calls == []
