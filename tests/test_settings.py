from __future__ import annotations

import logging
from pathlib import Path

import pytest

from zenoter.core.settings import db_path, load_settings


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("ZENOTER_DATA_DIR", "ZENOTER_LOG_LEVEL", "ZENOTER_HOST_TIMEOUT_S"):
        # setenv first so values loaded from .env files are undone too
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def test_defaults() -> None:
    settings = load_settings()
    assert settings.data_dir == Path("~/.zenoter").expanduser()
    assert settings.log_level == logging.WARNING
    assert settings.host_timeout_s == 10.0
    assert db_path(settings) == settings.data_dir / "data" / "zenoter.db"


def test_environment_overrides(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("ZENOTER_DATA_DIR", str(tmp_path / "store"))
    monkeypatch.setenv("ZENOTER_LOG_LEVEL", "debug")
    monkeypatch.setenv("ZENOTER_HOST_TIMEOUT_S", "2.5")
    settings = load_settings()
    assert settings.data_dir == tmp_path / "store"
    assert settings.log_level == logging.DEBUG
    assert settings.host_timeout_s == 2.5


def test_dotenv_file_is_loaded(tmp_path) -> None:
    (tmp_path / ".env").write_text(
        f"ZENOTER_DATA_DIR={tmp_path / 'from-dotenv'}\n", encoding="utf-8"
    )
    settings = load_settings()
    assert settings.data_dir == tmp_path / "from-dotenv"


def test_invalid_log_level(monkeypatch) -> None:
    monkeypatch.setenv("ZENOTER_LOG_LEVEL", "chatty")
    with pytest.raises(ValueError, match="ZENOTER_LOG_LEVEL"):
        load_settings()


@pytest.mark.parametrize("value", ["soon", "0", "-1"])
def test_invalid_host_timeout(monkeypatch, value) -> None:
    monkeypatch.setenv("ZENOTER_HOST_TIMEOUT_S", value)
    with pytest.raises(ValueError, match="ZENOTER_HOST_TIMEOUT_S"):
        load_settings()
