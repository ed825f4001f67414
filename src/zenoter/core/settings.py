"""Settings loader for Zenoter."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

DB_DIRNAME = "data"
DB_FILENAME = "zenoter.db"


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    log_level: int
    host_timeout_s: float


def load_settings() -> Settings:
    load_dotenv(find_dotenv(usecwd=True))
    data_dir = Path(os.environ.get("ZENOTER_DATA_DIR", "~/.zenoter")).expanduser()
    log_level = _parse_log_level(os.environ.get("ZENOTER_LOG_LEVEL", "WARNING"))
    host_timeout_s = _parse_float(
        os.environ.get("ZENOTER_HOST_TIMEOUT_S", "10"), "ZENOTER_HOST_TIMEOUT_S"
    )
    if host_timeout_s <= 0:
        raise ValueError("ZENOTER_HOST_TIMEOUT_S must be positive")
    return Settings(
        data_dir=data_dir,
        log_level=log_level,
        host_timeout_s=host_timeout_s,
    )


def db_path(settings: Settings) -> Path:
    return settings.data_dir / DB_DIRNAME / DB_FILENAME


def _parse_float(value: str, name: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"Invalid float for {name}: {value}") from exc


def _parse_log_level(value: str) -> int:
    normalized = value.strip().upper()
    level = logging.getLevelName(normalized)
    if not isinstance(level, int):
        raise ValueError(f"Invalid log level for ZENOTER_LOG_LEVEL: {value}")
    return level
