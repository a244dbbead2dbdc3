from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


_HISTORY_CAPACITY_ENV = "HISTORY_CAPACITY"
_PREVIEW_SIZE_ENV = "HISTORY_PREVIEW_SIZE"
_ACTIVE_WINDOW_ENV = "STATION_ACTIVE_WINDOW_SECONDS"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    history_capacity: int
    history_preview_size: int
    active_window_seconds: float
    log_level: str


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_positive_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        history_capacity=_read_positive_int(_HISTORY_CAPACITY_ENV, 100),
        history_preview_size=_read_positive_int(_PREVIEW_SIZE_ENV, 5),
        active_window_seconds=_read_positive_float(_ACTIVE_WINDOW_ENV, 10.0),
        log_level=_read_log_level("INFO"),
    )
