from __future__ import annotations

import logging

from datastore.history_store import build_default_store
from logging_config import ContextualFormatter
from models.readings import DayNightState
from settings import get_settings


def test_environment_overrides_apply(monkeypatch) -> None:
    monkeypatch.setenv("HISTORY_CAPACITY", "25")
    monkeypatch.setenv("HISTORY_PREVIEW_SIZE", "3")
    monkeypatch.setenv("STATION_ACTIVE_WINDOW_SECONDS", "30")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    get_settings.cache_clear()
    build_default_store.cache_clear()

    try:
        settings = get_settings()
        store = build_default_store()

        assert settings.history_preview_size == 3
        assert settings.active_window_seconds == 30.0
        assert settings.log_level == "DEBUG"
        assert store.capacity == 25
    finally:
        build_default_store.cache_clear()
        get_settings.cache_clear()


def test_invalid_values_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("HISTORY_CAPACITY", "-4")
    monkeypatch.setenv("HISTORY_PREVIEW_SIZE", "five")
    monkeypatch.setenv("STATION_ACTIVE_WINDOW_SECONDS", "  ")
    monkeypatch.setenv("LOG_LEVEL", "")

    get_settings.cache_clear()
    try:
        settings = get_settings()

        assert settings.history_capacity == 100
        assert settings.history_preview_size == 5
        assert settings.active_window_seconds == 10.0
        assert settings.log_level == "INFO"
    finally:
        get_settings.cache_clear()


def test_contextual_formatter_appends_extra_fields() -> None:
    formatter = ContextualFormatter(fmt="%(message)s")
    record = logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Ingested reading",
        args=(),
        exc_info=None,
    )
    record.pressure = 998.5
    record.day_night_state = DayNightState.night
    record.reason = None

    assert formatter.format(record) == (
        "Ingested reading | pressure=998.5 day_night_state=NIGHT"
    )
