"""Unit tests for the bounded history store."""

from __future__ import annotations

import itertools
import threading

import pytest

from datastore.history_store import HistoryStore, build_default_store
from models.readings import DayNightState, RawReading, ZoneReading
from services.reading_processor import ReadingProcessor
from settings import get_settings


def _raw(pressure: float, ldr: float | None = None) -> RawReading:
    return RawReading(
        zone1=ZoneReading(20.0, 40.0),
        zone2=ZoneReading(22.0, 44.0),
        pressure=pressure,
        rain_raw=0.0,
        ldr=ldr,
    )


def _store(capacity: int = 100) -> HistoryStore:
    counter = itertools.count(1_000)
    return HistoryStore(processor=ReadingProcessor(clock=lambda: next(counter)), capacity=capacity)


def test_empty_store_has_no_latest() -> None:
    store = _store()

    assert store.latest() is None
    assert store.window(5) == []
    assert len(store) == 0


def test_append_returns_and_stores_processed_reading() -> None:
    store = _store()

    processed = store.append(_raw(1000.0))

    assert store.latest() == processed
    assert store.window(5) == [processed]
    assert processed.pressure_trend == 0.0


def test_append_uses_latest_as_previous() -> None:
    store = _store()

    store.append(_raw(1000.0))
    second = store.append(_raw(998.5))

    assert second.pressure_trend == pytest.approx(-1.5)
    assert second.timestamp > store.window(2)[1].timestamp


def test_hysteresis_carries_across_appends() -> None:
    store = _store()

    store.append(_raw(1000.0, ldr=1))
    held = store.append(_raw(1000.0, ldr=4095 * 0.35))

    assert held.day_night_state == DayNightState.night


def test_capacity_evicts_oldest_first() -> None:
    capacity = 100
    store = _store(capacity=capacity)
    appended = [store.append(_raw(float(index))) for index in range(capacity + 7)]

    retained = store.window(capacity + 7)

    assert len(retained) == capacity
    assert retained == list(reversed(appended[-capacity:]))
    assert store.latest() == appended[-1]


@pytest.mark.parametrize("appends", [0, 1, 3, 5, 8])
@pytest.mark.parametrize("k", [0, 1, 4, 5, 10])
def test_window_never_exceeds_request_or_capacity(appends: int, k: int) -> None:
    store = _store(capacity=5)
    for index in range(appends):
        store.append(_raw(float(index)))

    assert len(store.window(k)) == min(k, appends, 5)


def test_negative_window_is_empty() -> None:
    store = _store()
    store.append(_raw(1000.0))

    assert store.window(-1) == []


def test_window_returns_snapshot() -> None:
    store = _store()
    store.append(_raw(1000.0))

    snapshot = store.window(5)
    store.append(_raw(1001.0))

    assert len(snapshot) == 1


def test_latest_is_idempotent() -> None:
    store = _store()
    store.append(_raw(1000.0))

    assert store.latest() == store.latest()


def test_invalid_capacity_rejected() -> None:
    with pytest.raises(ValueError):
        HistoryStore(processor=ReadingProcessor(), capacity=0)


def test_concurrent_appends_keep_trend_chain_consistent() -> None:
    store = _store(capacity=500)
    barrier = threading.Barrier(4)

    def worker(offset: int) -> None:
        barrier.wait()
        for index in range(50):
            store.append(_raw(float(offset * 1000 + index)))

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    readings = store.window(500)
    assert len(readings) == 200
    for newer, older in zip(readings, readings[1:]):
        assert newer.pressure_trend == pytest.approx(newer.pressure - older.pressure)
    assert readings[-1].pressure_trend == 0.0


def test_default_store_uses_configured_capacity(monkeypatch) -> None:
    monkeypatch.setenv("HISTORY_CAPACITY", "7")
    get_settings.cache_clear()
    build_default_store.cache_clear()
    try:
        store = build_default_store()
        assert store.capacity == 7
        assert build_default_store() is store
    finally:
        build_default_store.cache_clear()
        get_settings.cache_clear()
