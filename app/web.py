from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from datastore.history_store import HistoryStore, build_default_store
from models.readings import DayNightState, ProcessedReading, ZoneReading
from settings import get_settings


templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))


def format_clock_time(timestamp_ms: int, tz: Optional[tzinfo] = None) -> str:
    """Render epoch milliseconds as a wall-clock time, local time by default."""
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=tz).strftime("%H:%M:%S")


templates.env.filters["clock_time"] = format_clock_time

_EMPTY_READING = ProcessedReading(
    timestamp=0,
    zone1=ZoneReading(),
    zone2=ZoneReading(),
    pressure=0.0,
    rain_raw=0.0,
    wind_speed=0.0,
    avg_temperature=0.0,
    avg_humidity=0.0,
    pressure_trend=0.0,
    day_night_state=DayNightState.day,
    rain_detected=False,
)


@dataclass(frozen=True)
class DashboardView:
    reading: ProcessedReading
    has_data: bool
    is_active: bool
    rain_percent: int
    history: list[ProcessedReading]


def get_store() -> HistoryStore:
    return build_default_store()


def is_station_active(
    latest: Optional[ProcessedReading], now_ms: int, window_seconds: float
) -> bool:
    """A station is active while its latest reading is younger than the window."""
    if latest is None:
        return False
    return (now_ms - latest.timestamp) < window_seconds * 1000


def build_dashboard(store: HistoryStore, now_ms: int) -> DashboardView:
    settings = get_settings()
    latest = store.latest()
    reading = latest or _EMPTY_READING
    return DashboardView(
        reading=reading,
        has_data=latest is not None,
        is_active=is_station_active(latest, now_ms, settings.active_window_seconds),
        rain_percent=round(reading.rain_raw * 100),
        history=store.window(settings.history_preview_size),
    )


router = APIRouter(include_in_schema=False)


@router.get("/ui", name="ui_index", response_class=HTMLResponse)
async def ui_index(
    request: Request,
    store: HistoryStore = Depends(get_store),
) -> HTMLResponse:
    view = build_dashboard(store, now_ms=time.time_ns() // 1_000_000)
    return templates.TemplateResponse(
        request,
        "ui/index.html",
        {"view": view},
    )
