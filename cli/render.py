from __future__ import annotations

from typing import Any, Dict, Iterable, List

import typer


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def _zone_line(zone: Dict[str, Any] | None) -> str:
    zone = zone or {}
    return f"{zone.get('temperature')} C / {zone.get('humidity')} %"


def render_reading(payload: Dict[str, Any]) -> None:
    echo_heading("Current Conditions")
    echo_key_values(
        [
            ("timestamp", payload.get("timestamp")),
            ("avg_temperature", payload.get("avg_temperature")),
            ("avg_humidity", payload.get("avg_humidity")),
            ("pressure", payload.get("pressure")),
            ("pressure_trend", payload.get("pressure_trend")),
            ("wind_speed", payload.get("wind_speed")),
            ("rain_raw", payload.get("rain_raw")),
            ("rain_detected", payload.get("rain_detected")),
            ("day_night_state", payload.get("day_night_state")),
            ("zone1", _zone_line(payload.get("zone1"))),
            ("zone2", _zone_line(payload.get("zone2"))),
        ]
    )


def render_history(readings: List[Dict[str, Any]]) -> None:
    echo_heading("Recent Readings")
    if not readings:
        typer.echo("No readings recorded.")
        return
    for reading in readings:
        trend = reading.get("pressure_trend") or 0.0
        typer.echo(
            f"  - {reading.get('timestamp')}: "
            f"temp={reading.get('avg_temperature')} "
            f"pressure={reading.get('pressure')} ({trend:+}) "
            f"wind={reading.get('wind_speed')} "
            f"{reading.get('day_night_state')}"
        )


def render_latest(payload: Dict[str, Any]) -> None:
    latest = payload.get("latest")
    if not latest:
        typer.echo("No readings received yet.")
        return
    render_reading(latest)
    typer.echo()
    render_history(payload.get("history_preview") or [])
