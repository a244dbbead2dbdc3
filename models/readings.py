"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class DayNightState(str, Enum):
    """Light classification carried on every processed reading."""

    day = "DAY"
    night = "NIGHT"


@dataclass(frozen=True, slots=True)
class ZoneReading:
    """Temperature and humidity measured at one sensor site."""

    temperature: float = 0.0
    humidity: float = 0.0


@dataclass(frozen=True, slots=True)
class RawReading:
    """A reading as pushed by the sensing device, after boundary normalization."""

    zone1: ZoneReading
    zone2: ZoneReading
    pressure: float
    rain_raw: float
    wind_raw: Optional[float] = None
    rain_detected: Optional[bool] = None
    ldr: Optional[float] = None
    day_night: Optional[DayNightState] = None


@dataclass(frozen=True, slots=True)
class ProcessedReading:
    """A raw reading plus derived fields, as stored in the history."""

    timestamp: int
    zone1: ZoneReading
    zone2: ZoneReading
    pressure: float
    rain_raw: float
    wind_speed: float
    avg_temperature: float
    avg_humidity: float
    pressure_trend: float
    day_night_state: DayNightState
    rain_detected: Optional[bool] = None
    ldr: Optional[float] = None
    day_night: Optional[DayNightState] = None
