"""Derivation rules turning a raw device reading into a processed one."""

from __future__ import annotations

import math
import sys
import time
from typing import Callable, Optional

from models.readings import DayNightState, ProcessedReading, RawReading

LDR_FULL_SCALE = 4095.0
LDR_DAY_THRESHOLD = 0.40
LDR_NIGHT_THRESHOLD = 0.30

# Firmware divides the raw wind count by 1000 before sending.
WIND_RAW_SCALE = 1000.0
WIND_FIRST_BIN = 1000.0
WIND_BIN_WIDTH = 100.0
WIND_BIN_STEP = 0.5
WIND_FLOOR_SPEED = 3.0
WIND_FIRST_BIN_SPEED = 3.5


def _wall_clock_ms() -> int:
    return time.time_ns() // 1_000_000


def _clamp_finite(value: float) -> float:
    """Pin overflowed results to the largest finite float of the same sign."""
    if math.isinf(value):
        return math.copysign(sys.float_info.max, value)
    return value


def _mean(first: float, second: float) -> float:
    # halving first keeps the sum of two large finite values finite
    return first / 2 + second / 2


def classify_day_night(
    raw: RawReading, previous: Optional[ProcessedReading]
) -> DayNightState:
    """Classify a reading as day or night.

    A device-supplied ``day_night`` always wins. Otherwise an ``ldr`` of 0 or 1
    is read as an active-low digital sensor (0 is light). Larger values are
    analog counts out of 4095 with a hysteresis band between 30% and 40% in
    which the previous state is kept.
    """
    if raw.day_night is not None:
        return DayNightState(raw.day_night)

    carried = previous.day_night_state if previous is not None else DayNightState.day
    ldr = raw.ldr
    if ldr is None or math.isnan(ldr):
        return carried

    if ldr <= 1:
        return DayNightState.day if ldr == 0 else DayNightState.night

    normalized = ldr / LDR_FULL_SCALE
    if normalized > LDR_DAY_THRESHOLD:
        return DayNightState.day
    if normalized < LDR_NIGHT_THRESHOLD:
        return DayNightState.night
    return carried


def map_wind_speed(wind_raw: Optional[float]) -> float:
    """Map the scaled wind signal onto m/s in 0.5 m/s steps per 100 raw units."""
    if wind_raw is None:
        return 0.0
    raw_wind = _clamp_finite(wind_raw * WIND_RAW_SCALE)
    if not raw_wind >= WIND_FIRST_BIN:
        return WIND_FLOOR_SPEED
    steps = math.floor((raw_wind - WIND_FIRST_BIN) / WIND_BIN_WIDTH)
    return WIND_FIRST_BIN_SPEED + steps * WIND_BIN_STEP


def pressure_trend(raw: RawReading, previous: Optional[ProcessedReading]) -> float:
    """Difference from the previous stored pressure, 0 for the first reading."""
    if previous is None:
        return 0.0
    return _clamp_finite(raw.pressure - previous.pressure)


class ReadingProcessor:
    """Pure processing component that can be unit tested in isolation."""

    def __init__(self, clock: Callable[[], int] = _wall_clock_ms) -> None:
        self._clock = clock

    def process(
        self, raw: RawReading, previous: Optional[ProcessedReading] = None
    ) -> ProcessedReading:
        timestamp = int(self._clock())
        if previous is not None and timestamp < previous.timestamp:
            timestamp = previous.timestamp

        return ProcessedReading(
            timestamp=timestamp,
            zone1=raw.zone1,
            zone2=raw.zone2,
            pressure=raw.pressure,
            rain_raw=raw.rain_raw,
            wind_speed=map_wind_speed(raw.wind_raw),
            avg_temperature=_mean(raw.zone1.temperature, raw.zone2.temperature),
            avg_humidity=_mean(raw.zone1.humidity, raw.zone2.humidity),
            pressure_trend=pressure_trend(raw, previous),
            day_night_state=classify_day_night(raw, previous),
            rain_detected=raw.rain_detected,
            ldr=raw.ldr,
            day_night=raw.day_night,
        )
