"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from models.readings import DayNightState, RawReading, ZoneReading


class ZoneSchema(BaseModel):
    """Temperature/humidity pair for one sensor zone."""

    model_config = ConfigDict(allow_inf_nan=False, from_attributes=True)

    temperature: float = 0.0
    humidity: float = 0.0


def _default_zone() -> ZoneSchema:
    return ZoneSchema(temperature=0.0, humidity=0.0)


class IngestPayload(BaseModel):
    """Shape validation and defaulting for readings pushed by the device."""

    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    zone1: ZoneSchema = Field(default_factory=_default_zone)
    zone2: ZoneSchema = Field(default_factory=_default_zone)
    pressure: float = Field(..., strict=True)
    rain_raw: float = Field(..., strict=True)
    wind_raw: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("wind_raw", "wind_speed"),
        description="Wind signal as sent by the firmware (raw count / 1000).",
    )
    rain_detected: Optional[bool] = None
    ldr: Optional[float] = None
    day_night: Optional[DayNightState] = None

    @field_validator("zone1", "zone2", mode="before")
    @classmethod
    def _default_missing_zone(cls, value: object) -> object:
        return _default_zone() if value is None else value

    @field_validator("day_night", mode="before")
    @classmethod
    def _normalize_day_night(cls, value: object) -> object:
        if isinstance(value, str):
            candidate = value.strip().upper()
            return candidate or None
        return value

    def to_raw_reading(self) -> RawReading:
        return RawReading(
            zone1=ZoneReading(self.zone1.temperature, self.zone1.humidity),
            zone2=ZoneReading(self.zone2.temperature, self.zone2.humidity),
            pressure=self.pressure,
            rain_raw=self.rain_raw,
            wind_raw=self.wind_raw,
            rain_detected=self.rain_detected,
            ldr=self.ldr,
            day_night=self.day_night,
        )


class ProcessedReadingSchema(BaseModel):
    """Processed reading as served to dashboards."""

    model_config = ConfigDict(from_attributes=True)

    timestamp: int = Field(..., description="Milliseconds since the Unix epoch.")
    zone1: ZoneSchema
    zone2: ZoneSchema
    pressure: float
    pressure_trend: float
    wind_speed: float = Field(..., description="Wind speed in m/s.")
    rain_raw: float
    rain_detected: Optional[bool] = None
    ldr: Optional[float] = None
    day_night: Optional[DayNightState] = None
    day_night_state: DayNightState
    avg_temperature: float
    avg_humidity: float


class IngestResponse(BaseModel):
    success: bool = True
    data: ProcessedReadingSchema


class LatestResponse(BaseModel):
    """Current state plus a short preview for trend display."""

    latest: Optional[ProcessedReadingSchema] = None
    history_preview: List[ProcessedReadingSchema] = Field(default_factory=list)


class HistoryResponse(BaseModel):
    readings: List[ProcessedReadingSchema] = Field(default_factory=list)
