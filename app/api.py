"""HTTP route definitions for the service."""

from __future__ import annotations

import json
import logging
from typing import Iterable

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from pydantic import ValidationError

from app.schemas import (
    HistoryResponse,
    IngestPayload,
    IngestResponse,
    LatestResponse,
    ProcessedReadingSchema,
)
from datastore.history_store import HistoryStore, build_default_store
from models.readings import ProcessedReading
from settings import get_settings

logger = logging.getLogger(__name__)

router = APIRouter()


def get_store() -> HistoryStore:
    return build_default_store()


def to_schema(reading: ProcessedReading) -> ProcessedReadingSchema:
    return ProcessedReadingSchema.model_validate(reading, from_attributes=True)


def to_schemas(readings: Iterable[ProcessedReading]) -> list[ProcessedReadingSchema]:
    return [to_schema(reading) for reading in readings]


@router.post(
    "/api/ingest",
    response_model=IngestResponse,
    summary="Accept a raw reading from the sensing device.",
)
async def ingest_reading(
    request: Request,
    store: HistoryStore = Depends(get_store),
) -> IngestResponse:
    try:
        body = await request.json()
        payload = IngestPayload.model_validate(body)
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as exc:
        logger.warning("Rejected ingest payload", extra={"reason": str(exc).splitlines()[0]})
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid Payload",
        ) from exc

    try:
        processed = store.append(payload.to_raw_reading())
        response = IngestResponse(data=to_schema(processed))
    except Exception as exc:
        logger.exception("Failed to ingest reading")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal Server Error",
        ) from exc

    logger.info(
        "Ingested reading",
        extra={
            "timestamp": processed.timestamp,
            "pressure": processed.pressure,
            "day_night_state": processed.day_night_state,
            "wind_speed": processed.wind_speed,
        },
    )
    return response


@router.get(
    "/api/latest",
    response_model=LatestResponse,
    summary="Fetch the latest processed reading and a short history preview.",
)
async def get_latest(store: HistoryStore = Depends(get_store)) -> LatestResponse:
    latest = store.latest()
    preview = store.window(get_settings().history_preview_size)
    return LatestResponse(
        latest=to_schema(latest) if latest is not None else None,
        history_preview=to_schemas(preview),
    )


@router.get(
    "/api/history",
    response_model=HistoryResponse,
    summary="Fetch up to `limit` of the most recent readings, newest first.",
)
async def get_history(
    limit: int | None = Query(default=None, ge=1, le=1000),
    store: HistoryStore = Depends(get_store),
) -> HistoryResponse:
    count = store.capacity if limit is None else limit
    return HistoryResponse(readings=to_schemas(store.window(count)))


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /ui for the station dashboard."}
