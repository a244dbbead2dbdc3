from __future__ import annotations
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from app.api import router
from app.web import router as web_router
from datastore.history_store import build_default_store
from logging_config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    store = build_default_store()
    logger.info("History store ready", extra={"history_size": len(store)})
    try:
        yield
    finally:
        build_default_store.cache_clear()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Weather Station Sink",
        description="Ingests sensor cluster readings and serves derived conditions.",
        version="0.1.0",
        lifespan=lifespan,
    )
    static_dir = Path(__file__).resolve().parent.parent / "static"
    app.mount("/static", StaticFiles(directory=static_dir), name="static")
    app.include_router(router)
    app.include_router(web_router)
    return app

app = create_app()
