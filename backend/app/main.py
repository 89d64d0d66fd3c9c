from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from backend.db import create_engine, create_session_factory, init_db

from .ai.enhancer import build_enhancer
from .api.v1.routes import router as v1_router
from .core.config import Settings, get_settings
from .core.logging import configure_logging
from .insights.sentiment import SentimentScorer
from .middleware import RequestLoggingMiddleware
from .services.journal import JournalService
from .services.storage import StorageError, StorageService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the journal store and wire services during startup."""

    configure_logging()
    settings: Settings = get_settings()

    engine = create_engine(settings.database_url)
    session_factory = create_session_factory(engine)
    await init_db(engine, session_factory, settings.version, settings.database_url)
    storage_service = StorageService(session_factory)

    enhancer = build_enhancer(settings)
    scorer = SentimentScorer(enhancer)
    journal_service = JournalService(
        storage_service,
        scorer,
        enhancer=enhancer,
        recent_limit=settings.recent_entries_limit,
        export_setting_keys=settings.export_setting_keys,
    )

    app.state.settings = settings
    app.state.db_engine = engine
    app.state.db_session_factory = session_factory
    app.state.storage_service = storage_service
    app.state.scorer = scorer
    app.state.journal_service = journal_service

    logger.info(
        "MoodJournal started version=%s enhancer=%s",
        settings.version,
        "enabled" if scorer.enhanced else "disabled",
    )

    try:
        yield
    finally:
        await engine.dispose()


app = FastAPI(title="MoodJournal", version=get_settings().version, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(v1_router)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("storage failure on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "storage unavailable"},
    )


@app.get("/healthz")
async def healthz(request: Request, settings: Settings = Depends(get_settings)) -> dict[str, str]:
    scorer: SentimentScorer = request.app.state.scorer
    return {
        "status": "ok",
        "version": settings.version,
        "enhancer": "enabled" if scorer.enhanced else "disabled",
    }


@app.get("/readyz")
async def readyz(request: Request) -> dict[str, Any]:
    storage: StorageService = request.app.state.storage_service

    db_ok = True
    db_detail = "ok"
    try:
        await storage.healthcheck()
    except StorageError as exc:
        db_ok = False
        db_detail = str(exc)

    return {
        "ready": db_ok,
        "db": {"ok": db_ok, "detail": db_detail},
    }


@app.get("/metrics")
async def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
