from __future__ import annotations

import logging
import random
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from mindmate.db import create_engine, create_session_factory, init_db

from .api.v1.routes import router as v1_router
from .core.config import Settings, get_settings
from .core.logging import configure_logging
from .insights.daily import DailyAggregator
from .middleware import RequestLoggingMiddleware
from .mood.classifier import MessageClassifier
from .mood.wellness import WellnessScoreUpdater
from .services.daily_reset import DailyResetScheduler
from .services.dashboard import DashboardService
from .services.goals import GoalService
from .services.ratelimit import RateLimiter
from .services.storage import StorageService
from .services.tracker import MoodTracker

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure application services during startup and ensure graceful shutdown."""

    configure_logging()
    settings: Settings = get_settings()

    engine = create_engine(settings.database_url)
    session_factory = create_session_factory(engine)
    await init_db(engine, session_factory, settings.version)
    storage_service = StorageService(session_factory)

    rng = random.Random()
    classifier = MessageClassifier(threshold=settings.mood_update_threshold)
    mood_tracker = MoodTracker(
        storage_service,
        classifier,
        WellnessScoreUpdater.from_settings(settings, rng=rng),
        initial_score=settings.wellness_initial_score,
        rng=rng,
    )
    daily_reset = DailyResetScheduler(
        storage_service,
        reset_wellness_score=settings.reset_wellness_score,
    )
    dashboard_service = DashboardService(
        storage_service,
        aggregator=DailyAggregator(placeholder_score=settings.placeholder_wellness_score),
    )

    app.state.settings = settings
    app.state.storage_service = storage_service
    app.state.db_engine = engine
    app.state.db_session_factory = session_factory
    app.state.rate_limiter = RateLimiter()
    app.state.mood_tracker = mood_tracker
    app.state.daily_reset = daily_reset
    app.state.dashboard_service = dashboard_service
    app.state.goal_service = GoalService(storage_service)

    logger.info(
        "MindMate started version=%s threshold=%.2f",
        settings.version,
        settings.mood_update_threshold,
    )

    try:
        yield
    finally:
        await app.state.db_engine.dispose()


app = FastAPI(title="MindMate", version=get_settings().version, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(v1_router)


@app.get("/healthz")
async def healthz(settings: Settings = Depends(get_settings)) -> dict[str, str]:
    return {
        "status": "ok",
        "version": settings.version,
    }


@app.get("/readyz")
async def readyz(request: Request) -> dict[str, Any]:
    storage: StorageService = request.app.state.storage_service

    db_ok = True
    db_detail = "ok"
    try:
        await storage.healthcheck()
    except Exception as exc:  # pragma: no cover - database outage
        logger.exception("Database readiness check failed")
        db_ok = False
        db_detail = str(exc)

    return {
        "ready": db_ok,
        "db": {"ok": db_ok, "detail": db_detail},
    }


@app.get("/metrics")
async def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
