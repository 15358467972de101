"""Cube Timer API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map CubeTimerError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized and custom events reloaded on startup via lifespan
    - The default event's timer is created at startup, so a misconfigured
      DEFAULT_EVENT fails the boot instead of the first request

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - SQLite (the local single-user store) gets its tables from create_all;
      server databases are migrated with Alembic
    - The presentation layer (terminal or browser) is a separate client; this
      process only hosts the timing core behind HTTP
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import cubetimer.infrastructure.database as database
from cubetimer.api.error_handlers import register_error_handlers
from cubetimer.api.routes import events, health, solves, timer
from cubetimer.config import get_settings
from cubetimer.db.base import Base
from cubetimer.infrastructure.observability import setup_logging
from cubetimer.services import timer_registry
from cubetimer.services.solve_repository import SqlCustomEventRepository

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if settings.database_url.startswith("sqlite"):
        async with database.db_manager.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    async with database.db_manager.session() as db:
        await timer_registry.load_custom_events(SqlCustomEventRepository(db))
    timer_registry.get_timer(settings.default_event)
    logger.info("Cube Timer API started")
    yield
    await database.db_manager.engine.dispose()
    logger.info("Cube Timer API shutting down")


app = FastAPI(
    title="Cube Timer API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(events.router)
app.include_router(timer.router)
app.include_router(solves.router)

register_error_handlers(app)
