"""Profile Directory API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map DirectoryError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - The connection pool is created in the lifespan, stored on app.state,
      and disposed on shutdown — no module-level database singleton

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Empty DATABASE_URL starts the API without a store: queries answer 503,
      readiness reports not_ready
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from directory_api.api.error_handlers import register_error_handlers
from directory_api.api.routes import health, profiles
from directory_api.config import get_settings
from directory_api.infrastructure.database import DatabaseSessionManager
from directory_api.infrastructure.observability import (
    RequestLoggingMiddleware, setup_logging,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    app.state.db_manager = None
    if settings.database_url:
        app.state.db_manager = DatabaseSessionManager(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_recycle=settings.database_pool_recycle_seconds,
            pool_timeout=settings.database_pool_timeout_seconds,
        )
    else:
        logger.warning("DATABASE_URL is not set; profile queries will return 503")
    logger.info("Profile Directory API started")
    yield
    logger.info("Profile Directory API shutting down")
    if app.state.db_manager is not None:
        await app.state.db_manager.dispose()
        app.state.db_manager = None


app = FastAPI(
    title="Profile Directory API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)
app.add_middleware(
    RequestLoggingMiddleware, slow_request_ms=settings.slow_request_ms,
)

app.include_router(health.router)
app.include_router(profiles.router)

register_error_handlers(app)
