"""Inkpost API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly under settings.api_prefix (no auto-discovery)
    - Every error leaves the app in the canonical error envelope
      (api/error_handlers.py), including unknown routes
    - CORS configured from settings (not hardcoded)
    - Database manager created on startup, disposed on shutdown, held on app.state

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - create_app() factory: tests build isolated apps with their own overrides;
      the module-level app is what uvicorn serves
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from inkpost.api.error_handlers import register_error_handlers
from inkpost.api.routes import activity_logs, categories, health, tags, users
from inkpost.config import Settings, get_settings
from inkpost.infrastructure.database import DatabaseSessionManager
from inkpost.infrastructure.observability import (
    RequestLoggingMiddleware, setup_logging,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    app.state.db_manager = DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Inkpost API started")
    yield
    logger.info("Inkpost API shutting down")
    await app.state.db_manager.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title="Inkpost API", version="1.0.0", lifespan=lifespan)

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Routes — explicit registration
    for module in (health, categories, tags, users, activity_logs):
        app.include_router(module.router, prefix=settings.api_prefix)
    return app


app = create_app()
