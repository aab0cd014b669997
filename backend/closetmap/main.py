"""ClosetMap API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map ClosetMapError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - AppContext built on startup via lifespan unless one was injected

Design Decisions:
    - create_app(context) factory: tests pass an AppContext with in-memory
      database and fake collaborators; production builds it in the lifespan
    - Lifespan over @app.on_event: cleaner cleanup, disposes the engine it created
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from closetmap.api.error_handlers import register_error_handlers
from closetmap.api.middleware import setup_middleware
from closetmap.api.routes import bags, clothes, export, health
from closetmap.config import get_settings
from closetmap.infrastructure.app_context import AppContext, build_app_context
from closetmap.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    owned = getattr(app.state, "context", None) is None
    if owned:
        settings = get_settings()
        setup_logging(settings.log_level, settings.log_format)
        app.state.context = build_app_context(settings)
    logger.info("ClosetMap API started")
    yield
    logger.info("ClosetMap API shutting down")
    if owned:
        await app.state.context.close()
        app.state.context = None


def create_app(context: AppContext | None = None) -> FastAPI:
    """Build the FastAPI application, optionally around a prepared context."""
    app = FastAPI(title="ClosetMap API", version="1.0.0", lifespan=lifespan)
    app.state.context = context

    settings = context.settings if context else get_settings()
    setup_middleware(app, settings)
    register_error_handlers(app)

    # Routes: explicit registration
    app.include_router(health.router)
    app.include_router(bags.router)
    app.include_router(clothes.router)
    app.include_router(export.router)
    return app


app = create_app()
