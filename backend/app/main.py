"""Storefront API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map StorefrontError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Storage handle and analytics dispatcher built in the lifespan and attached to
      app.state; nothing is a module-level singleton

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Dispatcher stopped BEFORE the engine is disposed: queued events still need
      a connection to be written
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.error_handlers import register_error_handlers
from app.api.routes import (
    auth, health, products, public, store_builder, store_slugs, users,
)
from app.config import get_settings
from app.infrastructure.database import DatabaseSessionManager
from app.infrastructure.event_dispatcher import DatabaseEventSink, EventDispatcher
from app.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    dispatcher = EventDispatcher(
        DatabaseEventSink(manager), max_size=settings.event_queue_size,
    )
    dispatcher.start()
    app.state.db = manager
    app.state.events = dispatcher
    logger.info("Storefront API started")
    yield
    logger.info("Storefront API shutting down")
    await dispatcher.stop()
    await manager.dispose()


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="Storefront API", version="1.0.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(health.router)
    app.include_router(store_slugs.router)
    app.include_router(auth.router)
    app.include_router(store_builder.router)
    app.include_router(products.router)
    app.include_router(public.router)
    app.include_router(users.router)
    return app


app = create_app()
