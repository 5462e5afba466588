"""FastAPI application factory.

create_app() returns a configured FastAPI instance: middleware, CORS
restricted to FRONTEND_URL, JSON error handlers, and routers. The
lifespan logs startup and disposes the database pool on shutdown.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from toolboard import __version__
from toolboard.api import api_router, health_router
from toolboard.config import settings
from toolboard.errors import register_error_handlers
from toolboard.logging_config import configure_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info(
        "toolboard.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
        cors_origins=settings.cors_origins,
    )
    if not settings.google_client_id:
        logger.warning("toolboard.google_client_id_missing")

    yield

    logger.info("toolboard.shutdown")

    from toolboard.db.engine import engine
    await engine.dispose()


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Toolboard",
        description="Per-user tool dashboard backend with Google sign-in",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → RequestId → Security → handler

    from toolboard.middleware.request_id import RequestIdMiddleware
    from toolboard.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(health_router, tags=["health"])
    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: toolboard.main:app)
app = create_app()
