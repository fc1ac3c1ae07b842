"""FastAPI application factory and lifespan management."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.dependencies import get_settings, init_services, shutdown_services
from src.api.middleware.error_handler import error_handler_middleware
from src.api.middleware.logging import LoggingMiddleware
from src.api.openapi.routes import health, workout_logs
from src.commons.telemetry import configure_logging, reformat_loggers

UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def _log_options() -> tuple[str, str]:
    settings = get_settings()
    log_level = settings.telemetry.log_level or settings.app.log_level
    return log_level, settings.telemetry.log_format


def _setup_logging() -> None:
    """Configure logging for the application.

    This must be called at module level to ensure our formatters
    are applied before uvicorn starts.
    """
    log_level, log_format = _log_options()

    # Configure root logger for our application
    configure_logging(
        level=log_level,
        format_type=log_format,
        logger_name="src",
    )

    # Also configure root logger as fallback
    logging.getLogger().setLevel(getattr(logging, log_level.upper()))


# Configure logging at module import time
_setup_logging()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifespan - startup and shutdown.

    Initializes all infrastructure services on startup and
    cleanly shuts them down on application exit.
    """
    # Uvicorn handlers exist by now
    log_level, log_format = _log_options()
    reformat_loggers(UVICORN_LOGGERS, level=log_level, format_type=log_format)

    await init_services(get_settings())

    yield

    await shutdown_services()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app.name,
        version=settings.app.version,
        description="Workout Logger API - workout logs with per-set form videos",
        docs_url="/docs" if settings.server.docs_enabled else None,
        redoc_url="/redoc" if settings.server.docs_enabled else None,
        openapi_url="/openapi.json" if settings.server.docs_enabled else None,
        lifespan=lifespan,
    )

    _configure_middleware(app, settings)
    _register_routes(app, settings)

    return app


def _configure_middleware(app: FastAPI, settings: Any) -> None:
    """Configure application middleware."""
    # Cookie sessions need credentials enabled
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Range", "Content-Disposition", "X-Request-ID"],
    )

    app.add_middleware(LoggingMiddleware)

    # Error handler (as middleware)
    app.middleware("http")(error_handler_middleware)


def _register_routes(app: FastAPI, settings: Any) -> None:
    """Register API routes."""
    prefix = settings.server.api_prefix

    # Health routes (no prefix for standard health checks)
    app.include_router(health.router, tags=["Health"])

    app.include_router(workout_logs.router, prefix=prefix, tags=["Workout Logs"])


# Create default app instance
app = create_app()
