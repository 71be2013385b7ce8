"""Application factory and context for the Tidecaster API.

Nothing is created at import time. Settings come from the environment when
the AppContext is built, and the session registry (the only stateful
service) hangs off the context, so each test can build an app around its
own registry and fake clock.

Usage:
------
    app = create_app()

    registry = SessionRegistry(time_source=fake_clock, limit=2)
    app = create_app(context=AppContext(session_registry=registry))
"""

import logging
import os
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend import __version__
from backend.logging_config import configure_logging
from backend.session_registry import SessionRegistry
from core.config.server import DEFAULT_API_PORT, DEFAULT_SESSION_LIMIT
from core.exceptions import ConfigurationError


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")
    return value


@dataclass
class AppContext:
    """Runtime context holding all application state."""

    # Configuration
    api_port: int = field(default_factory=lambda: _int_from_env("FISHING_API_PORT", DEFAULT_API_PORT))
    session_limit: int = field(
        default_factory=lambda: _int_from_env("FISHING_SESSION_LIMIT", DEFAULT_SESSION_LIMIT)
    )
    allowed_origins: list = field(
        default_factory=lambda: os.getenv("ALLOWED_ORIGINS", "*").split(",")
    )

    # Services
    session_registry: Optional[SessionRegistry] = None

    # Timing
    server_start_time: float = field(default_factory=time.time)

    # Logging
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("tidecaster"))

    def __post_init__(self) -> None:
        if self.session_registry is None:
            self.session_registry = SessionRegistry(limit=self.session_limit)

    def health(self) -> dict:
        return {
            "status": "ok",
            "version": __version__,
            "sessions": self.session_registry.session_count,
            "uptime_seconds": time.time() - self.server_start_time,
        }


def create_app(*, context: Optional[AppContext] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        context: Pre-configured AppContext (for testing). If None, creates a new one.

    Returns:
        Configured FastAPI application with context attached as app.state.context
    """
    # Configure logging (idempotent)
    logger = configure_logging()

    if context is None:
        context = AppContext()
    context.logger = logger

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for startup and shutdown."""
        ctx = app.state.context
        ctx.logger.info("Tidecaster API ready (session limit %d)", ctx.session_limit)
        try:
            yield
        finally:
            closed = ctx.session_registry.close_all()
            ctx.logger.info("Shutdown: closed %d session(s)", closed)

    app = FastAPI(title="Tidecaster API", version=__version__, lifespan=lifespan)

    # Attach context to app state for access in routes
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=context.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    _setup_routers(app, context)

    @app.get("/health")
    async def health():
        return context.health()

    return app


def _setup_routers(app: FastAPI, ctx: AppContext) -> None:
    """Setup and include all API routers."""
    from backend.routers import sessions

    app.include_router(sessions.setup_router(ctx.session_registry))
    ctx.logger.info("API routers configured successfully")
