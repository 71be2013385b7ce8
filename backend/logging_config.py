"""Logging setup shared by the game window, headless autoplay and the API server.

Encounter code logs per-frame detail (clock clamps, deferred actions,
listener churn) at DEBUG. Those loggers stay at WARNING unless
``FISHING_LOG_FRAMES`` is set, so a DEBUG run is still readable.
"""

from __future__ import annotations

import logging
import os
from typing import Iterable

from core.exceptions import ConfigurationError

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DEFAULT_DATEFMT = "%H:%M:%S"

APP_LOGGERS = ("core", "backend", "rendering", "fishing_game", "tidecaster")
FRAME_LOGGERS = ("core.timing", "core.qte.listeners")
UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def resolve_level(level: str | None = None) -> str:
    """Explicit level, else ``FISHING_LOG_LEVEL``, else INFO."""
    raw = level if level is not None else os.getenv("FISHING_LOG_LEVEL")
    resolved = (raw or "INFO").strip().upper()
    if not isinstance(logging.getLevelName(resolved), int):
        raise ConfigurationError(f"Unknown log level: {raw!r}")
    return resolved


def configure_logging(
    *,
    level: str | None = None,
    include_uvicorn: bool = True,
    frame_detail: bool | None = None,
    extra_loggers: Iterable[str] = (),
) -> logging.Logger:
    """Configure logging for every Tidecaster entry point.

    Args:
        level: Log level name; see resolve_level().
        include_uvicorn: Align uvicorn's loggers with the chosen level.
        frame_detail: Let per-frame loggers through. Defaults to whether
            ``FISHING_LOG_FRAMES`` is set.
        extra_loggers: More logger names to align with the chosen level.

    Returns:
        The ``tidecaster`` logger.
    """
    resolved_level = resolve_level(level)
    logging.basicConfig(level=resolved_level, format=DEFAULT_FORMAT, datefmt=DEFAULT_DATEFMT)

    names = list(APP_LOGGERS) + list(extra_loggers)
    if include_uvicorn:
        names.extend(UVICORN_LOGGERS)
    for name in names:
        logging.getLogger(name).setLevel(resolved_level)

    if frame_detail is None:
        frame_detail = bool(os.getenv("FISHING_LOG_FRAMES"))
    if not frame_detail:
        for name in FRAME_LOGGERS:
            logging.getLogger(name).setLevel(max(logging.WARNING, logging.getLevelName(resolved_level)))

    app_logger = logging.getLogger("tidecaster")
    app_logger.debug("Logging configured at %s (frame detail %s)", resolved_level, "on" if frame_detail else "off")
    return app_logger
