"""Logging configuration for the Slack channel adapter."""

from __future__ import annotations

import logging
from typing import Optional

from .config import get_settings

logger = logging.getLogger("slack_adapter.server")

# modules under app.* log through their own __name__ loggers
APP_LOGGER = "app"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging once; `level` overrides LOG_LEVEL from settings."""
    if logger.handlers or logging.getLogger().handlers:
        return

    log_level = (level or get_settings().log_level).upper()
    numeric_level = getattr(logging, log_level, logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger(APP_LOGGER).setLevel(numeric_level)

    # Suppress noisy HTTP client logs; attachment downloads would log every file
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
