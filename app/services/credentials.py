"""Runtime holder for the Slack signing secret and bot access token.

Both values can be rotated while the server runs; consumers must read them
through this holder at call time instead of copying them at construction.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from server.config import get_settings

logger = logging.getLogger(__name__)


class SlackCredentials:
    """Thread-safe, rotatable Slack credentials."""

    def __init__(self, signing_secret: str = "", access_token: str = "") -> None:
        self._lock = threading.Lock()
        self._signing_secret = signing_secret
        self._access_token = access_token

    @property
    def signing_secret(self) -> str:
        with self._lock:
            return self._signing_secret

    @property
    def access_token(self) -> str:
        with self._lock:
            return self._access_token

    def rotate_signing_secret(self, value: str) -> None:
        with self._lock:
            self._signing_secret = value
        logger.info("Slack signing secret rotated")

    def rotate_access_token(self, value: str) -> None:
        with self._lock:
            self._access_token = value
        logger.info("Slack access token rotated")


# Global credentials instance (singleton)
_credentials: Optional[SlackCredentials] = None


def get_slack_credentials() -> SlackCredentials:
    """Get or create the credentials holder, seeded from settings."""
    global _credentials
    if _credentials is None:
        settings = get_settings()
        _credentials = SlackCredentials(
            signing_secret=settings.slack_signing_secret,
            access_token=settings.slack_access_token,
        )
    return _credentials
