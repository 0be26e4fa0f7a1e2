"""Local filesystem store for Slack hosted files.

Files shared in Slack are served from `url_private`, which only resolves with
the bot token and is not meant to be kept. The store downloads them once and
keeps the bytes under a local directory, returning a stable id.
"""

from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Optional

import httpx

from app.services.credentials import SlackCredentials, get_slack_credentials
from app.types import AttachmentFetchError, AttachmentRef
from server.config import get_settings

logger = logging.getLogger(__name__)


class LocalAttachmentStore:
    """AttachmentStore writing downloads to `directory`.

    Downloads use a bounded timeout and are never retried: Slack only waits a
    few seconds for the webhook answer.
    """

    def __init__(
        self,
        directory: str | Path,
        timeout: float = 3.0,
        credentials: Optional[SlackCredentials] = None,
    ) -> None:
        self.directory = Path(directory)
        self.timeout = timeout
        self.credentials = credentials or get_slack_credentials()

    def _headers(self) -> dict[str, str]:
        token = self.credentials.access_token
        return {"Authorization": f"Bearer {token}"} if token else {}

    def path_for(self, attachment_id: str) -> Optional[Path]:
        """Return the stored file for `attachment_id`, if any."""
        matches = sorted(self.directory.glob(f"{attachment_id}*"))
        return matches[0] if matches else None

    async def fetch_and_store(self, url: str, name: Optional[str]) -> AttachmentRef:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                response = await client.get(url, headers=self._headers())
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise AttachmentFetchError(url, str(e)) from e

        # Slack answers an unauthorized download with its HTML login page
        content_type = response.headers.get("content-type", "")
        if content_type.startswith("text/html") and not (name or "").lower().endswith((".html", ".htm")):
            raise AttachmentFetchError(url, "received an HTML page, check the access token scopes")

        attachment_id = uuid.uuid4().hex
        suffix = Path(name).suffix if name else ""
        path = self.directory / f"{attachment_id}{suffix}"
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path.write_bytes(response.content)
        except OSError as e:
            raise AttachmentFetchError(url, f"cannot store file: {e}") from e

        logger.info("stored Slack file %s as %s (%d bytes)", name or url, path.name, len(response.content))
        return AttachmentRef(id=attachment_id, name=name)


# Global store instance (singleton)
_attachment_store: Optional[LocalAttachmentStore] = None


def get_attachment_store() -> LocalAttachmentStore:
    """Get or create the attachment store configured from settings."""
    global _attachment_store
    if _attachment_store is None:
        settings = get_settings()
        _attachment_store = LocalAttachmentStore(
            directory=settings.slack_attachment_dir,
            timeout=settings.slack_attachment_timeout,
        )
    return _attachment_store


def set_attachment_store(store: Optional[LocalAttachmentStore]) -> None:
    """Replace the global store (tests, alternative storage backends)."""
    global _attachment_store
    _attachment_store = store
