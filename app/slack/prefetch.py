from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from app.types import (
    AttachmentFetchError,
    AttachmentPayload,
    AttachmentStore,
    CanonicalEvent,
    MessageKind,
    Payload,
)

logger = logging.getLogger(__name__)


class AttachmentPrefetcher:
    """Copy Slack hosted files to durable storage before bot hand-off.

    `url_private` links need the bot token and expire, so the bot pipeline
    must only ever see stored references. The first failing file aborts the
    whole prefetch: an event never leaves here with a partial attachment list.

    `deadline` bounds the whole prefetch in seconds, however many files the
    event carries; None means no overall limit.
    """

    def __init__(self, store: AttachmentStore, deadline: Optional[float] = None) -> None:
        self.store = store
        self.deadline = deadline

    async def _fetch_all(
        self, attachments: List[AttachmentPayload], stored: List[AttachmentPayload]
    ) -> None:
        for attachment in attachments:
            ref = attachment.payload
            if ref.url and not ref.id:
                try:
                    ref = await self.store.fetch_and_store(ref.url, ref.name)
                except AttachmentFetchError:
                    raise
                except Exception as e:
                    raise AttachmentFetchError(ref.url, str(e)) from e
            stored.append(AttachmentPayload(type=attachment.type, payload=ref))

    async def prefetch(self, event: CanonicalEvent) -> CanonicalEvent:
        """Return a copy of `event` whose attachments point at stored files.

        Events that are not attachments messages are returned unchanged.

        Raises:
            AttachmentFetchError: if any file cannot be fetched or stored, or
                the deadline passes first.
        """
        if event.message_kind != MessageKind.ATTACHMENTS or not isinstance(event.payload, Payload):
            return event

        attachments = event.payload.attachments
        stored: List[AttachmentPayload] = []
        try:
            await asyncio.wait_for(self._fetch_all(attachments, stored), timeout=self.deadline)
        except asyncio.TimeoutError as e:
            pending = attachments[len(stored)].payload
            raise AttachmentFetchError(
                pending.url or pending.id or "", f"prefetch exceeded {self.deadline}s deadline"
            ) from e

        logger.debug("prefetched %d attachment(s) for event %s", len(stored), event.id)
        return event.model_copy(
            update={"payload": Payload(attachments=stored), "attachments": stored}
        )
