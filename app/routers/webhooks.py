from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional
from urllib.parse import parse_qsl

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import PlainTextResponse

from app.adapters.slack import SlackClient
from app.services.attachment_store import get_attachment_store
from app.services.event_pipeline import get_event_pipeline
from app.slack import AttachmentPrefetcher, classify
from app.types import (
    AttachmentFetchError,
    AuthenticationError,
    MessageKind,
    UnknownBody,
    UrlVerification,
)
from server.config import get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["webhooks"])

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def decode_body(raw_body: bytes, content_type: Optional[str]) -> Any:
    """Decode a JSON or form-encoded webhook body; None when undecodable."""
    try:
        if (content_type or "").startswith(FORM_CONTENT_TYPE):
            return dict(parse_qsl(raw_body.decode("utf-8"), keep_blank_values=True))
        return json.loads(raw_body)
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None


@router.post("/webhooks/slack", response_model=None)
async def slack_webhook(request: Request) -> Dict[str, Any] | PlainTextResponse:
    """Slack Events API / interactivity / slash command endpoint.

    - Verifies the signature against the raw body (401 on failure)
    - Echoes the challenge of URL verification handshakes
    - Normalizes the body to canonical events, prefetches attachments and
      dispatches each event to the bot pipeline

    Anything handled or ignored is acknowledged with 200 so Slack does not
    retry the delivery.
    """
    raw_body = await request.body()
    adapter = SlackClient()

    try:
        adapter.verify_request(raw_body, request.headers)
    except AuthenticationError as e:
        logger.warning("rejected Slack webhook: %s", e.reason)
        raise HTTPException(status_code=401, detail="Unauthorized webhook")

    body = classify(decode_body(raw_body, request.headers.get("content-type")))
    if isinstance(body, UrlVerification):
        logger.info("answering Slack url_verification")
        return PlainTextResponse(body.challenge)
    if isinstance(body, UnknownBody):
        return {"ok": True, "ignored": True, "reason": body.reason}

    events = adapter.normalize_body(body)
    if not events:
        return {"ok": True, "ignored": True, "reason": "Nothing to dispatch"}

    prefetcher = AttachmentPrefetcher(
        get_attachment_store(), deadline=get_settings().slack_attachment_timeout
    )
    pipeline = get_event_pipeline()
    dispatched = 0
    for event in events:
        if event.message_kind == MessageKind.QUICK_REPLY:
            try:
                await adapter.edit_quick_reply_source(event)
            except Exception:
                logger.exception("could not edit quick reply source for event %s", event.id)

        if event.message_kind == MessageKind.ATTACHMENTS:
            try:
                event = await prefetcher.prefetch(event)
            except AttachmentFetchError as e:
                logger.error("dropping event %s: %s", event.id, e)
                continue

        try:
            await pipeline.dispatch(event)
            dispatched += 1
        except Exception:
            logger.exception("bot pipeline failed on event %s", event.id)

    return {"ok": True, "dispatched": dispatched}
