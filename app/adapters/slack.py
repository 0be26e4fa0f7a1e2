from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

import httpx

from app.services.credentials import SlackCredentials, get_slack_credentials
from app.slack import (
    NormalizerOptions,
    authenticate,
    classify,
    discard_link_buttons,
    normalize,
    resolve_channel_type,
    split_mixed_event,
)
from app.types import (
    BlockAction,
    CanonicalEvent,
    ExtractionError,
    MessagingAdapter,
    MessageKind,
    OutboundMessage,
    RawBody,
    SendResult,
    SlackResponseMessage,
    SlackTextMessage,
    UnknownBody,
    UrlVerification,
)
from server.config import get_settings

logger = logging.getLogger(__name__)

POST_MESSAGE_METHOD = "chat.postMessage"


class SlackClient(MessagingAdapter):
    """Slack adapter implementing the MessagingAdapter protocol.

    Verifies and normalizes inbound webhook calls, posts plain text replies
    with `chat.postMessage`, and answers interactions through their
    `response_url`. Credentials are read from `SlackCredentials` on every
    call so a rotated secret or token applies immediately.
    """

    def __init__(self, credentials: Optional[SlackCredentials] = None) -> None:
        settings = get_settings()
        self.api_base_url = settings.slack_api_base_url.rstrip("/") + "/"
        self.max_skew_minutes = settings.slack_max_skew_minutes
        self.response_timeout = settings.slack_response_timeout
        self.normalizer_options = NormalizerOptions(
            attachment_summary=settings.slack_attachment_summary
        )
        self.credentials = credentials or get_slack_credentials()

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.credentials.access_token}",
            "Content-Type": "application/json; charset=utf-8",
        }

    def send_endpoint(self) -> str:  # type: ignore[override]
        return self.api_base_url + POST_MESSAGE_METHOD

    def _build_payload(self, message: SlackTextMessage) -> Dict[str, Any]:
        """Unpack a SlackTextMessage into the `chat.postMessage` arguments.

        See: https://api.slack.com/methods/chat.postMessage
        """
        payload: Dict[str, Any] = {
            "channel": message.channel,
            "text": message.text,
            "mrkdwn": message.mrkdwn,
        }
        if message.thread_ts:
            payload["thread_ts"] = message.thread_ts
        return payload

    def send_message(self, message: OutboundMessage) -> SendResult:  # type: ignore[override]
        """Send a message; interaction responses go to their response_url."""
        message.ensure_valid_target()
        if isinstance(message, SlackResponseMessage):
            return self.send_response(message)
        if not isinstance(message, SlackTextMessage):
            raise ValueError(f"Unsupported message type: {message.message_type}")
        if not self.credentials.access_token:
            raise RuntimeError("Missing SLACK_ACCESS_TOKEN")

        payload = self._build_payload(message)
        with httpx.Client(timeout=15) as client:
            response = client.post(self.send_endpoint(), headers=self._headers(), json=payload)
            response.raise_for_status()
            data = response.json()

        # Slack reports API errors with HTTP 200 and ok=false
        ok = data.get("ok") if isinstance(data, dict) else None
        if ok is False:
            logger.warning("Slack API error on %s: %s", POST_MESSAGE_METHOD, data.get("error"))
        return SendResult(
            message_id=data.get("ts") if isinstance(data, dict) else None,
            ok=ok,
            data=data if isinstance(data, dict) else None,
        )

    def _response_body(self, message: SlackResponseMessage) -> Dict[str, Any]:
        message.ensure_valid_target()
        body: Dict[str, Any] = {
            "text": message.text,
            "replace_original": message.replace_original,
        }
        if message.response_type:
            body["response_type"] = message.response_type
        return body

    def send_response(self, message: SlackResponseMessage) -> SendResult:
        """Post to an interaction `response_url` (no token needed)."""
        body = self._response_body(message)
        with httpx.Client(timeout=self.response_timeout) as client:
            response = client.post(message.response_url, json=body)
            response.raise_for_status()
        return SendResult(ok=True, data={"status": response.status_code})

    async def respond(self, message: SlackResponseMessage) -> SendResult:
        """Async `send_response` for callers running inside the webhook request."""
        body = self._response_body(message)
        async with httpx.AsyncClient(timeout=self.response_timeout) as client:
            response = await client.post(message.response_url, json=body)
            response.raise_for_status()
        return SendResult(ok=True, data={"status": response.status_code})

    async def edit_quick_reply_source(self, event: CanonicalEvent) -> Optional[SendResult]:
        """Rewrite a quick reply prompt to show which option the user chose."""
        body = event.raw_body
        if event.message_kind != MessageKind.QUICK_REPLY or not isinstance(body, BlockAction):
            return None
        if not event.response_url:
            logger.warning("quick reply %s has no response_url, source not edited", event.id)
            return None

        source = body.source_message
        prompt = source.attachments[0].text if source and source.attachments else None
        action = body.actions[0]
        label = action.name or (action.text or {}).get("text") or action.value
        text = f"{prompt or ''}\n\n_You chose: *{label}*_".lstrip()
        return await self.respond(
            SlackResponseMessage(response_url=event.response_url, text=text, replace_original=True)
        )

    # Webhook helpers
    def verify_request(self, raw_body: bytes, headers: Mapping[str, str]) -> None:
        authenticate(
            self.credentials.signing_secret,
            raw_body,
            headers,
            max_skew_minutes=self.max_skew_minutes,
        )

    def normalize_body(self, body: RawBody) -> List[CanonicalEvent]:
        """Turn a classified body into canonical events.

        Link-button clicks, unknown bodies and URL verifications yield nothing.
        A part that misses required fields is logged and dropped; the other
        half of a split message is still returned.
        """
        body = discard_link_buttons(body)
        if isinstance(body, (UnknownBody, UrlVerification)):
            return []

        events: List[CanonicalEvent] = []
        for part in split_mixed_event(body):
            try:
                channel_type = resolve_channel_type(part)
                events.append(normalize(part, channel_type, self.normalizer_options))
            except ExtractionError as e:
                logger.warning("dropping Slack %s body: %s", part.kind.value, e)
        return events

    def normalize_events(self, body: Dict[str, Any]) -> List[CanonicalEvent]:
        """Classify and normalize a decoded webhook body."""
        return self.normalize_body(classify(body))
