"""Build canonical events from classified Slack bodies.

Normalization runs in two phases: every derived field (event kind, message
kind, identities, text, payload) is computed once from the classified body,
then a frozen `CanonicalEvent` is built from the results. Nothing is
recomputed afterwards, so a later mutation of the input cannot make fields
disagree with each other.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from app.types import (
    BlockAction,
    CanonicalEvent,
    ChannelType,
    EventCallback,
    EventKind,
    ExtractionError,
    MessageKind,
    RawBody,
    SlashCommand,
)

from .extract import AttachmentSummary, extract_payload, extract_text, resolve_message_kind

EVENT_ID_PREFIX = "slack-"
MESSAGE_EVENT_TYPES = frozenset({"message", "app_mention"})


def generate_event_id() -> str:
    return EVENT_ID_PREFIX + str(uuid.uuid4())


@dataclass(frozen=True)
class NormalizerOptions:
    """Knobs for `normalize`.

    attachment_summary: describe only the first file ("first") or every file
        ("all") in the text of an attachments event.
    id_factory: id generator for bodies Slack did not give an id.
    """

    attachment_summary: AttachmentSummary = "first"
    id_factory: Callable[[], str] = field(default=generate_event_id)


def resolve_event_kind(body: RawBody) -> EventKind:
    """First match wins: bot marker -> echo, message-like body -> message."""
    if isinstance(body, EventCallback) and body.event.bot_id:
        return EventKind.ECHO
    if isinstance(body, BlockAction):
        return EventKind.MESSAGE
    if isinstance(body, EventCallback) and body.event.type in MESSAGE_EVENT_TYPES:
        return EventKind.MESSAGE
    if isinstance(body, SlashCommand):
        return EventKind.MESSAGE
    return EventKind.UNKNOWN


def resolve_event_id(body: RawBody, id_factory: Callable[[], str]) -> str:
    platform_id: Optional[str] = None
    if isinstance(body, EventCallback):
        platform_id = body.event.client_msg_id or body.event_id
    elif isinstance(body, (BlockAction, SlashCommand)):
        platform_id = body.trigger_id
    return platform_id or id_factory()


def _required(value: Optional[str], name: str) -> str:
    if not value:
        raise ExtractionError(name)
    return value


def resolve_sender_id(body: RawBody, channel_type: ChannelType) -> str:
    """Channel id for group/public conversations and interactions, user id for DMs."""
    if isinstance(body, BlockAction):
        return _required(body.channel, "channel")
    if isinstance(body, EventCallback):
        if channel_type == ChannelType.DIRECT:
            return _required(body.event.user, "event.user")
        return _required(body.event.channel, "event.channel")
    if isinstance(body, SlashCommand):
        if channel_type == ChannelType.DIRECT:
            return _required(body.user_id, "user_id")
        return _required(body.channel_id, "channel_id")
    raise ExtractionError("channel", f"{body.kind.value} bodies carry no sender")


def resolve_recipient_id(body: RawBody, event_kind: EventKind) -> Optional[str]:
    """Human user behind an echoed message; None for anything but echoes.

    On an echo `user` is the bot itself, so only `parent_user_id` qualifies.
    """
    if event_kind != EventKind.ECHO:
        return None
    if not isinstance(body, EventCallback):
        raise ExtractionError("event", "echo events come from event callbacks")
    return _required(body.event.parent_user_id, "event.parent_user_id")


def normalize(
    body: RawBody,
    channel_type: Optional[ChannelType],
    options: Optional[NormalizerOptions] = None,
) -> CanonicalEvent:
    """Convert a classified body into an immutable `CanonicalEvent`.

    Identities are only resolved for echo/message events; unknown events keep
    them empty.

    Raises:
        ExtractionError: when a field required by the resolved kinds is absent.
    """
    options = options or NormalizerOptions()

    event_kind = resolve_event_kind(body)
    message_kind = resolve_message_kind(body, event_kind)

    fields: Dict[str, Any] = {
        "id": resolve_event_id(body, options.id_factory),
        "body_kind": body.kind,
        "event_kind": event_kind,
        "message_kind": message_kind,
        "channel_type": channel_type,
        "raw_body": body,
    }
    if event_kind != EventKind.UNKNOWN:
        if channel_type is None:
            raise ExtractionError("channel_type")
        payload = extract_payload(body, message_kind)
        fields.update(
            sender_id=resolve_sender_id(body, channel_type),
            recipient_id=resolve_recipient_id(body, event_kind),
            payload=payload,
            text=extract_text(body, message_kind, payload, options.attachment_summary),
        )
    if isinstance(body, BlockAction):
        fields["response_url"] = body.response_url

    return CanonicalEvent(**fields)
