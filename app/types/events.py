from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .bodies import RawBody
from .enums import BodyKind, ChannelType, EventKind, FileType, MessageKind, PayloadType


class AttachmentRef(BaseModel):
    """Reference to a file: a transient Slack URL or a durable stored id."""

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    url: Optional[str] = None
    name: Optional[str] = None


class AttachmentPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: FileType
    payload: AttachmentRef


class Payload(BaseModel):
    """Structured content of an attachments message."""

    model_config = ConfigDict(frozen=True)

    type: PayloadType = PayloadType.ATTACHMENTS
    attachments: List[AttachmentPayload] = Field(default_factory=list)


class CanonicalEvent(BaseModel):
    """Provider-normalized inbound event handed to the bot pipeline.

    Built once per inbound call (or per split half) by
    `app.slack.normalize.normalize`; every derived field is computed up front
    and the instance is frozen afterwards.

    Attributes:
        id: Slack id of the message/interaction, else a generated `slack-<uuid>`.
        body_kind: Which webhook shape produced the event.
        event_kind: echo, message or unknown.
        message_kind: Semantic kind; `unknown` whenever event_kind is unknown.
        channel_type: Conversation kind the identities were resolved against.
        sender_id: Channel id (group/public, interactions) or user id (direct).
        recipient_id: Human user behind an echoed message; None otherwise.
        text: Mention-stripped text, postback value or attachment summary.
        payload: Postback/quick reply value or attachments `Payload`.
        attachments: Stored attachments; only populated by the prefetcher.
        response_url: Interaction response URL (interactive bodies only).
        raw_body: The classified body the event was built from.

    Example:
        >>> from app.types import CanonicalEvent, EventKind, MessageKind
        >>> CanonicalEvent(id="m1", event_kind=EventKind.MESSAGE, message_kind=MessageKind.TEXT, text="hi")
    """

    model_config = ConfigDict(frozen=True)

    id: str
    body_kind: BodyKind = BodyKind.UNKNOWN
    event_kind: EventKind = EventKind.UNKNOWN
    message_kind: MessageKind = MessageKind.UNKNOWN
    channel_type: Optional[ChannelType] = None
    sender_id: Optional[str] = None
    recipient_id: Optional[str] = None
    text: Optional[str] = None
    payload: Optional[Union[Payload, str]] = None
    attachments: List[AttachmentPayload] = Field(default_factory=list)
    response_url: Optional[str] = None
    raw_body: Optional[RawBody] = None
