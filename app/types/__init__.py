"""Core types for the Slack channel adapter.

This package centralizes all enums, webhook body models, the canonical event,
outbound message models, adapter protocols, errors and result schemas in one
place to keep the codebase discoverable. Most modules should import types from
here rather than directly from submodules.

Usage:
    from app.types import CanonicalEvent, EventKind, MessagingAdapter
"""

from .enums import BodyKind, ChannelType, EventKind, FileType, MessageKind, PayloadType
from .errors import (
    AttachmentFetchError,
    AuthenticationError,
    ClassificationError,
    ExtractionError,
    SlackAdapterError,
)
from .bodies import (
    BlockAction,
    EventCallback,
    InnerEvent,
    MessageAttachment,
    RawBody,
    SlackAction,
    SlackFile,
    SlashCommand,
    SourceMessage,
    UnknownBody,
    UrlVerification,
)
from .events import AttachmentPayload, AttachmentRef, CanonicalEvent, Payload
from .messages import OutboundMessage, SlackResponseMessage, SlackTextMessage
from .protocols import AttachmentStore, MessagingAdapter
from .results import SendResult
from .api import MessagePayload, SendMessageRequest, SendMessageResponse

__all__ = [
    "BodyKind",
    "ChannelType",
    "EventKind",
    "MessageKind",
    "FileType",
    "PayloadType",
    "SlackAdapterError",
    "AuthenticationError",
    "ClassificationError",
    "ExtractionError",
    "AttachmentFetchError",
    "RawBody",
    "UrlVerification",
    "EventCallback",
    "InnerEvent",
    "BlockAction",
    "SlackAction",
    "SlackFile",
    "SlashCommand",
    "SourceMessage",
    "MessageAttachment",
    "UnknownBody",
    "CanonicalEvent",
    "AttachmentPayload",
    "AttachmentRef",
    "Payload",
    "OutboundMessage",
    "SlackTextMessage",
    "SlackResponseMessage",
    "SendResult",
    "MessagingAdapter",
    "AttachmentStore",
    "MessagePayload",
    "SendMessageRequest",
    "SendMessageResponse",
]
