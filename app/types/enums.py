from __future__ import annotations

from enum import Enum


class BodyKind(str, Enum):
    """Discriminant for the webhook body shapes Slack can deliver.

    - URL_VERIFICATION: one-off handshake when the Events API URL is saved
    - EVENT_CALLBACK: Events API envelope wrapping an inner event
    - BLOCK_ACTIONS: interactive component (Block Kit) action
    - INTERACTIVE_MESSAGE: legacy interactive attachment action
    - SLASH_COMMAND: slash command invocation (form encoded)
    - UNKNOWN: anything else; acknowledged but never forwarded
    """

    URL_VERIFICATION = "url_verification"
    EVENT_CALLBACK = "event_callback"
    BLOCK_ACTIONS = "block_actions"
    INTERACTIVE_MESSAGE = "interactive_message"
    SLASH_COMMAND = "slash_command"
    UNKNOWN = "unknown"


class ChannelType(str, Enum):
    """Kind of conversation an inbound event belongs to.

    Slack only sends an explicit `channel_type` on some message events; the
    resolver falls back to the conversation id prefix otherwise.
    """

    DIRECT = "direct"
    GROUP = "group"
    PUBLIC = "public"


class EventKind(str, Enum):
    """Standard event kinds forwarded to the bot pipeline.

    - ECHO: the bot's own outgoing message seen again
    - MESSAGE: a user action the bot should react to
    - UNKNOWN: nothing actionable
    """

    ECHO = "echo"
    MESSAGE = "message"
    UNKNOWN = "unknown"


class MessageKind(str, Enum):
    """Semantic kind of an echo/message event."""

    TEXT = "text"
    POSTBACK = "postback"
    QUICK_REPLY = "quick_reply"
    ATTACHMENTS = "attachments"
    UNKNOWN = "unknown"


class FileType(str, Enum):
    """Semantic file type derived from a MIME type or file name."""

    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    FILE = "file"
    UNKNOWN = "unknown"


class PayloadType(str, Enum):
    ATTACHMENTS = "attachments"
