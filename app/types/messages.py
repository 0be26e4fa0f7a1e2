from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel
from pydantic import field_validator, model_validator

# chat.postMessage truncates longer texts
MAX_TEXT_LENGTH = 40000


class OutboundMessage(BaseModel):
    """Base class for outbound Slack messages.

    Anatomy:
    - channel: conversation id (C..., G... or D...) to post into
    - thread_ts: parent message timestamp when replying in a thread
    - response_url: interaction URL, used instead of `channel` for responses

    Rich block formatting is left to the bot engine; these models only carry
    what the adapter itself needs to send.

    Example:
        >>> from app.types import SlackTextMessage
        >>> msg = SlackTextMessage(channel="C123", text="Hello")
        >>> msg.ensure_valid_target()
    """

    channel: Optional[str] = None
    thread_ts: Optional[str] = None
    response_url: Optional[str] = None

    message_type: str

    def ensure_valid_target(self) -> None:
        """Validate that the message can be routed somewhere."""
        if not self.channel and not self.response_url:
            raise ValueError("Either channel or response_url must be provided")


class SlackTextMessage(OutboundMessage):
    """Plain (mrkdwn) text posted with `chat.postMessage`.

    Examples:
        >>> SlackTextMessage(channel="C123", text="Hi")
        >>> SlackTextMessage(channel="C123", text="In thread", thread_ts="1700000000.000100")
    """

    text: str
    mrkdwn: bool = True
    message_type: Literal["text"] = "text"

    @field_validator("text")
    @classmethod
    def _validate_text(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("text cannot be empty")
        if len(v) > MAX_TEXT_LENGTH:
            raise ValueError(f"text exceeds {MAX_TEXT_LENGTH} characters")
        return v

    @model_validator(mode="after")
    def _require_channel(self) -> "SlackTextMessage":
        if self.response_url is not None:
            raise ValueError("text messages are posted to a channel, not a response_url")
        return self


class SlackResponseMessage(OutboundMessage):
    """Message sent to an interaction `response_url`.

    Fields:
        text: new content
        replace_original: edit the message the component lives on
        response_type: `in_channel` or `ephemeral` for new messages
    """

    text: str
    replace_original: bool = True
    response_type: Optional[Literal["in_channel", "ephemeral"]] = None
    message_type: Literal["response"] = "response"

    @field_validator("response_url")
    @classmethod
    def _validate_response_url(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.startswith("https://"):
            raise ValueError("response_url must use https scheme")
        return v

    def ensure_valid_target(self) -> None:
        if not self.response_url:
            raise ValueError("response_url must be provided")
