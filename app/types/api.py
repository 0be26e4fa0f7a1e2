from __future__ import annotations

from typing import Annotated, Union

from pydantic import BaseModel, Field

from .messages import SlackResponseMessage, SlackTextMessage
from .results import SendResult


# Public discriminated union alias used by HTTP layer
MessagePayload = Annotated[
    Union[SlackTextMessage, SlackResponseMessage],
    Field(discriminator="message_type"),
]


class SendMessageRequest(BaseModel):
    """Generic outbound send request model for API endpoints.

    Attributes:
        provider: Adapter to use. Defaults to "slack".
        message: One of SlackTextMessage or SlackResponseMessage. The
            `message_type` discriminator in JSON must be "text" or "response".

    Examples:
        Text:
            {
              "provider": "slack",
              "message": {
                "message_type": "text",
                "channel": "C0123456789",
                "text": "Hello"
              }
            }

        Response (edit the message an interaction came from):
            {
              "message": {
                "message_type": "response",
                "response_url": "https://hooks.slack.com/actions/T1/1/abc",
                "text": "Done",
                "replace_original": true
              }
            }
    """

    provider: str = Field(default="slack")
    message: MessagePayload


class SendMessageResponse(BaseModel):
    """Standard response schema for outbound send API endpoints.

    Attributes:
        ok: Indicates request handling success.
        result: Adapter `SendResult` containing provider response details.
    """

    ok: bool
    result: SendResult
