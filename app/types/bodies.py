from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .enums import BodyKind


class SlackFile(BaseModel):
    """File object shared in a message (`files[]` of a message event).

    `url_private` is auth-walled: it only resolves with the bot access token
    as bearer, which is why the prefetcher copies files before hand-off.
    """

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    name: Optional[str] = None
    title: Optional[str] = None
    mimetype: Optional[str] = None
    filetype: Optional[str] = None
    size: Optional[int] = None
    url_private: Optional[str] = None
    url_private_download: Optional[str] = None


class MessageAttachment(BaseModel):
    """Legacy (secondary) message attachment."""

    model_config = ConfigDict(frozen=True)

    id: Optional[int] = None
    text: Optional[str] = None
    fallback: Optional[str] = None
    callback_id: Optional[str] = None


class SourceMessage(BaseModel):
    """The message an interactive component lives on."""

    model_config = ConfigDict(frozen=True)

    ts: Optional[str] = None
    text: Optional[str] = None
    bot_id: Optional[str] = None
    attachments: Optional[List[MessageAttachment]] = None


class SlackAction(BaseModel):
    """One element of an interaction's `actions` array."""

    model_config = ConfigDict(frozen=True)

    type: str = "button"
    value: Optional[str] = None
    name: Optional[str] = None
    action_id: Optional[str] = None
    block_id: Optional[str] = None
    action_ts: Optional[str] = None
    text: Optional[Dict[str, Any]] = None


class InnerEvent(BaseModel):
    """Inner event of an Events API envelope (`message`, `app_mention`, ...).

    Only `type` is guaranteed by Slack; everything else depends on the event
    type and subtype.
    """

    model_config = ConfigDict(frozen=True)

    type: str
    subtype: Optional[str] = None
    text: Optional[str] = None
    files: Optional[List[SlackFile]] = None
    blocks: Optional[List[Dict[str, Any]]] = None
    attachments: Optional[List[MessageAttachment]] = None
    channel: Optional[str] = None
    channel_type: Optional[str] = None
    user: Optional[str] = None
    bot_id: Optional[str] = None
    parent_user_id: Optional[str] = None
    client_msg_id: Optional[str] = None
    ts: Optional[str] = None
    event_ts: Optional[str] = None
    thread_ts: Optional[str] = None


class UrlVerification(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal[BodyKind.URL_VERIFICATION] = BodyKind.URL_VERIFICATION
    challenge: str


class EventCallback(BaseModel):
    """Events API envelope (`type: event_callback`)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[BodyKind.EVENT_CALLBACK] = BodyKind.EVENT_CALLBACK
    api_app_id: Optional[str] = None
    team_id: Optional[str] = None
    event: InnerEvent
    event_id: Optional[str] = None
    event_time: Optional[int] = None


class BlockAction(BaseModel):
    """Interactive component action, Block Kit or legacy attachment based.

    Slack nests `user`, `channel` and `team` as objects; the classifier
    flattens them to ids before building this model.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal[BodyKind.BLOCK_ACTIONS, BodyKind.INTERACTIVE_MESSAGE] = (
        BodyKind.BLOCK_ACTIONS
    )
    actions: List[SlackAction] = Field(min_length=1)
    channel: Optional[str] = None
    user: Optional[str] = None
    team_id: Optional[str] = None
    api_app_id: Optional[str] = None
    callback_id: Optional[str] = None
    message: Optional[SourceMessage] = None
    original_message: Optional[SourceMessage] = None
    message_ts: Optional[str] = None
    action_ts: Optional[str] = None
    response_url: Optional[str] = None
    trigger_id: Optional[str] = None

    @property
    def source_message(self) -> Optional[SourceMessage]:
        """Message carrying the component (`original_message` for legacy payloads)."""
        return self.original_message or self.message


class SlashCommand(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal[BodyKind.SLASH_COMMAND] = BodyKind.SLASH_COMMAND
    command: str
    text: str = ""
    user_id: Optional[str] = None
    channel_id: Optional[str] = None
    team_id: Optional[str] = None
    response_url: Optional[str] = None
    trigger_id: Optional[str] = None


class UnknownBody(BaseModel):
    """Anything the classifier could not map; acknowledged, never forwarded."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[BodyKind.UNKNOWN] = BodyKind.UNKNOWN
    reason: str = ""
    raw: Dict[str, Any] = Field(default_factory=dict)


RawBody = Union[UrlVerification, EventCallback, BlockAction, SlashCommand, UnknownBody]
