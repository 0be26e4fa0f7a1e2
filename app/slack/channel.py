from __future__ import annotations

import logging
from typing import Optional

from app.types import (
    BlockAction,
    ChannelType,
    EventCallback,
    ExtractionError,
    RawBody,
    SlashCommand,
)

logger = logging.getLogger(__name__)

DIRECT_PREFIX = "D"
PUBLIC_PREFIX = "C"
APP_MENTION_TYPE = "app_mention"

# Slack `channel_type` values as sent on message events
_EXPLICIT_TYPES = {
    "im": ChannelType.DIRECT,
    "mpim": ChannelType.GROUP,
    "group": ChannelType.GROUP,
    "private": ChannelType.GROUP,
    "channel": ChannelType.PUBLIC,
    "public": ChannelType.PUBLIC,
}


def channel_type_from_id(conversation_id: str) -> ChannelType:
    """Infer the conversation kind from Slack's id naming convention."""
    if conversation_id.startswith(DIRECT_PREFIX):
        return ChannelType.DIRECT
    if conversation_id.startswith(PUBLIC_PREFIX):
        return ChannelType.PUBLIC
    return ChannelType.GROUP


def conversation_id(body: RawBody) -> Optional[str]:
    if isinstance(body, EventCallback):
        return body.event.channel
    if isinstance(body, BlockAction):
        return body.channel
    if isinstance(body, SlashCommand):
        return body.channel_id
    return None


def resolve_channel_type(body: RawBody) -> ChannelType:
    """Resolve whether the body belongs to a direct, group or public conversation.

    An explicit `channel_type` on the inner event is trusted; `app_mention`
    events never carry one, and neither do interactions or slash commands, so
    those use the conversation id prefix.

    Raises:
        ExtractionError: if the body carries no conversation id at all.
    """
    if isinstance(body, EventCallback) and body.event.type != APP_MENTION_TYPE:
        explicit = body.event.channel_type
        if explicit:
            resolved = _EXPLICIT_TYPES.get(explicit)
            if resolved is not None:
                return resolved
            logger.debug("unrecognized channel_type %r, using conversation id", explicit)

    channel = conversation_id(body)
    if not channel:
        raise ExtractionError("channel", f"cannot resolve channel type for {body.kind.value}")
    return channel_type_from_id(channel)
