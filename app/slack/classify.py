"""Classification of decoded Slack webhook bodies.

Several body shapes can satisfy naive predicates at the same time (an
interaction payload also carries `type`, a command body may carry `text`), so
`classify` is a literal first-match-wins chain. Re-ordering the checks changes
behavior.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from app.types import (
    BlockAction,
    BodyKind,
    ClassificationError,
    EventCallback,
    RawBody,
    SlashCommand,
    UnknownBody,
    UrlVerification,
)

logger = logging.getLogger(__name__)

URL_VERIFICATION_TYPE = "url_verification"
# value carried by buttons that only open a link
LINK_BUTTON_VALUE = "url"
FILES_ID_SUFFIX = ":files"

_INTERACTIVE_KINDS = {
    BodyKind.BLOCK_ACTIONS.value: BodyKind.BLOCK_ACTIONS,
    BodyKind.INTERACTIVE_MESSAGE.value: BodyKind.INTERACTIVE_MESSAGE,
}


def _object_id(value: Any) -> Optional[str]:
    """Slack sends user/channel/team either as an id or as `{"id": ...}`."""
    if isinstance(value, dict):
        value = value.get("id")
    return value if isinstance(value, str) and value else None


def _interaction(data: Dict[str, Any], kind: BodyKind) -> BlockAction:
    channel = _object_id(data.get("channel"))
    container = data.get("container")
    if channel is None and isinstance(container, dict):
        channel = _object_id(container.get("channel_id"))
    fields = {
        "kind": kind,
        "actions": data.get("actions"),
        "channel": channel,
        "user": _object_id(data.get("user")),
        "team_id": _object_id(data.get("team")) or data.get("team_id"),
        "api_app_id": data.get("api_app_id"),
        "callback_id": data.get("callback_id"),
        "message": data.get("message"),
        "original_message": data.get("original_message"),
        "message_ts": data.get("message_ts"),
        "action_ts": data.get("action_ts"),
        "response_url": data.get("response_url"),
        "trigger_id": data.get("trigger_id"),
    }
    try:
        return BlockAction.model_validate(fields)
    except ValidationError as e:
        raise ClassificationError(f"invalid interaction payload: {e}") from e


def _parse_payload_field(raw: str) -> BlockAction:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ClassificationError(f"payload field is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ClassificationError("payload field is not a JSON object")
    kind = _INTERACTIVE_KINDS.get(data.get("type"))
    if kind is None:
        raise ClassificationError(f"unsupported interaction type: {data.get('type')!r}")
    return _interaction(data, kind)


def _classify(body: Dict[str, Any]) -> RawBody:
    if body.get("type") == URL_VERIFICATION_TYPE:
        challenge = body.get("challenge")
        if not isinstance(challenge, str):
            raise ClassificationError("url_verification without challenge")
        return UrlVerification(challenge=challenge)

    if isinstance(body.get("payload"), str):
        return _parse_payload_field(body["payload"])

    if isinstance(body.get("event"), dict):
        try:
            return EventCallback.model_validate(body)
        except ValidationError as e:
            raise ClassificationError(f"invalid event callback: {e}") from e

    if isinstance(body.get("actions"), list):
        kind = _INTERACTIVE_KINDS.get(body.get("type"), BodyKind.BLOCK_ACTIONS)
        return _interaction(body, kind)

    if "command" in body:
        try:
            return SlashCommand.model_validate(body)
        except ValidationError as e:
            raise ClassificationError(f"invalid slash command: {e}") from e

    raise ClassificationError("body matches no known shape")


def classify(body: Any) -> RawBody:
    """Tag a decoded webhook body with its body kind.

    Decision order (first match wins):
        1. `type == "url_verification"` -> UrlVerification
        2. `payload` JSON string -> BlockAction (block_actions / interactive_message)
        3. `event` object -> EventCallback
        4. top-level `actions` array -> BlockAction
        5. `command` field -> SlashCommand
        6. UnknownBody

    Never raises: structural problems yield an `UnknownBody` carrying the reason.
    """
    if not isinstance(body, dict):
        return UnknownBody(reason="body is not a JSON object")
    try:
        return _classify(body)
    except ClassificationError as e:
        logger.debug("unclassified Slack body: %s", e)
        return UnknownBody(reason=str(e), raw=body)


def discard_link_buttons(body: RawBody) -> RawBody:
    """Drop clicks on link-styled buttons; they open a URL and carry no intent."""
    if isinstance(body, BlockAction) and body.actions[0].value == LINK_BUTTON_VALUE:
        return UnknownBody(reason="link button", raw=body.model_dump(mode="json"))
    return body


def split_mixed_event(body: RawBody) -> List[RawBody]:
    """Split a message carrying both text and files into two bodies.

    Message kinds are single-valued, so a mixed message would otherwise lose
    one side. The files half gets a distinct `client_msg_id` (derived from the
    message or envelope id) so downstream de-duplication keeps both.
    """
    if not isinstance(body, EventCallback):
        return [body]
    inner = body.event
    if not inner.text or not inner.files:
        return [body]

    text_only = inner.model_copy(update={"files": None})
    files_update: Dict[str, Any] = {"text": None}
    base_id = inner.client_msg_id or body.event_id
    if base_id:
        files_update["client_msg_id"] = base_id + FILES_ID_SUFFIX
    files_only = inner.model_copy(update=files_update)
    return [
        body.model_copy(update={"event": text_only}),
        body.model_copy(update={"event": files_only}),
    ]
