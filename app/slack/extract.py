"""Message kind classification and payload/text extraction."""

from __future__ import annotations

import mimetypes
from typing import List, Literal, Optional, Union

from app.types import (
    AttachmentPayload,
    AttachmentRef,
    BlockAction,
    EventCallback,
    EventKind,
    ExtractionError,
    FileType,
    MessageKind,
    Payload,
    RawBody,
    SlackFile,
    SlashCommand,
)
from app.utils import strip_mentions

# callback_id set on outgoing quick reply prompts
QUICK_REPLIES_CALLBACK_ID = "quick_replies"
ATTACHMENT_TEXT_PREFIX = "attachment"

AttachmentSummary = Literal["first", "all"]

_MIME_FAMILIES = {
    "image": FileType.IMAGE,
    "video": FileType.VIDEO,
    "audio": FileType.AUDIO,
}


def file_type_from_mime(mimetype: Optional[str]) -> FileType:
    """Map a MIME type to a semantic file type (`image/png` -> image)."""
    if not mimetype or "/" not in mimetype:
        return FileType.UNKNOWN
    family = mimetype.split("/", 1)[0].strip().lower()
    return _MIME_FAMILIES.get(family, FileType.FILE)


def resolve_file_type(file: SlackFile) -> FileType:
    """Use the declared MIME type, else guess it from the file name or URL."""
    mimetype = file.mimetype
    if not mimetype:
        for candidate in (file.name, file.url_private):
            if candidate:
                mimetype, _ = mimetypes.guess_type(candidate)
                if mimetype:
                    break
    return file_type_from_mime(mimetype)


def is_quick_reply(body: RawBody) -> bool:
    """True when the action answers a prompt we sent as quick replies.

    The marker lives on the source message's first legacy attachment, not on
    the inbound action itself.
    """
    if not isinstance(body, BlockAction):
        return False
    source = body.source_message
    if source is None or not source.attachments:
        return False
    return source.attachments[0].callback_id == QUICK_REPLIES_CALLBACK_ID


def resolve_message_kind(body: RawBody, event_kind: EventKind) -> MessageKind:
    """Classify an echo/message body; first match wins."""
    if event_kind == EventKind.UNKNOWN:
        return MessageKind.UNKNOWN

    if is_quick_reply(body):
        return MessageKind.QUICK_REPLY
    if isinstance(body, BlockAction) and body.actions:
        return MessageKind.POSTBACK
    if isinstance(body, EventCallback):
        inner = body.event
        if inner.files:
            return MessageKind.ATTACHMENTS
        if inner.text or inner.blocks or inner.attachments:
            return MessageKind.TEXT
    if isinstance(body, SlashCommand):
        return MessageKind.TEXT
    return MessageKind.UNKNOWN


def build_attachments(files: List[SlackFile]) -> List[AttachmentPayload]:
    attachments: List[AttachmentPayload] = []
    for index, file in enumerate(files):
        url = file.url_private or file.url_private_download
        if not url and not file.id:
            raise ExtractionError(f"files[{index}].url_private", "file has neither url nor id")
        attachments.append(
            AttachmentPayload(
                type=resolve_file_type(file),
                payload=AttachmentRef(
                    id=None if url else file.id,
                    url=url,
                    name=file.name or file.title,
                ),
            )
        )
    return attachments


def summarize_attachments(
    attachments: List[AttachmentPayload], mode: AttachmentSummary = "first"
) -> str:
    """Text summary `attachment:<type>:<name>` of an attachments message.

    With `mode="first"` only the first file is described; `"all"` describes
    every file, one per line.
    """
    selected = attachments[:1] if mode == "first" else attachments
    lines = []
    for attachment in selected:
        ref = attachment.payload
        label = ref.name or ref.url or ref.id or ""
        lines.append(f"{ATTACHMENT_TEXT_PREFIX}:{attachment.type.value}:{label}")
    return "\n".join(lines)


def _first_action_value(body: RawBody) -> str:
    if not isinstance(body, BlockAction):
        raise ExtractionError("actions")
    value = body.actions[0].value
    if value is None:
        raise ExtractionError("actions[0].value")
    return value


def extract_payload(body: RawBody, message_kind: MessageKind) -> Optional[Union[Payload, str]]:
    """Return the structured content for postback, quick reply and attachments kinds."""
    if message_kind in (MessageKind.POSTBACK, MessageKind.QUICK_REPLY):
        return _first_action_value(body)
    if message_kind == MessageKind.ATTACHMENTS:
        if not isinstance(body, EventCallback) or not body.event.files:
            raise ExtractionError("event.files")
        return Payload(attachments=build_attachments(body.event.files))
    return None


def extract_text(
    body: RawBody,
    message_kind: MessageKind,
    payload: Optional[Union[Payload, str]] = None,
    attachment_summary: AttachmentSummary = "first",
) -> Optional[str]:
    """Return the normalized text of an event.

    Free text has mention markup stripped; postbacks and quick replies read as
    their value; attachments read as a summary of the files.
    """
    if message_kind in (MessageKind.POSTBACK, MessageKind.QUICK_REPLY):
        return payload if isinstance(payload, str) else _first_action_value(body)
    if message_kind == MessageKind.ATTACHMENTS:
        if isinstance(payload, Payload):
            return summarize_attachments(payload.attachments, attachment_summary)
        return None
    if message_kind == MessageKind.TEXT:
        if isinstance(body, SlashCommand):
            return strip_mentions(f"{body.command} {body.text}")
        if isinstance(body, EventCallback) and body.event.text is not None:
            return strip_mentions(body.event.text)
    return None
