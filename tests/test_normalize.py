from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from app.slack import NormalizerOptions, classify, normalize, resolve_channel_type
from app.slack.extract import file_type_from_mime
from app.types import (
    BodyKind,
    ChannelType,
    EventKind,
    ExtractionError,
    FileType,
    MessageKind,
    Payload,
)
from tests.fixtures.slack_events import (
    FILE_URL,
    RESPONSE_URL,
    interaction,
    message_event,
    slack_file,
    slash_command,
)


def build(data, options=None):
    body = classify(data)
    return normalize(body, resolve_channel_type(body), options)


def test_public_text_message() -> None:
    event = build(message_event(text="Hello there"))
    assert event.id == "5e1c3a4b-msg"
    assert event.body_kind == BodyKind.EVENT_CALLBACK
    assert event.event_kind == EventKind.MESSAGE
    assert event.message_kind == MessageKind.TEXT
    assert event.channel_type == ChannelType.PUBLIC
    assert event.sender_id == "C0123456789"
    assert event.recipient_id is None
    assert event.text == "Hello there"
    assert event.payload is None
    assert event.response_url is None


def test_direct_message_sender_is_user() -> None:
    event = build(message_event(channel="D0123456789", channel_type="im"))
    assert event.channel_type == ChannelType.DIRECT
    assert event.sender_id == "U0123456789"


def test_group_message_sender_is_channel() -> None:
    event = build(message_event(channel="G0123456789", channel_type="mpim"))
    assert event.channel_type == ChannelType.GROUP
    assert event.sender_id == "G0123456789"


def test_mentions_are_stripped() -> None:
    event = build(message_event(text="<@U12345678> hello", event_type="app_mention"))
    assert event.event_kind == EventKind.MESSAGE
    assert event.text == "hello"


def test_labelled_mentions_are_stripped() -> None:
    event = build(message_event(text="ping <@U12345678|ada> and <@W0AB12CD3>"))
    assert event.text == "ping  and"


def test_echo_wins_over_message() -> None:
    event = build(message_event(text="Hi!", bot_id="B0001", parent_user_id="U0999999999"))
    assert event.event_kind == EventKind.ECHO
    assert event.message_kind == MessageKind.TEXT
    assert event.recipient_id == "U0999999999"


def test_direct_echo_recipient_is_not_the_bot() -> None:
    event = build(
        message_event(
            text="Hi!",
            channel="D0123456789",
            channel_type="im",
            user="UBOTSELF",
            bot_id="B0001",
            parent_user_id="U0999999999",
        )
    )
    assert event.event_kind == EventKind.ECHO
    assert event.recipient_id == "U0999999999"
    assert event.recipient_id != "UBOTSELF"


def test_echo_without_parent_user_fails() -> None:
    # `user` on an echo is the bot and never stands in for the recipient
    with pytest.raises(ExtractionError) as excinfo:
        build(message_event(text="Hi!", bot_id="B0001", user="UBOTSELF"))
    assert excinfo.value.field == "event.parent_user_id"


def test_postback() -> None:
    event = build({"payload": json.dumps(interaction(value="GET_STARTED"))})
    assert event.body_kind == BodyKind.BLOCK_ACTIONS
    assert event.event_kind == EventKind.MESSAGE
    assert event.message_kind == MessageKind.POSTBACK
    assert event.payload == "GET_STARTED"
    assert event.text == "GET_STARTED"
    assert event.sender_id == "C0123456789"
    assert event.response_url == RESPONSE_URL
    assert event.id == "13345224609.738474920.8088930838d88f008e0"


def test_quick_reply_wins_over_postback() -> None:
    data = interaction(value="RED", interaction_type="interactive_message", quick_reply=True)
    event = build({"payload": json.dumps(data)})
    assert event.body_kind == BodyKind.INTERACTIVE_MESSAGE
    assert event.message_kind == MessageKind.QUICK_REPLY
    assert event.payload == "RED"
    assert event.text == "RED"


def test_postback_without_value_fails() -> None:
    with pytest.raises(ExtractionError) as excinfo:
        build({"payload": json.dumps(interaction(value=None))})
    assert excinfo.value.field == "actions[0].value"


def test_attachments_message() -> None:
    event = build(message_event(text=None, files=[slack_file()]))
    assert event.message_kind == MessageKind.ATTACHMENTS
    assert isinstance(event.payload, Payload)
    (attachment,) = event.payload.attachments
    assert attachment.type == FileType.IMAGE
    assert attachment.payload.url == FILE_URL
    assert attachment.payload.id is None
    assert event.text == "attachment:image:photo.png"
    # stored refs only appear after prefetch
    assert event.attachments == []


def test_attachment_summary_modes() -> None:
    files = [
        slack_file(),
        slack_file(file_id="F0002", name="report.pdf", mimetype=None, url=FILE_URL + "2"),
    ]
    first = build(message_event(text=None, files=files))
    every = build(message_event(text=None, files=files), NormalizerOptions(attachment_summary="all"))
    assert first.text == "attachment:image:photo.png"
    assert every.text == "attachment:image:photo.png\nattachment:file:report.pdf"


def test_file_without_url_keeps_id() -> None:
    event = build(message_event(text=None, files=[slack_file(url=None)]))
    ref = event.payload.attachments[0].payload
    assert ref.id == "F0001"
    assert ref.url is None


@pytest.mark.parametrize(
    "mimetype, expected",
    [
        ("image/jpeg", FileType.IMAGE),
        ("video/mp4", FileType.VIDEO),
        ("audio/ogg", FileType.AUDIO),
        ("application/pdf", FileType.FILE),
        (None, FileType.UNKNOWN),
        ("garbage", FileType.UNKNOWN),
    ],
)
def test_file_type_from_mime(mimetype, expected) -> None:
    assert file_type_from_mime(mimetype) == expected


def test_slash_command_is_text_message() -> None:
    event = build(slash_command(command="/weather", text="<@U12345678> Paris"))
    assert event.body_kind == BodyKind.SLASH_COMMAND
    assert event.event_kind == EventKind.MESSAGE
    assert event.message_kind == MessageKind.TEXT
    assert event.text == "/weather  Paris"
    assert event.sender_id == "C0123456789"
    assert event.id == "13345224609.738474920.slash"


def test_unknown_event_type_keeps_identities_empty() -> None:
    data = message_event(event_type="reaction_added")
    event = build(data)
    assert event.event_kind == EventKind.UNKNOWN
    assert event.message_kind == MessageKind.UNKNOWN
    assert event.sender_id is None
    assert event.text is None
    assert event.id == "5e1c3a4b-msg"


def test_missing_sender_fails() -> None:
    with pytest.raises(ExtractionError) as excinfo:
        build(message_event(channel="D0123456789", channel_type="im", user=None))
    assert excinfo.value.field == "event.user"


def test_event_id_fallbacks() -> None:
    envelope = build(message_event(client_msg_id=None))
    assert envelope.id == "Ev0123456789"

    bare = classify({"event": {"type": "message", "channel": "C1", "text": "hi"}})
    generated = normalize(
        bare, ChannelType.PUBLIC, NormalizerOptions(id_factory=lambda: "generated-1")
    )
    assert generated.id == "generated-1"


def test_default_generated_id_format() -> None:
    bare = classify({"event": {"type": "message", "channel": "C1", "text": "hi"}})
    event = normalize(bare, ChannelType.PUBLIC)
    assert event.id.startswith("slack-")
    assert len(event.id) == len("slack-") + 36


def test_normalize_is_deterministic() -> None:
    data = message_event(text="<@U12345678> hi", files=None)
    assert build(data) == build(data)


def test_canonical_event_is_frozen() -> None:
    event = build(message_event())
    with pytest.raises(ValidationError):
        event.text = "changed"
