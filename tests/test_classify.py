from __future__ import annotations

import json

from app.slack import classify, discard_link_buttons, split_mixed_event
from app.types import (
    BlockAction,
    BodyKind,
    EventCallback,
    SlashCommand,
    UnknownBody,
    UrlVerification,
)
from tests.fixtures.slack_events import (
    interaction,
    message_event,
    slack_file,
    slash_command,
    url_verification,
)


def test_url_verification() -> None:
    body = classify(url_verification("abc123"))
    assert isinstance(body, UrlVerification)
    assert body.challenge == "abc123"


def test_url_verification_wins_over_other_shapes() -> None:
    data = url_verification("c1")
    data["event"] = {"type": "message", "text": "hi"}
    data["command"] = "/x"
    assert isinstance(classify(data), UrlVerification)


def test_url_verification_without_challenge_is_unknown() -> None:
    body = classify({"type": "url_verification"})
    assert isinstance(body, UnknownBody)


def test_payload_form_field_block_actions() -> None:
    body = classify({"payload": json.dumps(interaction(value="GO"))})
    assert isinstance(body, BlockAction)
    assert body.kind == BodyKind.BLOCK_ACTIONS
    assert body.channel == "C0123456789"
    assert body.user == "U0123456789"
    assert body.team_id == "T0001"
    assert body.actions[0].value == "GO"


def test_payload_form_field_legacy_interactive_message() -> None:
    data = interaction(interaction_type="interactive_message", quick_reply=True)
    body = classify({"payload": json.dumps(data)})
    assert isinstance(body, BlockAction)
    assert body.kind == BodyKind.INTERACTIVE_MESSAGE
    assert body.source_message is not None
    assert body.source_message.attachments[0].callback_id == "quick_replies"


def test_payload_wins_over_event() -> None:
    data = {
        "payload": json.dumps(interaction()),
        "event": {"type": "message", "text": "hi"},
    }
    assert isinstance(classify(data), BlockAction)


def test_invalid_payload_json_is_unknown() -> None:
    body = classify({"payload": "{not json"})
    assert isinstance(body, UnknownBody)
    assert "not valid JSON" in body.reason


def test_unsupported_interaction_type_is_unknown() -> None:
    body = classify({"payload": json.dumps({"type": "view_submission", "view": {}})})
    assert isinstance(body, UnknownBody)


def test_interaction_without_actions_is_unknown() -> None:
    data = interaction()
    data["actions"] = []
    assert isinstance(classify({"payload": json.dumps(data)}), UnknownBody)


def test_event_callback() -> None:
    body = classify(message_event(text="hi"))
    assert isinstance(body, EventCallback)
    assert body.event.text == "hi"
    assert body.event_id == "Ev0123456789"


def test_event_without_type_is_unknown() -> None:
    assert isinstance(classify({"event": {"text": "hi"}}), UnknownBody)


def test_top_level_actions() -> None:
    data = interaction()
    body = classify(data)
    assert isinstance(body, BlockAction)
    assert body.channel == "C0123456789"


def test_top_level_actions_channel_from_container() -> None:
    data = interaction(channel=None)
    data["container"] = {"type": "message", "channel_id": "D0123456789"}
    body = classify(data)
    assert isinstance(body, BlockAction)
    assert body.channel == "D0123456789"


def test_slash_command() -> None:
    body = classify(slash_command(command="/weather", text="Paris"))
    assert isinstance(body, SlashCommand)
    assert body.command == "/weather"
    assert body.channel_id == "C0123456789"


def test_unknown_shapes() -> None:
    assert isinstance(classify({"hello": "world"}), UnknownBody)
    assert isinstance(classify(None), UnknownBody)
    assert isinstance(classify(["not", "an", "object"]), UnknownBody)


def test_classify_is_pure() -> None:
    data = message_event(text="hi")
    assert classify(data) == classify(data)


def test_link_button_is_discarded() -> None:
    body = discard_link_buttons(classify({"payload": json.dumps(interaction(value="url"))}))
    assert isinstance(body, UnknownBody)
    assert body.reason == "link button"


def test_regular_button_is_kept() -> None:
    body = classify({"payload": json.dumps(interaction(value="GO"))})
    assert discard_link_buttons(body) is body


def test_split_text_and_files() -> None:
    body = classify(message_event(text="hi", files=[slack_file()]))
    parts = split_mixed_event(body)
    assert len(parts) == 2
    text_part, files_part = parts
    assert isinstance(text_part, EventCallback) and isinstance(files_part, EventCallback)
    assert text_part.event.text == "hi" and text_part.event.files is None
    assert files_part.event.text is None and len(files_part.event.files) == 1
    assert text_part.event.client_msg_id != files_part.event.client_msg_id


def test_split_without_client_msg_id_uses_event_id() -> None:
    body = classify(message_event(text="hi", files=[slack_file()], client_msg_id=None))
    _, files_part = split_mixed_event(body)
    assert files_part.event.client_msg_id == "Ev0123456789:files"


def test_no_split_for_single_kind_bodies() -> None:
    text_only = classify(message_event(text="hi"))
    files_only = classify(message_event(text=None, files=[slack_file()]))
    assert split_mixed_event(text_only) == [text_only]
    assert split_mixed_event(files_only) == [files_only]
