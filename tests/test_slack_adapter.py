from __future__ import annotations

import json

import httpx
import pytest
import respx

from app.adapters.registry import AdapterRegistry
from app.adapters.slack import SlackClient
from app.services.credentials import SlackCredentials, get_slack_credentials
from app.slack import classify, normalize, resolve_channel_type
from app.types import EventKind, MessageKind, SlackResponseMessage, SlackTextMessage
from server.config import get_settings
from tests.fixtures.slack_events import ACCESS_TOKEN, RESPONSE_URL, interaction, message_event, slack_file

POST_MESSAGE_URL = "https://slack.com/api/chat.postMessage"


@respx.mock
def test_send_text_message() -> None:
    adapter = AdapterRegistry.get("slack")
    assert adapter.send_endpoint() == POST_MESSAGE_URL

    route = respx.post(POST_MESSAGE_URL).mock(
        return_value=httpx.Response(200, json={"ok": True, "channel": "C0123456789", "ts": "1700000002.000300"})
    )

    resp = adapter.send_message(SlackTextMessage(channel="C0123456789", text="Hello!"))

    assert route.called
    request = route.calls.last.request
    assert request.headers["Authorization"] == f"Bearer {ACCESS_TOKEN}"
    sent = json.loads(request.content.decode())
    assert sent == {"channel": "C0123456789", "text": "Hello!", "mrkdwn": True}
    assert resp.message_id == "1700000002.000300"
    assert resp.ok is True


@respx.mock
def test_send_text_in_thread() -> None:
    adapter = AdapterRegistry.get("slack")
    route = respx.post(POST_MESSAGE_URL).mock(
        return_value=httpx.Response(200, json={"ok": True, "ts": "1700000003.000100"})
    )

    adapter.send_message(
        SlackTextMessage(channel="C0123456789", text="In thread", thread_ts="1700000000.000100")
    )

    sent = json.loads(route.calls.last.request.content.decode())
    assert sent["thread_ts"] == "1700000000.000100"


@respx.mock
def test_slack_api_error_is_reported_not_raised() -> None:
    adapter = AdapterRegistry.get("slack")
    respx.post(POST_MESSAGE_URL).mock(
        return_value=httpx.Response(200, json={"ok": False, "error": "channel_not_found"})
    )

    resp = adapter.send_message(SlackTextMessage(channel="C0000000000", text="Hello"))

    assert resp.ok is False
    assert resp.message_id is None
    assert resp.data == {"ok": False, "error": "channel_not_found"}


@respx.mock
def test_http_error_raises() -> None:
    adapter = AdapterRegistry.get("slack")
    respx.post(POST_MESSAGE_URL).mock(return_value=httpx.Response(500))

    with pytest.raises(httpx.HTTPStatusError):
        adapter.send_message(SlackTextMessage(channel="C0123456789", text="Hello"))


def test_missing_access_token_raises() -> None:
    adapter = SlackClient(credentials=SlackCredentials(signing_secret="s"))
    with pytest.raises(RuntimeError, match="SLACK_ACCESS_TOKEN"):
        adapter.send_message(SlackTextMessage(channel="C0123456789", text="Hello"))


@respx.mock
def test_rotated_token_applies_to_next_send() -> None:
    adapter = AdapterRegistry.get("slack")
    route = respx.post(POST_MESSAGE_URL).mock(
        return_value=httpx.Response(200, json={"ok": True, "ts": "1"})
    )

    get_slack_credentials().rotate_access_token("xoxb-rotated")
    adapter.send_message(SlackTextMessage(channel="C0123456789", text="Hello"))

    assert route.calls.last.request.headers["Authorization"] == "Bearer xoxb-rotated"


@respx.mock
def test_send_response_message() -> None:
    adapter = AdapterRegistry.get("slack")
    route = respx.post(RESPONSE_URL).mock(return_value=httpx.Response(200, text="ok"))

    resp = adapter.send_message(
        SlackResponseMessage(response_url=RESPONSE_URL, text="Done", response_type="ephemeral")
    )

    sent = json.loads(route.calls.last.request.content.decode())
    assert sent == {"text": "Done", "replace_original": True, "response_type": "ephemeral"}
    # response_url calls carry no token
    assert "Authorization" not in route.calls.last.request.headers
    assert resp.ok is True
    assert resp.data == {"status": 200}


def quick_reply_event():
    data = interaction(value="RED", name="Red", interaction_type="interactive_message", quick_reply=True)
    body = classify({"payload": json.dumps(data)})
    return normalize(body, resolve_channel_type(body))


@pytest.mark.asyncio
@respx.mock
async def test_quick_reply_edit_is_async_and_bounded() -> None:
    adapter = SlackClient()
    route = respx.post(RESPONSE_URL).mock(return_value=httpx.Response(200, text="ok"))

    resp = await adapter.edit_quick_reply_source(quick_reply_event())

    sent = json.loads(route.calls.last.request.content.decode())
    assert sent == {"text": "Pick one\n\n_You chose: *Red*_", "replace_original": True}
    assert resp is not None and resp.ok is True
    # the edit runs inside the webhook request, so it must finish before Slack gives up
    timeout = route.calls.last.request.extensions["timeout"]
    assert timeout["read"] == adapter.response_timeout
    assert adapter.response_timeout <= get_settings().slack_attachment_timeout


@pytest.mark.asyncio
@respx.mock
async def test_quick_reply_edit_timeout_raises() -> None:
    respx.post(RESPONSE_URL).mock(side_effect=httpx.ReadTimeout("timed out"))

    with pytest.raises(httpx.TimeoutException):
        await SlackClient().edit_quick_reply_source(quick_reply_event())


@pytest.mark.asyncio
async def test_non_quick_reply_events_are_not_edited() -> None:
    body = classify(message_event(text="hi"))
    event = normalize(body, resolve_channel_type(body))

    assert await SlackClient().edit_quick_reply_source(event) is None


def test_message_validation() -> None:
    with pytest.raises(ValueError):
        SlackTextMessage(channel="C0123456789", text="   ")
    with pytest.raises(ValueError):
        SlackTextMessage(channel="C0123456789", text="x" * 40001)
    with pytest.raises(ValueError):
        SlackResponseMessage(response_url="http://hooks.slack.com/actions/x", text="Done")
    with pytest.raises(ValueError):
        SlackResponseMessage(text="Done").ensure_valid_target()


def test_normalize_events_splits_mixed_messages() -> None:
    adapter = SlackClient()
    events = adapter.normalize_events(message_event(text="look", files=[slack_file()]))
    assert [e.message_kind for e in events] == [MessageKind.TEXT, MessageKind.ATTACHMENTS]
    assert all(e.event_kind == EventKind.MESSAGE for e in events)


def test_normalize_events_ignores_unknown_bodies() -> None:
    adapter = SlackClient()
    assert adapter.normalize_events({"type": "app_rate_limited"}) == []
