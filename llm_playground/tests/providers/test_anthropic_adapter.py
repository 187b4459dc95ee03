"""Anthropic-style adapter request shaping and event decoding."""
from __future__ import annotations

import json

import pytest

from llm_playground.anthropic import AnthropicAdapter
from llm_playground.base.dto import ProviderConfig
from llm_playground.base.errors import DecodeError, ErrorCode, UnrecognizedEvent
from llm_playground.base.models import Message, MessageStatus, ServerSentEvent

CONFIG = ProviderConfig(family="anthropic", model="claude-x", api_key="ak-1", max_tokens=256)


def _msg(mid, role, content):
    return Message(id=mid, conversation_id="c1", role=role, content=content, status=MessageStatus.COMPLETE)


def _event(event, payload):
    return ServerSentEvent(data=json.dumps(payload), event=event)


def test_build_request_headers_system_and_merged_turns():
    history = [
        _msg(1, "system", "stored system"),
        _msg(2, "user", "first"),
        _msg(3, "user", "second"),
        _msg(4, "assistant", "reply"),
    ]
    config = CONFIG.model_copy(update={"system_prompt": "configured"})
    req = AnthropicAdapter().build_request(history, config)
    assert req.url == "https://api.anthropic.com/v1/messages"  # nosec B101
    assert req.headers["x-api-key"] == "ak-1"  # nosec B101
    assert req.headers["anthropic-version"] == "2023-06-01"  # nosec B101
    assert req.body["system"] == "configured\n\nstored system"  # nosec B101
    assert req.body["max_tokens"] == 256 and req.body["stream"] is True  # nosec B101
    assert req.body["messages"] == [  # nosec B101
        {"role": "user", "content": "first\n\nsecond"},
        {"role": "assistant", "content": "reply"},
    ]


def test_no_system_field_without_system_text():
    req = AnthropicAdapter().build_request([_msg(1, "user", "hi")], CONFIG)
    assert "system" not in req.body  # nosec B101


@pytest.mark.parametrize("kind", ["message_start", "content_block_start", "content_block_stop", "ping"])
def test_bookkeeping_events_are_noops(kind):
    assert AnthropicAdapter().decode_event(_event(kind, {"type": kind})).is_noop  # nosec B101


def test_text_delta_stop_reason_and_stop():
    adapter = AnthropicAdapter()
    text = adapter.decode_event(
        _event("content_block_delta", {"type": "content_block_delta", "delta": {"type": "text_delta", "text": "yo"}})
    )
    assert text.text == "yo"  # nosec B101
    stop = adapter.decode_event(_event("message_delta", {"type": "message_delta", "delta": {"stop_reason": "end_turn"}}))
    assert stop.stop_reason == "end_turn" and not stop.finish  # nosec B101
    assert adapter.decode_event(_event("message_stop", {"type": "message_stop"})).finish  # nosec B101


def test_non_text_block_delta_is_noop():
    delta = AnthropicAdapter().decode_event(
        _event("content_block_delta", {"type": "content_block_delta", "delta": {"type": "input_json_delta"}})
    )
    assert delta.is_noop  # nosec B101


def test_type_field_used_when_event_name_missing():
    event = ServerSentEvent(data=json.dumps({"type": "message_stop"}))
    assert AnthropicAdapter().decode_event(event).finish  # nosec B101


def test_error_event_maps_kind():
    delta = AnthropicAdapter().decode_event(
        _event("error", {"type": "error", "error": {"type": "overloaded_error", "message": "Overloaded"}})
    )
    assert delta.error.code is ErrorCode.UNAVAILABLE and delta.error.message == "Overloaded"  # nosec B101


def test_unknown_event_and_bad_json():
    adapter = AnthropicAdapter()
    with pytest.raises(UnrecognizedEvent):
        adapter.decode_event(_event("message_metrics", {"type": "message_metrics"}))
    with pytest.raises(DecodeError):
        adapter.decode_event(ServerSentEvent(data="oops", event="content_block_delta"))
