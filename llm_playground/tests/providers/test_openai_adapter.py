"""OpenAI-style adapter request shaping and event decoding."""
from __future__ import annotations

import json

import httpx
import pytest

from llm_playground.base.dto import ProviderConfig
from llm_playground.base.errors import DecodeError, ErrorCode, UnrecognizedEvent
from llm_playground.base.models import Message, MessageStatus, ServerSentEvent
from llm_playground.openai import OpenAIAdapter, OpenAICompatibleAdapter


def _msg(mid, role, content, status=MessageStatus.COMPLETE):
    return Message(id=mid, conversation_id="c1", role=role, content=content, status=status)


HISTORY = [_msg(1, "user", "hi"), _msg(2, "assistant", "hello"), _msg(3, "user", "how are you?")]


def _event(data, event="message"):
    return ServerSentEvent(data=data if isinstance(data, str) else json.dumps(data), event=event)


def test_build_request_shape():
    config = ProviderConfig(family="openai", model="gpt-x", api_key="sk-1", system_prompt="be brief", temperature=0.2)
    req = OpenAIAdapter().build_request(HISTORY, config)
    assert req.url == "https://api.openai.com/v1/chat/completions"  # nosec B101
    assert req.method == "POST" and req.stream is True  # nosec B101
    assert req.headers["Authorization"] == "Bearer sk-1"  # nosec B101
    assert req.body["model"] == "gpt-x"  # nosec B101
    assert req.body["temperature"] == 0.2 and req.body["max_tokens"] == 1024  # nosec B101
    assert req.body["messages"] == [  # nosec B101
        {"role": "system", "content": "be brief"},
        {"role": "user", "content": "hi"},
        {"role": "assistant", "content": "hello"},
        {"role": "user", "content": "how are you?"},
    ]


def test_base_url_override_strips_trailing_slash():
    config = ProviderConfig(family="openai", model="gpt-x", api_key="sk-1", base_url="https://proxy.local/v1/")
    assert OpenAIAdapter().build_request(HISTORY, config).url == "https://proxy.local/v1/chat/completions"  # nosec B101


def test_compatible_variant_is_keyless():
    config = ProviderConfig(family="openai_compatible", model="llama", base_url="http://localhost:8080/v1")
    req = OpenAICompatibleAdapter().build_request(HISTORY, config)
    assert req.url == "http://localhost:8080/v1/chat/completions"  # nosec B101
    assert "Authorization" not in req.headers  # nosec B101


def test_request_converts_to_httpx():
    config = ProviderConfig(family="openai", model="gpt-x", api_key="sk-1")
    req = OpenAIAdapter().build_request(HISTORY, config)
    built = req.to_httpx(httpx.AsyncClient())
    assert built.method == "POST"  # nosec B101
    assert json.loads(built.content)["stream"] is True  # nosec B101


def test_decode_text_delta():
    delta = OpenAIAdapter().decode_event(_event({"choices": [{"delta": {"content": "Hi"}, "finish_reason": None}]}))
    assert delta.text == "Hi" and not delta.finish and delta.stop_reason is None  # nosec B101


def test_decode_role_only_and_finish_chunks():
    adapter = OpenAIAdapter()
    role_only = adapter.decode_event(_event({"choices": [{"delta": {"role": "assistant"}, "finish_reason": None}]}))
    assert role_only.text == "" and role_only.is_noop  # nosec B101
    final = adapter.decode_event(_event({"choices": [{"delta": {}, "finish_reason": "length"}]}))
    assert final.stop_reason == "length" and not final.finish  # nosec B101


def test_decode_done_sentinel():
    delta = OpenAIAdapter().decode_event(_event("[DONE]"))
    assert delta.finish is True  # nosec B101


def test_decode_usage_chunk_is_noop():
    delta = OpenAIAdapter().decode_event(_event({"choices": [], "usage": {"total_tokens": 3}}))
    assert delta.is_noop  # nosec B101


def test_decode_error_payload():
    delta = OpenAIAdapter().decode_event(_event({"error": {"message": "bad", "type": "invalid_request_error"}}))
    assert delta.error is not None and delta.error.code is ErrorCode.VALIDATION  # nosec B101
    assert delta.error.provider == "openai"  # nosec B101


def test_decode_malformed_json_raises():
    with pytest.raises(DecodeError):
        OpenAIAdapter().decode_event(_event("{not json"))
    with pytest.raises(DecodeError):
        OpenAIAdapter().decode_event(_event("[1, 2]"))


def test_decode_unknown_shape_is_unrecognized():
    with pytest.raises(UnrecognizedEvent):
        OpenAIAdapter().decode_event(_event({"object": "something.else"}))
