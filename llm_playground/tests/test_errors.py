"""Error taxonomy: classification, display values and in-stream payloads."""
from __future__ import annotations

import asyncio

import httpx
import pytest

from llm_playground.base.cancellation import Cancelled
from llm_playground.base.errors import (
    DecodeError,
    ErrorCode,
    ErrorInfo,
    FramingError,
    PersistenceError,
    ProviderError,
    classify_exception,
    code_for_status,
)
from llm_playground.base.utils.payload import error_from_payload, load_event_json
from llm_playground.base.models import ServerSentEvent


@pytest.mark.parametrize(
    "status,code",
    [
        (400, ErrorCode.VALIDATION),
        (401, ErrorCode.AUTH),
        (404, ErrorCode.NOT_FOUND),
        (429, ErrorCode.RATE_LIMIT),
        (503, ErrorCode.UNAVAILABLE),
        (529, ErrorCode.UNAVAILABLE),
        (599, ErrorCode.SERVER_ERROR),
        (418, ErrorCode.VALIDATION),
    ],
)
def test_code_for_status(status, code):
    assert code_for_status(status) is code  # nosec B101


def test_classify_exception_precedence():
    request = httpx.Request("POST", "https://api.example/v1")
    assert classify_exception(asyncio.TimeoutError()) is ErrorCode.TIMEOUT  # nosec B101
    assert classify_exception(httpx.ReadTimeout("slow", request=request)) is ErrorCode.TIMEOUT  # nosec B101
    assert classify_exception(httpx.ConnectError("refused", request=request)) is ErrorCode.UNAVAILABLE  # nosec B101
    assert classify_exception(httpx.RemoteProtocolError("peer closed", request=request)) is ErrorCode.TRANSIENT  # nosec B101
    assert classify_exception(FramingError("too big")) is ErrorCode.FRAMING  # nosec B101
    assert classify_exception(PersistenceError("append_message", "disk full")) is ErrorCode.PERSISTENCE  # nosec B101
    assert classify_exception(RuntimeError("rate limit reached")) is ErrorCode.RATE_LIMIT  # nosec B101
    assert classify_exception(RuntimeError("boom")) is ErrorCode.UNKNOWN  # nosec B101


def test_error_info_from_provider_error():
    exc = ProviderError(code=ErrorCode.AUTH, message="bad key", provider="openai", status=401, body='{"error":1}')
    info = ErrorInfo.from_exception(exc)
    assert info.to_dict() == {  # nosec B101
        "code": "auth",
        "message": "bad key",
        "provider": "openai",
        "status": 401,
        "body": '{"error":1}',
    }


def test_error_info_from_other_exceptions():
    assert ErrorInfo.from_exception(Cancelled("user")).code is ErrorCode.CANCELLED  # nosec B101
    info = ErrorInfo.from_exception(DecodeError("bad json"), provider="anthropic")
    assert (info.code, info.provider) == (ErrorCode.DECODE, "anthropic")  # nosec B101
    info = ErrorInfo.from_exception(ValueError())
    assert info.message == "ValueError" and "status" not in info.to_dict()  # nosec B101
    assert len(ErrorInfo.from_exception(RuntimeError("x" * 2000)).message) == 500  # nosec B101


def test_error_from_payload_shapes():
    err = error_from_payload({"type": "overloaded_error", "message": "busy"}, provider="anthropic")
    assert (err.code, err.message) == (ErrorCode.UNAVAILABLE, "busy")  # nosec B101
    err = error_from_payload({"code": 429, "message": "quota", "status": "RESOURCE_EXHAUSTED"}, provider="gemini")
    assert (err.code, err.status) == (ErrorCode.RATE_LIMIT, 429)  # nosec B101
    err = error_from_payload("plain text", provider="openai")
    assert (err.code, err.message) == (ErrorCode.SERVER_ERROR, "plain text")  # nosec B101


def test_load_event_json_rejects_non_objects():
    assert load_event_json(ServerSentEvent(data='{"a": 1}'), "openai") == {"a": 1}  # nosec B101
    with pytest.raises(DecodeError):
        load_event_json(ServerSentEvent(data="[1]"), "openai")
    with pytest.raises(DecodeError) as info:
        load_event_json(ServerSentEvent(data="{oops"), "openai")
    assert info.value.data == "{oops"  # nosec B101
