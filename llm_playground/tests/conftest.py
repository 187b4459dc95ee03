"""Pytest configuration for the llm_playground test suite.

Provides fakes shared across modules:

- ``isolated_env`` (autouse): points the config directory at a temp dir and
  removes provider credentials so no test reads the developer's machine.
- ``sse``: builds a Server-Sent-Events byte body from ``(event, data)`` pairs.
- ``streaming_client``: an ``httpx.AsyncClient`` factory backed by
  ``httpx.MockTransport`` whose responses stream the given chunks.
- ``seeded``: creates a conversation with one user turn and a pending
  assistant message in a store and returns their identifiers.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, AsyncIterator, Callable, Iterable, Iterator, List, Optional, Tuple, Union

import httpx
import pytest

from llm_playground.base.models import Message, MessageStatus, ProviderFamily
from llm_playground.base.utils.messages import visible_history
from llm_playground.config.env import CONFIG_DIR_ENV, DB_PATH_ENV, ENV_ALIASES, ENV_MAP

EventSpec = Union[str, Tuple[Optional[str], Any]]


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Keep settings, history and credentials out of the real environment."""
    monkeypatch.setenv(CONFIG_DIR_ENV, str(tmp_path / "config"))
    monkeypatch.delenv(DB_PATH_ENV, raising=False)
    for name in list(ENV_MAP.values()) + [alias for names in ENV_ALIASES.values() for alias in names]:
        monkeypatch.delenv(name, raising=False)
    yield tmp_path


def _encode(spec: EventSpec) -> str:
    if isinstance(spec, str):
        return f"data: {spec}\n\n"
    event, data = spec
    text = data if isinstance(data, str) else json.dumps(data)
    head = f"event: {event}\n" if event else ""
    return head + "".join(f"data: {line}\n" for line in text.split("\n")) + "\n"


@pytest.fixture()
def sse() -> Callable[..., bytes]:
    """Return ``build(*events)`` producing an SSE body.

    Each event is a raw data string or an ``(event_name, payload)`` pair; dict
    payloads are JSON encoded.
    """

    def build(*events: EventSpec) -> bytes:
        return "".join(_encode(e) for e in events).encode("utf-8")

    return build


def _split_every(body: bytes, size: int) -> List[bytes]:
    return [body[i : i + size] for i in range(0, len(body), size)]


@pytest.fixture()
def split() -> Callable[[bytes, int], List[bytes]]:
    """Return ``split(body, size)`` cutting a body into fixed-size reads."""
    return _split_every


async def _body(chunks: Iterable[bytes], delay: float, hang: bool) -> AsyncIterator[bytes]:
    for chunk in chunks:
        if delay:
            await asyncio.sleep(delay)
        yield chunk
    if hang:
        await asyncio.Event().wait()


class StreamingFake:
    """Records requests and answers them with a scripted streamed response."""

    def __init__(
        self,
        chunks: Iterable[bytes] = (),
        *,
        status: int = 200,
        delay: float = 0.0,
        hang: bool = False,
        response_delay: float = 0.0,
        body: Optional[bytes] = None,
    ) -> None:
        self.chunks = list(chunks)
        self.status = status
        self.delay = delay
        self.hang = hang
        self.response_delay = response_delay
        self.body = body
        self.requests: List[httpx.Request] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.response_delay:
            await asyncio.sleep(self.response_delay)
        if self.body is not None:
            return httpx.Response(self.status, content=self.body)
        return httpx.Response(
            self.status,
            headers={"content-type": "text/event-stream"},
            content=_body(self.chunks, self.delay, self.hang),
        )

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture()
def streaming_client() -> Callable[..., StreamingFake]:
    """Return a ``StreamingFake`` factory (call ``.client()`` inside the loop)."""
    return StreamingFake


@pytest.fixture()
def seeded() -> Callable[..., Any]:
    """Return ``async seed(store, family, *user_texts)``.

    Creates a conversation, appends completed user turns and a pending
    assistant message, and returns ``(conversation, message_id, history)``.
    """

    async def seed(store, family: ProviderFamily = ProviderFamily.OPENAI, *texts: str):
        conversation = await store.create_conversation("test", family)
        for text in texts or ("hello",):
            await store.append_message(conversation.id, "user", text, status=MessageStatus.COMPLETE)
        message_id = await store.append_message(conversation.id, "assistant", "")
        history: List[Message] = visible_history(await store.list_messages(conversation.id))
        return conversation, message_id, history

    return seed


def openai_chunk(text: Optional[str] = None, finish: Optional[str] = None) -> dict:
    """A ``chat.completion.chunk`` payload."""
    delta = {"content": text} if text is not None else {}
    return {"object": "chat.completion.chunk", "choices": [{"index": 0, "delta": delta, "finish_reason": finish}]}


@pytest.fixture()
def chunk() -> Callable[..., dict]:
    return openai_chunk
