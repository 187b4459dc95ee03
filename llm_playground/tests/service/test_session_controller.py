"""Session controller tests: busy rejection, history building, cancellation."""
from __future__ import annotations

import asyncio
import json

import pytest
from pydantic import ValidationError

from llm_playground.base.dto import ProviderConfig
from llm_playground.base.errors import ConversationBusy, PersistenceError
from llm_playground.base.models import MessageStatus, ProviderFamily
from llm_playground.base.timeouts import TimeoutConfig
from llm_playground.persistence.memory import InMemoryConversationStore
from llm_playground.service import SessionController

FAST = TimeoutConfig(request_timeout_seconds=2.0, idle_read_timeout_seconds=2.0)


def _config_for(conversation):
    return ProviderConfig(family=conversation.provider, model=conversation.model or "gpt-test", api_key="sk-live")


def test_send_streams_reply_and_persists_both_turns(sse, streaming_client, chunk):
    store = InMemoryConversationStore()
    fake = streaming_client([sse(json.dumps(chunk("Hi ")), json.dumps(chunk("there", "stop")), "[DONE]")])

    async def go():
        conv = await store.create_conversation("t", ProviderFamily.OPENAI)
        async with fake.client() as client, SessionController(store, _config_for, client=client, timeouts=FAST) as ctl:
            handle = await ctl.send(conv.id, "hello")
            assert ctl.active(conv.id)  # nosec B101
            deltas = [u.delta async for u in handle.updates() if u.delta]
            result = await handle.wait()
            assert not ctl.active(conv.id)  # nosec B101
            return handle, deltas, result, await store.list_messages(conv.id)

    handle, deltas, result, messages = asyncio.run(go())
    assert deltas == ["Hi ", "there"]  # nosec B101
    assert result.status is MessageStatus.COMPLETE and handle.done  # nosec B101
    assert [(m.id, m.role, m.content, m.status) for m in messages] == [  # nosec B101
        (handle.user_message_id, "user", "hello", MessageStatus.COMPLETE),
        (handle.message_id, "assistant", "Hi there", MessageStatus.COMPLETE),
    ]


def test_second_send_while_active_is_rejected_without_side_effects(sse, streaming_client, chunk):
    store = InMemoryConversationStore()
    fake = streaming_client([sse(json.dumps(chunk("slow")))], hang=True)

    async def go():
        conv = await store.create_conversation("t", ProviderFamily.OPENAI)
        async with fake.client() as client:
            ctl = SessionController(store, _config_for, client=client, timeouts=FAST)
            handle = await ctl.send(conv.id, "first")
            before = await store.list_messages(conv.id)
            with pytest.raises(ConversationBusy):
                await ctl.send(conv.id, "second")
            after = await store.list_messages(conv.id)
            handle.cancel()
            result = await handle.wait()
            await ctl.aclose()
            return before, after, result

    before, after, result = asyncio.run(go())
    assert len(before) == len(after) == 2  # nosec B101
    assert result.status is MessageStatus.CANCELLED  # nosec B101


def test_conversations_run_independently(sse, streaming_client, chunk):
    store = InMemoryConversationStore()
    fake = streaming_client([sse(json.dumps(chunk("ok", "stop")), "[DONE]")], delay=0.01)

    async def go():
        a = await store.create_conversation("a", ProviderFamily.OPENAI)
        b = await store.create_conversation("b", ProviderFamily.OPENAI)
        async with fake.client() as client:
            ctl = SessionController(store, _config_for, client=client, timeouts=FAST, max_concurrent_streams=1)
            ha = await ctl.send(a.id, "x")
            hb = await ctl.send(b.id, "y")
            return await asyncio.gather(ha.wait(), hb.wait())

    results = asyncio.run(go())
    assert [r.status for r in results] == [MessageStatus.COMPLETE, MessageStatus.COMPLETE]  # nosec B101


def test_cancel_is_idempotent_and_noop_after_finish(sse, streaming_client, chunk):
    store = InMemoryConversationStore()
    fake = streaming_client([sse(json.dumps(chunk("partial")))], hang=True)

    async def go():
        conv = await store.create_conversation("t", ProviderFamily.OPENAI)
        async with fake.client() as client:
            ctl = SessionController(store, _config_for, client=client, timeouts=FAST)
            handle = await ctl.send(conv.id, "go")
            async for update in handle.updates():
                if update.delta:
                    handle.cancel()
                    handle.cancel("again")
            result = await handle.wait()
            handle.cancel()
            return result, await store.get_message(handle.message_id)

    result, message = asyncio.run(go())
    assert result.status is MessageStatus.CANCELLED == message.status  # nosec B101
    assert message.content == "partial"  # nosec B101
    assert result.error.message == "cancelled by user"  # nosec B101


def test_history_includes_partial_cancelled_and_skips_failed(sse, streaming_client, chunk):
    store = InMemoryConversationStore()
    fake = streaming_client([sse(json.dumps(chunk("ok", "stop")), "[DONE]")])

    async def go():
        conv = await store.create_conversation("t", ProviderFamily.OPENAI)
        await store.append_message(conv.id, "user", "q1", status=MessageStatus.COMPLETE)
        kept = await store.append_message(conv.id, "assistant", "half an answer")
        await store.set_message_status(kept, MessageStatus.CANCELLED)
        await store.append_message(conv.id, "user", "q2", status=MessageStatus.COMPLETE)
        dropped = await store.append_message(conv.id, "assistant", "broken")
        await store.set_message_status(dropped, MessageStatus.FAILED)
        empty = await store.append_message(conv.id, "assistant", "")
        await store.set_message_status(empty, MessageStatus.CANCELLED)
        async with fake.client() as client:
            ctl = SessionController(store, _config_for, client=client, timeouts=FAST)
            handle = await ctl.send(conv.id, "q3")
            await handle.wait()

    asyncio.run(go())
    sent = json.loads(fake.requests[0].content)["messages"]
    assert [(m["role"], m["content"]) for m in sent] == [  # nosec B101
        ("user", "q1"),
        ("assistant", "half an answer"),
        ("user", "q2"),
        ("user", "q3"),
    ]


def test_send_validation_failures_leave_controller_idle():
    store = InMemoryConversationStore()

    def no_key(conversation):
        return ProviderConfig(family=conversation.provider, model="m")

    async def go():
        conv = await store.create_conversation("t", ProviderFamily.ANTHROPIC)
        ctl = SessionController(store, no_key)
        with pytest.raises(ValueError):
            await ctl.send(conv.id, "   ")
        with pytest.raises(PersistenceError):
            await ctl.send("missing", "hi")
        with pytest.raises(ValidationError):
            await ctl.send(conv.id, "hi")
        return ctl.active(conv.id), await store.list_messages(conv.id)

    active, messages = asyncio.run(go())
    assert active is False and messages == []  # nosec B101


def test_aclose_cancels_active_runs(sse, streaming_client, chunk):
    store = InMemoryConversationStore()
    fake = streaming_client([sse(json.dumps(chunk("x")))], hang=True)

    async def go():
        conv = await store.create_conversation("t", ProviderFamily.OPENAI)
        async with fake.client() as client:
            ctl = SessionController(store, _config_for, client=client, timeouts=FAST)
            handle = await ctl.send(conv.id, "go")
            await asyncio.sleep(0.05)
            await ctl.aclose()
            with pytest.raises(RuntimeError):
                await ctl.send(conv.id, "after close")
            return await handle.wait()

    assert asyncio.run(go()).status is MessageStatus.CANCELLED  # nosec B101


def test_invalid_concurrency_rejected():
    with pytest.raises(ValueError):
        SessionController(InMemoryConversationStore(), _config_for, max_concurrent_streams=0)


class _HistoryFailingStore(InMemoryConversationStore):
    """History reads fail (or block until cancelled); status writes can fail too."""

    def __init__(self, *, block=False, status_writes_fail=False):
        super().__init__()
        self.block = block
        self.status_writes_fail = status_writes_fail
        self.reading = asyncio.Event()

    async def list_messages(self, conversation_id):
        self.reading.set()
        if self.block:
            await asyncio.Event().wait()
        raise PersistenceError("list_messages", "disk gone")

    async def set_message_status(self, message_id, status):
        if self.status_writes_fail:
            raise PersistenceError("set_message_status", "read-only")
        await super().set_message_status(message_id, status)

    async def statuses(self, conversation_id):
        messages = await InMemoryConversationStore.list_messages(self, conversation_id)
        return [(m.role, m.status) for m in messages]


def test_history_read_failure_marks_assistant_failed():
    store = _HistoryFailingStore()

    async def go():
        conv = await store.create_conversation("t", ProviderFamily.OPENAI)
        ctl = SessionController(store, _config_for, timeouts=FAST)
        with pytest.raises(PersistenceError) as excinfo:
            await ctl.send(conv.id, "hi")
        return excinfo.value, ctl.active(conv.id), await store.statuses(conv.id)

    error, active, statuses = asyncio.run(go())
    assert error.operation == "list_messages" and active is False  # nosec B101
    assert statuses == [("user", MessageStatus.COMPLETE), ("assistant", MessageStatus.FAILED)]  # nosec B101


def test_history_read_failure_surfaces_original_error_when_status_write_fails():
    store = _HistoryFailingStore(status_writes_fail=True)

    async def go():
        conv = await store.create_conversation("t", ProviderFamily.OPENAI)
        ctl = SessionController(store, _config_for, timeouts=FAST)
        with pytest.raises(PersistenceError) as excinfo:
            await ctl.send(conv.id, "hi")
        return excinfo.value, ctl.active(conv.id)

    error, active = asyncio.run(go())
    assert error.operation == "list_messages" and active is False  # nosec B101


def test_send_cancelled_while_reading_history_marks_assistant_cancelled():
    store = _HistoryFailingStore(block=True)

    async def go():
        conv = await store.create_conversation("t", ProviderFamily.OPENAI)
        ctl = SessionController(store, _config_for, timeouts=FAST)
        sending = asyncio.create_task(ctl.send(conv.id, "hi"))
        await store.reading.wait()
        sending.cancel()
        with pytest.raises(asyncio.CancelledError):
            await sending
        return ctl.active(conv.id), await store.statuses(conv.id)

    active, statuses = asyncio.run(go())
    assert active is False  # nosec B101
    assert statuses == [("user", MessageStatus.COMPLETE), ("assistant", MessageStatus.CANCELLED)]  # nosec B101
