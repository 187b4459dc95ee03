"""History shaping helpers used by every adapter."""
from __future__ import annotations

from llm_playground.base.models import Message, MessageStatus
from llm_playground.base.utils.messages import merge_consecutive, split_system, visible_history


def _m(i, role, content, status=MessageStatus.COMPLETE):
    return Message(id=i, conversation_id="c", role=role, content=content, status=status)


def test_visible_history_rule():
    messages = [
        _m(1, "user", "hi"),
        _m(2, "assistant", "partial", MessageStatus.CANCELLED),
        _m(3, "assistant", "", MessageStatus.CANCELLED),
        _m(4, "assistant", "oops", MessageStatus.FAILED),
        _m(5, "assistant", "", MessageStatus.PENDING),
        _m(6, "assistant", "so far", MessageStatus.STREAMING),
    ]
    assert [m.id for m in visible_history(messages)] == [1, 2]  # nosec B101


def test_split_system_joins_prompt_and_stored_system_messages():
    history = [_m(1, "system", "be terse"), _m(2, "user", "hi"), _m(3, "assistant", ""), _m(4, "system", "")]
    system, turns = split_system(history, "you are helpful")
    assert system == "you are helpful\n\nbe terse"  # nosec B101
    assert turns == [("user", "hi")]  # nosec B101
    assert split_system([_m(1, "user", "x")]) == (None, [("user", "x")])  # nosec B101


def test_merge_consecutive_same_role():
    turns = [("user", "a"), ("user", "b"), ("assistant", "c"), ("user", "d")]
    assert merge_consecutive(turns) == [("user", "a\n\nb"), ("assistant", "c"), ("user", "d")]  # nosec B101
