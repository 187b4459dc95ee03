"""History shaping helpers shared by the provider adapters.

Adapters receive stored :class:`Message` values; these helpers reduce them to
the ``(role, text)`` turns each wire format needs.
"""
from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from ..models import Message

Turn = Tuple[str, str]


def visible_history(messages: Iterable[Message]) -> List[Message]:
    """Return the messages that belong in a provider request, in order."""
    return [m for m in messages if m.is_visible()]


def split_system(history: Sequence[Message], system_prompt: Optional[str] = None) -> Tuple[Optional[str], List[Turn]]:
    """Separate system text from conversational turns.

    The configured ``system_prompt`` comes first, followed by any stored
    ``system`` messages, joined with blank lines. Empty turns are dropped.
    """
    system_parts: List[str] = [system_prompt] if system_prompt else []
    turns: List[Turn] = []
    for msg in history:
        if msg.role == "system":
            if msg.content:
                system_parts.append(msg.content)
        elif msg.content:
            turns.append((msg.role, msg.content))
    return ("\n\n".join(system_parts) or None), turns


def merge_consecutive(turns: Iterable[Turn]) -> List[Turn]:
    """Merge consecutive same-role turns (blank line separated).

    Anthropic and Gemini reject two adjacent turns with the same role, which
    happens when an assistant reply failed and was hidden from history.
    """
    merged: List[Turn] = []
    for role, text in turns:
        if merged and merged[-1][0] == role:
            merged[-1] = (role, f"{merged[-1][1]}\n\n{text}")
        else:
            merged.append((role, text))
    return merged


__all__ = ["Turn", "visible_history", "split_system", "merge_consecutive"]
