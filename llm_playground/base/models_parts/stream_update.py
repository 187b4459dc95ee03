"""Incremental UI update emitted by the aggregator."""
from __future__ import annotations

from dataclasses import dataclass

from .message_status import MessageStatus


@dataclass(frozen=True)
class StreamUpdate:
    """Snapshot sent to the presentation layer after each state change.

    ``content`` is the full accumulated text; ``delta`` is the fragment that
    produced this update (empty for pure status changes).
    """

    message_id: int
    content: str
    delta: str
    status: MessageStatus

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal


__all__ = ["StreamUpdate"]
