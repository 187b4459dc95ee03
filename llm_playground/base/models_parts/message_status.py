"""Message lifecycle status values."""
from __future__ import annotations

from enum import Enum
from typing import FrozenSet


class MessageStatus(str, Enum):
    """Lifecycle of a stored message.

    ``pending`` -> ``streaming`` -> exactly one of the terminal values.
    """

    PENDING = "pending"
    STREAMING = "streaming"
    COMPLETE = "complete"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES: FrozenSet[MessageStatus] = frozenset(
    {MessageStatus.COMPLETE, MessageStatus.FAILED, MessageStatus.CANCELLED}
)


__all__ = ["MessageStatus", "TERMINAL_STATUSES"]
