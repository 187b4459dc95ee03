"""
Stored chat message.

Defines the `Message` dataclass and the `Role` literal representing the
author role. Content grows while the message is ``streaming`` and is frozen
once a terminal status is recorded.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Literal

from .message_status import MessageStatus

Role = Literal["system", "user", "assistant"]
ROLES = ("system", "user", "assistant")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Message:
    """A chat message as persisted by the conversation store.

    Attributes:
        id: Store-assigned identifier.
        conversation_id: Owning conversation (back-reference only).
        role: Author role.
        content: Text content.
        status: Current lifecycle status.
        created_at: Creation timestamp (UTC).
        updated_at: Timestamp of the last content or status write (UTC).
    """

    id: int
    conversation_id: str
    role: Role
    content: str
    status: MessageStatus = MessageStatus.PENDING
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def is_terminal(self) -> bool:
        """Return True once the message reached ``complete``, ``failed`` or ``cancelled``."""
        return self.status.is_terminal

    def is_visible(self) -> bool:
        """Return True when the message belongs in the history sent to a provider.

        Completed messages are visible; cancelled ones only when they kept
        partial output. Pending, streaming and failed messages are not.
        """
        if self.status is MessageStatus.COMPLETE:
            return True
        return self.status is MessageStatus.CANCELLED and bool(self.content)

    def with_changes(self, **changes) -> "Message":
        """Return a copy with ``changes`` applied and ``updated_at`` bumped."""
        changes.setdefault("updated_at", utc_now())
        return replace(self, **changes)


__all__ = ["Message", "Role", "ROLES", "utc_now"]
