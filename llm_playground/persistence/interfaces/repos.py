"""Repository & Unit of Work protocol definitions for conversation persistence.

The store gateway (``ConversationStore``) is what the core consumes. The
protocols here sit one level below it: a backend implements the repositories
and a Unit of Work that owns the transaction boundary, and the gateway runs
every gateway operation inside exactly one Unit of Work so each call either
fully commits or leaves nothing behind.

Design Principles:
- No concrete behavior; pure structural typing via ``Protocol``.
- Repositories never commit; the Unit of Work does.
- Domain dataclasses (``Conversation``, ``Message``) cross the boundary.

Failure / Error Semantics:
- Repositories raise backend exceptions (e.g. ``sqlite3.Error``) or
  ``PersistenceError`` for rule violations; the gateway translates the former.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Protocol

from ...base.models import Conversation, Message, MessageStatus, Role


class IConversationRepo(Protocol):
    """Conversation rows."""

    def add(self, conversation: Conversation) -> None:
        """Insert a new conversation."""
        ...

    def get(self, conversation_id: str) -> Optional[Conversation]:
        ...

    def list_recent(self, limit: int = 50) -> List[Conversation]:
        """Most recently updated first."""
        ...

    def touch(self, conversation_id: str, at: datetime) -> None:
        """Bump ``updated_at``."""
        ...


class IMessageRepo(Protocol):
    """Message rows."""

    def add(
        self,
        conversation_id: str,
        role: Role,
        content: str,
        status: MessageStatus,
        at: datetime,
    ) -> int:
        """Insert a message and return its identifier."""
        ...

    def get(self, message_id: int) -> Optional[Message]:
        ...

    def update_content(self, message_id: int, content: str, at: datetime) -> None:
        """Replace content of a non-terminal message."""
        ...

    def set_status(self, message_id: int, status: MessageStatus, at: datetime) -> None:
        """Record a status transition on a non-terminal message."""
        ...

    def list_for_conversation(self, conversation_id: str) -> List[Message]:
        """Insertion order."""
        ...


class IUnitOfWork(Protocol):
    """Transaction boundary aggregating the repositories."""

    conversations: IConversationRepo
    messages: IMessageRepo

    def __enter__(self) -> "IUnitOfWork":
        ...

    def __exit__(self, exc_type, exc, tb) -> None:
        ...

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...


__all__ = ["IConversationRepo", "IMessageRepo", "IUnitOfWork"]
