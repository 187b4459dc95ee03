"""ConversationStore Protocol (single-class module).

Gateway consumed by the response aggregator and the session controller.
Every operation either fully succeeds or raises ``PersistenceError`` with no
partial write visible to readers.
"""

from __future__ import annotations

from typing import List, Optional, Protocol, runtime_checkable

from ..models import Conversation, Message, MessageStatus, ProviderFamily, Role


@runtime_checkable
class ConversationStore(Protocol):
    """Asynchronous conversation persistence gateway."""

    async def append_message(
        self,
        conversation_id: str,
        role: Role,
        initial_content: str,
        *,
        status: MessageStatus = MessageStatus.PENDING,
    ) -> int:
        """Append a message and return its identifier."""
        ...

    async def update_message_content(self, message_id: int, new_content: str) -> None:
        """Replace the message content (last write wins)."""
        ...

    async def set_message_status(self, message_id: int, status: MessageStatus) -> None:
        """Record a status transition."""
        ...

    async def create_conversation(
        self,
        title: str,
        provider: ProviderFamily,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
    ) -> Conversation:
        ...

    async def get_conversation(self, conversation_id: str) -> Optional[Conversation]:
        ...

    async def list_conversations(self, limit: int = 50) -> List[Conversation]:
        """Most recently updated first."""
        ...

    async def list_messages(self, conversation_id: str) -> List[Message]:
        """Messages in insertion order."""
        ...

    async def get_message(self, message_id: int) -> Optional[Message]:
        ...
