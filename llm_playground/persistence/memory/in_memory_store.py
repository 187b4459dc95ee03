"""In-memory implementation of ``ConversationStore``.

Simple reference implementation using Python dictionaries. Suitable for
tests and ephemeral sessions. Each operation completes without suspending, so
it is atomic with respect to other tasks on the same event loop; the store
is not meant to be shared across threads.

Write rules match the SQLite store: unknown identifiers and writes to a
terminal message raise ``PersistenceError``.
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from typing import Dict, List, Optional

from ...base.errors import PersistenceError
from ...base.models import Conversation, Message, MessageStatus, ProviderFamily, Role, utc_now


class InMemoryConversationStore:
    """Dictionary-backed conversation store."""

    def __init__(self) -> None:
        self._conversations: Dict[str, Conversation] = {}
        self._messages: Dict[int, Message] = {}
        self._next_id = 1

    async def append_message(
        self,
        conversation_id: str,
        role: Role,
        initial_content: str,
        *,
        status: MessageStatus = MessageStatus.PENDING,
    ) -> int:
        conversation = self._conversations.get(conversation_id)
        if conversation is None:
            raise PersistenceError("append_message", f"unknown conversation {conversation_id}")
        message_id = self._next_id
        self._next_id += 1
        now = utc_now()
        self._messages[message_id] = Message(
            id=message_id,
            conversation_id=conversation_id,
            role=role,
            content=initial_content,
            status=status,
            created_at=now,
            updated_at=now,
        )
        self._conversations[conversation_id] = replace(conversation, updated_at=now)
        return message_id

    def _writable(self, operation: str, message_id: int) -> Message:
        message = self._messages.get(message_id)
        if message is None:
            raise PersistenceError(operation, f"unknown message {message_id}")
        if message.is_terminal():
            raise PersistenceError(operation, f"message {message_id} is already {message.status.value}")
        return message

    async def update_message_content(self, message_id: int, new_content: str) -> None:
        message = self._writable("update_message_content", message_id)
        self._messages[message_id] = message.with_changes(content=new_content)

    async def set_message_status(self, message_id: int, status: MessageStatus) -> None:
        message = self._writable("set_message_status", message_id)
        self._messages[message_id] = message.with_changes(status=status)

    async def create_conversation(
        self,
        title: str,
        provider: ProviderFamily,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
    ) -> Conversation:
        conversation = Conversation(
            id=uuid.uuid4().hex,
            title=title,
            provider=ProviderFamily.parse(provider),
            model=model or None,
            base_url=base_url or None,
        )
        self._conversations[conversation.id] = conversation
        return conversation

    async def get_conversation(self, conversation_id: str) -> Optional[Conversation]:
        return self._conversations.get(conversation_id)

    async def list_conversations(self, limit: int = 50) -> List[Conversation]:
        ordered = sorted(self._conversations.values(), key=lambda c: c.updated_at, reverse=True)
        return ordered[:limit]

    async def list_messages(self, conversation_id: str) -> List[Message]:
        return [m for m in self._messages.values() if m.conversation_id == conversation_id]

    async def get_message(self, message_id: int) -> Optional[Message]:
        return self._messages.get(message_id)


__all__ = ["InMemoryConversationStore"]
