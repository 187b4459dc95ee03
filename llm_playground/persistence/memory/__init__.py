"""In-memory conversation store."""

from .in_memory_store import InMemoryConversationStore

__all__ = ["InMemoryConversationStore"]
