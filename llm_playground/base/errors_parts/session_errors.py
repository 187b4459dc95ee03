"""
Errors raised at the store gateway and session controller boundaries.
"""
from __future__ import annotations

from typing import Optional

from .error_code import ErrorCode


class PersistenceError(Exception):
    """A store operation failed; no partial write is visible to readers.

    Attributes:
        operation: Gateway operation name (e.g. ``"update_message_content"``).
        message: Human-readable description.
        raw: Underlying backend exception, when there is one.
    """

    code = ErrorCode.PERSISTENCE

    def __init__(self, operation: str, message: str, *, raw: Optional[BaseException] = None) -> None:
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.message = message
        self.raw = raw


class ConversationBusy(Exception):
    """A second ``send`` was issued while a run is active on the conversation."""

    code = ErrorCode.BUSY

    def __init__(self, conversation_id: str) -> None:
        super().__init__(f"conversation {conversation_id} already has an active run")
        self.conversation_id = conversation_id


__all__ = ["PersistenceError", "ConversationBusy"]
