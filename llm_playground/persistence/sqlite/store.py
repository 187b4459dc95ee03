"""SQLite conversation store gateway.

Implements ``ConversationStore`` on top of the SQLite repositories. Every
gateway operation runs in its own :class:`UnitOfWorkSqlite` transaction on a
worker thread (``asyncio.to_thread``) so the event loop never blocks on disk
I/O. A lock serializes access to the single connection; SQLite itself
serializes writers across processes.

Failure semantics
-----------------
Any ``sqlite3.Error`` is rolled back and re-raised as ``PersistenceError``
carrying the operation name. Unknown identifiers and writes to terminal
messages raise ``PersistenceError`` too. A failed call leaves nothing behind.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
import threading
import uuid
from pathlib import Path
from typing import Callable, List, Optional, TypeVar, Union

from ...base.errors import PersistenceError
from ...base.logging import get_logger, log_event
from ...base.models import Conversation, Message, MessageStatus, ProviderFamily, Role, utc_now
from .engine import create_connection
from .migrator import migrate
from .unit_of_work import UnitOfWorkSqlite

T = TypeVar("T")


class SqliteConversationStore:
    """Asynchronous ``ConversationStore`` backed by a SQLite database file.

    Parameters:
        db_path: Database file (``":memory:"`` for a private in-process
            database). ``None`` uses the default history database location.
        logger: Structured logger for ``store.error`` events.
    """

    def __init__(self, db_path: Optional[Union[str, Path]] = None, *, logger: Optional[logging.Logger] = None) -> None:
        self._conn = create_connection(db_path)
        self._lock = threading.Lock()
        self._logger = logger or get_logger("llm_playground.persistence")
        self._closed = False
        migrate(self._conn)

    # Lifecycle -------------------------------------------------------------
    def close(self) -> None:
        with self._lock:
            if not self._closed:
                self._conn.close()
                self._closed = True

    def __enter__(self) -> "SqliteConversationStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # Execution -------------------------------------------------------------
    def _execute(self, operation: str, fn: Callable[[UnitOfWorkSqlite], T]) -> T:
        with self._lock:
            if self._closed:
                raise PersistenceError(operation, "store is closed")
            try:
                with UnitOfWorkSqlite(self._conn) as uow:
                    return fn(uow)
            except PersistenceError as exc:
                log_event(self._logger, "store.error", operation=operation, error=exc.message, level=logging.WARNING)
                raise
            except sqlite3.Error as exc:
                log_event(self._logger, "store.error", operation=operation, error=str(exc), level=logging.ERROR)
                raise PersistenceError(operation, str(exc), raw=exc) from exc

    async def _run(self, operation: str, fn: Callable[[UnitOfWorkSqlite], T]) -> T:
        return await asyncio.to_thread(self._execute, operation, fn)

    # Gateway operations ----------------------------------------------------
    async def append_message(
        self,
        conversation_id: str,
        role: Role,
        initial_content: str,
        *,
        status: MessageStatus = MessageStatus.PENDING,
    ) -> int:
        def op(uow: UnitOfWorkSqlite) -> int:
            if uow.conversations.get(conversation_id) is None:
                raise PersistenceError("append_message", f"unknown conversation {conversation_id}")
            now = utc_now()
            message_id = uow.messages.add(conversation_id, role, initial_content, status, now)
            uow.conversations.touch(conversation_id, now)
            return message_id

        return await self._run("append_message", op)

    async def update_message_content(self, message_id: int, new_content: str) -> None:
        await self._run(
            "update_message_content",
            lambda uow: uow.messages.update_content(message_id, new_content, utc_now()),
        )

    async def set_message_status(self, message_id: int, status: MessageStatus) -> None:
        await self._run(
            "set_message_status",
            lambda uow: uow.messages.set_status(message_id, status, utc_now()),
        )

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

        def op(uow: UnitOfWorkSqlite) -> Conversation:
            uow.conversations.add(conversation)
            return conversation

        return await self._run("create_conversation", op)

    async def get_conversation(self, conversation_id: str) -> Optional[Conversation]:
        return await self._run("get_conversation", lambda uow: uow.conversations.get(conversation_id))

    async def list_conversations(self, limit: int = 50) -> List[Conversation]:
        return await self._run("list_conversations", lambda uow: uow.conversations.list_recent(limit))

    async def list_messages(self, conversation_id: str) -> List[Message]:
        return await self._run(
            "list_messages", lambda uow: uow.messages.list_for_conversation(conversation_id)
        )

    async def get_message(self, message_id: int) -> Optional[Message]:
        return await self._run("get_message", lambda uow: uow.messages.get(message_id))


__all__ = ["SqliteConversationStore"]
