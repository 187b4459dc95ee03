"""SQLite-backed implementation of ``IMessageRepo``.

Writes to a message that already reached a terminal status are rejected with
``PersistenceError`` so a late writer can never alter finished history.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime
from typing import List, Optional

from ...base.errors import PersistenceError
from ...base.models import TERMINAL_STATUSES, Message, MessageStatus, Role
from ..interfaces.repos import IMessageRepo
from .helpers import _iso, _message_from_row

_COLUMNS = "id, conversation_id, role, content, status, created_at, updated_at"
_TERMINAL = tuple(s.value for s in TERMINAL_STATUSES)
_NOT_TERMINAL_SQL = f"status NOT IN ({', '.join('?' for _ in _TERMINAL)})"


class MessageRepoSqlite(IMessageRepo):
    """Message rows with integer autoincrement identifiers."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def add(
        self,
        conversation_id: str,
        role: Role,
        content: str,
        status: MessageStatus,
        at: datetime,
    ) -> int:
        ts = _iso(at)
        cur = self.conn.execute(
            "INSERT INTO messages(conversation_id, role, content, status, created_at, updated_at) "
            "VALUES(?, ?, ?, ?, ?, ?)",
            (conversation_id, role, content, status.value, ts, ts),
        )
        return int(cur.lastrowid)

    def get(self, message_id: int) -> Optional[Message]:
        r = self.conn.execute(f"SELECT {_COLUMNS} FROM messages WHERE id = ?", (message_id,)).fetchone()
        return _message_from_row(r) if r else None

    def update_content(self, message_id: int, content: str, at: datetime) -> None:
        cur = self.conn.execute(
            f"UPDATE messages SET content = ?, updated_at = ? WHERE id = ? AND {_NOT_TERMINAL_SQL}",
            (content, _iso(at), message_id, *_TERMINAL),
        )
        if cur.rowcount == 0:
            self._raise_unwritable("update_message_content", message_id)

    def set_status(self, message_id: int, status: MessageStatus, at: datetime) -> None:
        cur = self.conn.execute(
            f"UPDATE messages SET status = ?, updated_at = ? WHERE id = ? AND {_NOT_TERMINAL_SQL}",
            (status.value, _iso(at), message_id, *_TERMINAL),
        )
        if cur.rowcount == 0:
            self._raise_unwritable("set_message_status", message_id)

    def list_for_conversation(self, conversation_id: str) -> List[Message]:
        cur = self.conn.execute(
            f"SELECT {_COLUMNS} FROM messages WHERE conversation_id = ? ORDER BY id ASC",
            (conversation_id,),
        )
        return [_message_from_row(r) for r in cur.fetchall()]

    def _raise_unwritable(self, operation: str, message_id: int) -> None:
        existing = self.get(message_id)
        if existing is None:
            raise PersistenceError(operation, f"unknown message {message_id}")
        raise PersistenceError(operation, f"message {message_id} is already {existing.status.value}")
