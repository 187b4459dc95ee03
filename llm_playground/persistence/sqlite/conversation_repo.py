"""SQLite-backed implementation of ``IConversationRepo``.

All writes defer transaction commit to the Unit of Work.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime
from typing import List, Optional

from ...base.models import Conversation
from ..interfaces.repos import IConversationRepo
from .helpers import _conversation_from_row, _iso

_COLUMNS = "id, title, provider, model, base_url, created_at, updated_at"


class ConversationRepoSqlite(IConversationRepo):
    """Conversation rows keyed by uuid hex identifiers."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def add(self, conversation: Conversation) -> None:
        self.conn.execute(
            f"INSERT INTO conversations({_COLUMNS}) VALUES(?, ?, ?, ?, ?, ?, ?)",
            (
                conversation.id,
                conversation.title,
                conversation.provider.value,
                conversation.model,
                conversation.base_url,
                _iso(conversation.created_at),
                _iso(conversation.updated_at),
            ),
        )

    def get(self, conversation_id: str) -> Optional[Conversation]:
        r = self.conn.execute(
            f"SELECT {_COLUMNS} FROM conversations WHERE id = ?", (conversation_id,)
        ).fetchone()
        return _conversation_from_row(r) if r else None

    def list_recent(self, limit: int = 50) -> List[Conversation]:
        cur = self.conn.execute(
            f"SELECT {_COLUMNS} FROM conversations ORDER BY updated_at DESC, rowid DESC LIMIT ?",
            (limit,),
        )
        return [_conversation_from_row(r) for r in cur.fetchall()]

    def touch(self, conversation_id: str, at: datetime) -> None:
        self.conn.execute(
            "UPDATE conversations SET updated_at = ? WHERE id = ?", (_iso(at), conversation_id)
        )
