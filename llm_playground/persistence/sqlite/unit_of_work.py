"""SQLite-backed Unit of Work implementation aggregating repositories.

Composes the repository implementations and manages transaction boundaries.
On context exit it commits when no exception occurred; otherwise it rolls
back. No implicit commits happen inside repositories.
"""

from __future__ import annotations

import sqlite3

from ..interfaces.repos import IUnitOfWork
from .conversation_repo import ConversationRepoSqlite
from .message_repo import MessageRepoSqlite


class UnitOfWorkSqlite(IUnitOfWork):
    """Unit of Work implementation for SQLite."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        self.conversations = ConversationRepoSqlite(conn)
        self.messages = MessageRepoSqlite(conn)
        self._active = False

    def __enter__(self) -> "UnitOfWorkSqlite":
        """Enter the managed context and mark the Unit of Work active."""
        self._active = True
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        """Commit if no exception was raised; otherwise roll back."""
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
        finally:
            self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def commit(self) -> None:
        """Commit the current transaction."""
        self._conn.commit()

    def rollback(self) -> None:
        """Rollback the current transaction (idempotent)."""
        self._conn.rollback()


__all__ = ["UnitOfWorkSqlite"]
