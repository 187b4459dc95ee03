"""Shared helper functions for SQLite repository adapters.

Timestamps are stored as ISO8601 text and normalized to timezone-aware UTC
``datetime`` objects on read.
"""

from __future__ import annotations

from contextlib import suppress
from datetime import datetime, timezone
from typing import Any

from ...base.models import Conversation, Message, MessageStatus, ProviderFamily


def _iso(value: datetime) -> str:
    """Serialize ``value`` as ISO8601 (UTC assumed if naive)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat(timespec="microseconds")


def _parse_ts(raw: Any) -> datetime:
    """Parse a stored timestamp into an aware UTC ``datetime``.

    Malformed values map to the epoch rather than failing a whole listing.
    """
    if isinstance(raw, datetime):
        return raw if raw.tzinfo else raw.replace(tzinfo=timezone.utc)
    if isinstance(raw, str):
        with suppress(ValueError, TypeError):
            dt = datetime.fromisoformat(raw)
            return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)
    return datetime.fromtimestamp(0, tz=timezone.utc)


def _conversation_from_row(r: Any) -> Conversation:
    return Conversation(
        id=r["id"],
        title=r["title"],
        provider=ProviderFamily.parse(r["provider"]),
        model=r["model"],
        base_url=r["base_url"],
        created_at=_parse_ts(r["created_at"]),
        updated_at=_parse_ts(r["updated_at"]),
    )


def _message_from_row(r: Any) -> Message:
    return Message(
        id=int(r["id"]),
        conversation_id=r["conversation_id"],
        role=r["role"],
        content=r["content"],
        status=MessageStatus(r["status"]),
        created_at=_parse_ts(r["created_at"]),
        updated_at=_parse_ts(r["updated_at"]),
    )
