"""Conversation record."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .message import utc_now
from .provider_family import ProviderFamily


@dataclass(frozen=True)
class Conversation:
    """A titled conversation bound to one provider family and model.

    ``model`` and ``base_url`` are optional overrides; when unset the
    settings layer supplies them. ``updated_at`` is bumped whenever a message
    is appended so history listings show the most recent conversation first.
    """

    id: str
    title: str
    provider: ProviderFamily
    model: Optional[str] = None
    base_url: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)


__all__ = ["Conversation"]
