"""Raw event record produced by the SSE decoder."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ServerSentEvent:
    """A dispatched Server-Sent-Events record.

    ``data`` holds the record's ``data`` lines joined with ``\\n``; ``event``
    defaults to ``"message"`` when the record carried no ``event`` field.
    """

    data: str
    event: str = "message"
    id: Optional[str] = None
    retry: Optional[int] = None


__all__ = ["ServerSentEvent"]
