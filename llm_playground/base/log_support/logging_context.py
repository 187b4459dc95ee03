"""Structured logging context object.

Defines :class:`LogContext`, carrying the fields common to every streaming
event (provider, model, conversation and message identifiers). ``to_dict``
merges the ``extra`` mapping and prunes ``None`` values.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Structured context for streaming and session logging events."""

    provider: Optional[str] = None
    model: Optional[str] = None
    conversation_id: Optional[str] = None
    message_id: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        extra = data.pop("extra", {}) or {}
        data.update({k: v for k, v in extra.items() if v is not None})
        return {k: v for k, v in data.items() if v is not None}


__all__ = ["LogContext"]
