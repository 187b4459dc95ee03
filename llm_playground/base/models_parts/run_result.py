"""Outcome of one aggregator run."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..errors_parts.error_info import ErrorInfo
from .message_status import MessageStatus
from .stream_metrics import StreamMetrics


@dataclass(frozen=True)
class RunResult:
    """Terminal outcome handed back to the caller instead of an exception.

    Attributes:
        message_id: The assistant message the run wrote to.
        status: Terminal status recorded for the message.
        content: Final content (partial output for failed/cancelled runs).
        error: Display value for failed or cancelled runs.
        stop_reason: Provider finish reason, when reported.
        metrics: Counters and timings.
    """

    message_id: int
    status: MessageStatus
    content: str
    error: Optional[ErrorInfo] = None
    stop_reason: Optional[str] = None
    metrics: StreamMetrics = field(default_factory=StreamMetrics)

    @property
    def ok(self) -> bool:
        return self.status is MessageStatus.COMPLETE


__all__ = ["RunResult"]
