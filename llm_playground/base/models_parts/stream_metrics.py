"""Streaming metrics collected per aggregator run."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class StreamMetrics:
    """Counters and timings for a single run.

    Attributes:
        emitted: Number of non-empty text deltas applied.
        time_to_first_token_ms: Milliseconds from request start to the first text delta.
        total_duration_ms: Milliseconds from request start to the terminal write.
        skipped_events: Unrecognized events skipped for forward compatibility.
    """

    emitted: int = 0
    time_to_first_token_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None
    skipped_events: int = 0


__all__ = ["StreamMetrics"]
