"""Streaming package.

Exposes the SSE decoder, the response aggregator and its state machine under
a single namespace.
"""

from ..models import StreamMetrics, StreamUpdate, RunResult
from .sse import SSEDecoder, iter_sse_events
from .aggregator_state import AggregatorState, can_transition
from .aggregator import ResponseAggregator, UpdateCallback

__all__ = [
    "SSEDecoder",
    "iter_sse_events",
    "AggregatorState",
    "can_transition",
    "ResponseAggregator",
    "UpdateCallback",
    "StreamMetrics",
    "StreamUpdate",
    "RunResult",
]
