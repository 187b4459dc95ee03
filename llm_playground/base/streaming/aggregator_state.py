"""Aggregator lifecycle states and the legal transitions between them."""
from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet


class AggregatorState(str, Enum):
    """Per-run state machine.

    ``idle -> requesting -> streaming -> {finalizing, aborting} -> terminal``,
    with ``requesting -> aborting`` for failures before the first delta.
    """

    IDLE = "idle"
    REQUESTING = "requesting"
    STREAMING = "streaming"
    FINALIZING = "finalizing"
    ABORTING = "aborting"
    TERMINAL = "terminal"


TRANSITIONS: Dict[AggregatorState, FrozenSet[AggregatorState]] = {
    AggregatorState.IDLE: frozenset({AggregatorState.REQUESTING}),
    AggregatorState.REQUESTING: frozenset({AggregatorState.STREAMING, AggregatorState.ABORTING}),
    AggregatorState.STREAMING: frozenset({AggregatorState.FINALIZING, AggregatorState.ABORTING}),
    AggregatorState.FINALIZING: frozenset({AggregatorState.TERMINAL}),
    AggregatorState.ABORTING: frozenset({AggregatorState.TERMINAL}),
    AggregatorState.TERMINAL: frozenset(),
}


def can_transition(current: AggregatorState, target: AggregatorState) -> bool:
    return target in TRANSITIONS[current]


__all__ = ["AggregatorState", "TRANSITIONS", "can_transition"]
