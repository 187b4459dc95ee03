"""Cancellation error type.

Defines the public ``Cancelled`` error used to signal cooperative cancellation
of an aggregator run. Kept isolated to satisfy one-class-per-file policy.
"""

from __future__ import annotations


class Cancelled(RuntimeError):
    """Raised when a run observes a cancellation request.

    Distinguishes user-initiated cancellation from other runtime failures so
    the aggregator can map it to the ``cancelled`` status instead of
    ``failed``.
    """

    def __init__(self, reason: str = "operation cancelled") -> None:
        super().__init__(reason)
        self.reason = reason


__all__ = ["Cancelled"]
