"""
Errors raised while turning a provider byte stream into deltas.

``FramingError`` belongs to the SSE decoder (no record separator before the
buffer ceiling). ``DecodeError`` belongs to provider adapters (an event whose
payload is not the JSON object the provider promised). Both abort the
current aggregator run and mark the message ``failed``.

``UnrecognizedEvent`` is different: it is a non-fatal signal raised by an
adapter for an event shape outside its known vocabulary. The aggregator logs
and skips it so newer provider event types do not break older clients.
"""
from __future__ import annotations

from typing import Any, Optional, Sequence

from .error_code import ErrorCode


class StreamError(Exception):
    """Base class for fatal stream-level failures."""

    code: ErrorCode = ErrorCode.UNKNOWN

    def __init__(self, message: str, *, provider: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.provider = provider


class FramingError(StreamError):
    """The byte stream could not be split into event records.

    ``events`` holds the records completed by the same read before the
    ceiling was crossed; they precede the failure and still count.
    """

    code = ErrorCode.FRAMING

    def __init__(self, message: str, *, provider: Optional[str] = None, events: Sequence[Any] = ()) -> None:
        super().__init__(message, provider=provider)
        self.events = list(events)


class DecodeError(StreamError):
    """An event record carried a payload that could not be decoded."""

    code = ErrorCode.DECODE

    def __init__(
        self,
        message: str,
        *,
        provider: Optional[str] = None,
        event: Optional[str] = None,
        data: Optional[str] = None,
    ) -> None:
        super().__init__(message, provider=provider)
        self.event = event
        self.data = data


class UnrecognizedEvent(Exception):
    """An event outside the adapter's known vocabulary (skipped, not fatal)."""

    def __init__(self, provider: str, event: Optional[str], data: Optional[str] = None) -> None:
        super().__init__(f"{provider}: unrecognized event {event!r}")
        self.provider = provider
        self.event = event
        self.data = data


__all__ = ["StreamError", "FramingError", "DecodeError", "UnrecognizedEvent"]
