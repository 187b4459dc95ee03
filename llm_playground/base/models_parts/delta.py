"""
Decoded stream delta.

A :class:`Delta` is the unit the response aggregator consumes: either a text
fragment, a provider-native completion signal, a provider-reported error, or
a no-op for protocol events that carry nothing for the message (pings,
block boundaries, usage chunks).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..errors_parts.provider_error import ProviderError


@dataclass(frozen=True)
class Delta:
    """One decoded increment of a streamed response.

    Attributes:
        text: Content fragment to append (may be empty).
        finish: True when the provider signalled that the stream is complete.
        stop_reason: Provider finish reason when one was reported.
        error: Provider-reported error payload, if any.
        event: Native event name, kept for logging.
    """

    text: str = ""
    finish: bool = False
    stop_reason: Optional[str] = None
    error: Optional[ProviderError] = None
    event: Optional[str] = None

    @classmethod
    def content(cls, text: str, *, stop_reason: Optional[str] = None, event: Optional[str] = None) -> "Delta":
        return cls(text=text, stop_reason=stop_reason, event=event)

    @classmethod
    def noop(cls, event: Optional[str] = None) -> "Delta":
        return cls(event=event)

    @classmethod
    def done(cls, stop_reason: Optional[str] = None, *, event: Optional[str] = None) -> "Delta":
        return cls(finish=True, stop_reason=stop_reason, event=event)

    @classmethod
    def failure(cls, error: ProviderError, *, event: Optional[str] = None) -> "Delta":
        return cls(error=error, event=event)

    @property
    def is_noop(self) -> bool:
        return not (self.text or self.finish or self.stop_reason or self.error)


__all__ = ["Delta"]
