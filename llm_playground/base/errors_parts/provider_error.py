"""
Structured provider error exception type.

Raised for non-2xx HTTP responses and for error payloads reported inside a
provider stream. Carries the HTTP status and response body so the failure can
be shown to the user next to the partially generated message.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass
class ProviderError(Exception):
    """Represents a provider-side failure with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable error message suitable for display.
        provider: Provider family where the error originated (e.g. ``"openai"``).
        model: Optional model name associated with the failure.
        status: HTTP status code when the failure is an HTTP-level rejection.
        body: Raw response body (truncated) for display and diagnostics.
        raw: Optional original exception for diagnostics.
    """

    code: ErrorCode
    message: str
    provider: str
    model: Optional[str] = None
    status: Optional[int] = None
    body: Optional[str] = None
    raw: Optional[Exception] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        status = f" [{self.status}]" if self.status is not None else ""
        return f"{self.provider}:{self.model or '-'} {self.code.value}{status}: {self.message}"


__all__ = ["ProviderError"]
