"""
Display value attached to a failed or cancelled run.

The aggregator never lets an exception escape into the UI layer; instead it
converts the failure into an :class:`ErrorInfo` that travels on the run
result next to the terminal message status.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from ..cancellation_parts.cancelled import Cancelled
from .classification import classify_exception
from .error_code import ErrorCode
from .provider_error import ProviderError
from .session_errors import PersistenceError
from .stream_errors import StreamError

_MAX_MESSAGE_CHARS = 500


@dataclass(frozen=True)
class ErrorInfo:
    """Structured, JSON-friendly description of a run failure."""

    code: ErrorCode
    message: str
    provider: Optional[str] = None
    status: Optional[int] = None
    body: Optional[str] = None

    @classmethod
    def from_exception(cls, exc: BaseException, *, provider: Optional[str] = None) -> "ErrorInfo":
        """Build an ``ErrorInfo`` from any exception raised during a run."""
        if isinstance(exc, ProviderError):
            return cls(
                code=exc.code,
                message=exc.message[:_MAX_MESSAGE_CHARS],
                provider=exc.provider or provider,
                status=exc.status,
                body=exc.body,
            )
        if isinstance(exc, Cancelled):
            return cls(code=ErrorCode.CANCELLED, message=exc.reason, provider=provider)
        if isinstance(exc, StreamError):
            return cls(code=exc.code, message=exc.message[:_MAX_MESSAGE_CHARS], provider=exc.provider or provider)
        if isinstance(exc, PersistenceError):
            return cls(code=ErrorCode.PERSISTENCE, message=str(exc)[:_MAX_MESSAGE_CHARS], provider=provider)
        text = str(exc) or type(exc).__name__
        return cls(code=classify_exception(exc), message=text[:_MAX_MESSAGE_CHARS], provider=provider)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["code"] = self.code.value
        return {k: v for k, v in data.items() if v is not None}


__all__ = ["ErrorInfo"]
