"""Aggregator helper functions.

Small pure helpers kept out of ``aggregator.py`` so the run loop reads as the
state machine it implements.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Optional

import httpx

from ..errors import ErrorCode, ErrorInfo, ProviderError, code_for_status
from ..logging import LogContext, normalized_log_event
from ..models import MessageStatus, StreamMetrics

_MAX_BODY_CHARS = 2000


def _error_message_from_payload(payload: Any) -> Optional[str]:
    """Pull a human readable message out of a provider error body.

    Handles ``{"error": {"message": ...}}`` (OpenAI, Gemini, Anthropic),
    ``{"error": "..."}`` and ``{"message": ...}`` (self-hosted servers).
    """
    if not isinstance(payload, dict):
        return None
    err = payload.get("error")
    if isinstance(err, dict):
        msg = err.get("message")
        if isinstance(msg, str) and msg:
            return msg
    if isinstance(err, str) and err:
        return err
    msg = payload.get("message")
    return msg if isinstance(msg, str) and msg else None


def provider_error_from_response(
    response: httpx.Response,
    body: bytes,
    *,
    provider: str,
    model: Optional[str],
) -> ProviderError:
    """Build a :class:`ProviderError` for a non-2xx response."""
    text = body.decode("utf-8", errors="replace")
    message = None
    try:
        message = _error_message_from_payload(json.loads(text))
    except ValueError:
        message = None
    status = response.status_code
    reason = response.reason_phrase or "error"
    return ProviderError(
        code=code_for_status(status),
        message=message or f"HTTP {status} {reason}",
        provider=provider,
        model=model,
        status=status,
        body=text[:_MAX_BODY_CHARS] or None,
    )


def ended_early_error(*, provider: str, model: Optional[str]) -> ProviderError:
    """Error for a stream that closed without a completion signal."""
    return ProviderError(
        code=ErrorCode.TRANSIENT,
        message="stream ended before completion",
        provider=provider,
        model=model,
    )


def elapsed_ms(t0: float) -> float:
    return (time.perf_counter() - t0) * 1000.0


def log_terminal(
    logger: logging.Logger,
    ctx: LogContext,
    *,
    status: MessageStatus,
    metrics: StreamMetrics,
    error: Optional[ErrorInfo],
    stop_reason: Optional[str],
) -> None:
    """Emit the consolidated end-of-run event."""
    if status is MessageStatus.COMPLETE:
        event, level = "stream.end", logging.INFO
    elif status is MessageStatus.CANCELLED:
        event, level = "stream.cancelled", logging.INFO
    else:
        event, level = "stream.error", logging.WARNING
    normalized_log_event(
        logger,
        event,
        ctx,
        phase="finalize",
        error_code=error.code.value if error is not None else None,
        emitted=metrics.emitted > 0,
        level=level,
        status=status.value,
        stop_reason=stop_reason,
        emitted_count=metrics.emitted,
        skipped_events=metrics.skipped_events,
        time_to_first_token_ms=metrics.time_to_first_token_ms,
        total_duration_ms=metrics.total_duration_ms,
        error=error.message if error is not None else None,
        http_status=error.status if error is not None else None,
    )


__all__ = [
    "provider_error_from_response",
    "ended_early_error",
    "elapsed_ms",
    "log_terminal",
]
