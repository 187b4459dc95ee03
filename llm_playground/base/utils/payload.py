"""Event payload parsing shared by the provider adapters."""
from __future__ import annotations

import json
from typing import Any, Dict, Optional

from ..errors import DecodeError, ErrorCode, ProviderError, code_for_status
from ..models import ServerSentEvent


def load_event_json(event: ServerSentEvent, provider: str) -> Dict[str, Any]:
    """Parse ``event.data`` as a JSON object.

    Raises:
        DecodeError: Malformed JSON or a payload that is not an object.
    """
    try:
        payload = json.loads(event.data)
    except ValueError as exc:
        raise DecodeError(
            f"malformed JSON in {event.event!r} event: {exc}",
            provider=provider,
            event=event.event,
            data=event.data[:200],
        ) from exc
    if not isinstance(payload, dict):
        raise DecodeError(
            f"expected a JSON object in {event.event!r} event, got {type(payload).__name__}",
            provider=provider,
            event=event.event,
            data=event.data[:200],
        )
    return payload


def error_from_payload(
    error: Any,
    *,
    provider: str,
    model: Optional[str] = None,
    default_code: ErrorCode = ErrorCode.SERVER_ERROR,
) -> ProviderError:
    """Build a :class:`ProviderError` from an in-stream ``error`` object.

    Accepts ``{"message", "type"|"code"|"status"}`` mappings or bare strings.
    Integer ``code`` values are treated as HTTP statuses.
    """
    if not isinstance(error, dict):
        return ProviderError(code=default_code, message=str(error) or "provider error", provider=provider, model=model)
    message = str(error.get("message") or error.get("type") or "provider error")
    status = error.get("code") if isinstance(error.get("code"), int) else None
    kind = error.get("type") or error.get("status")
    code = code_for_status(status) if status is not None else _code_for_kind(kind, default_code)
    return ProviderError(code=code, message=message, provider=provider, model=model, status=status)


_KIND_MAP = {
    "invalid_request_error": ErrorCode.VALIDATION,
    "authentication_error": ErrorCode.AUTH,
    "permission_error": ErrorCode.AUTH,
    "not_found_error": ErrorCode.NOT_FOUND,
    "rate_limit_error": ErrorCode.RATE_LIMIT,
    "overloaded_error": ErrorCode.UNAVAILABLE,
    "api_error": ErrorCode.SERVER_ERROR,
    "server_error": ErrorCode.SERVER_ERROR,
    "INVALID_ARGUMENT": ErrorCode.VALIDATION,
    "PERMISSION_DENIED": ErrorCode.AUTH,
    "UNAUTHENTICATED": ErrorCode.AUTH,
    "RESOURCE_EXHAUSTED": ErrorCode.RATE_LIMIT,
    "UNAVAILABLE": ErrorCode.UNAVAILABLE,
    "INTERNAL": ErrorCode.SERVER_ERROR,
}


def _code_for_kind(kind: Any, default: ErrorCode) -> ErrorCode:
    return _KIND_MAP.get(kind, default) if isinstance(kind, str) else default


__all__ = ["load_event_json", "error_from_payload"]
