"""
Normalized error codes (taxonomy).

Defines the `ErrorCode` enumeration used by provider adapters, the stream
decoder, the response aggregator, and the store gateway. Values are lowercase
snake_case and are considered a stable public contract for logging and for
the error value attached to failed messages.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated normalized error codes representing failure categories."""

    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    TRANSIENT = "transient"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    SERVER_ERROR = "server_error"
    UNAVAILABLE = "unavailable"
    DECODE = "decode"
    FRAMING = "framing"
    PERSISTENCE = "persistence"
    BUSY = "busy"
    INTERNAL = "internal"
    UNKNOWN = "unknown"


__all__ = ["ErrorCode"]
