"""Unified timeout & cancellation utilities for streaming runs.

This module centralizes the timeout values used by the response aggregator
and exposes an awaitable guard that races a network operation against a
deadline and a cancellation token.

Key Components
--------------
TimeoutConfig
    Dataclass capturing normalized timeout values. ``request_timeout_seconds``
    bounds the ``requesting`` phase only (sending the request and receiving
    the response head). ``idle_read_timeout_seconds`` bounds each individual
    read once streaming has begun, so slow-but-alive generation is tolerated
    while a silent connection is not.

get_timeout_config()
    Returns a process-cached configuration, re-parsing environment overrides
    only when they change. Supported environment variables (all optional):
        LLM_PLAYGROUND_REQUEST_TIMEOUT_SECONDS
        LLM_PLAYGROUND_IDLE_TIMEOUT_SECONDS

guarded(awaitable, timeout=..., token=...)
    Await ``awaitable`` unless the deadline elapses or the token is
    cancelled first. The losing operation is cancelled, never awaited to
    completion.

Failure Modes
-------------
``TimeoutError`` when the deadline elapses; ``Cancelled`` when the token
fires first.
"""
from __future__ import annotations

import asyncio
import os
from contextlib import suppress
from dataclasses import dataclass
from typing import Awaitable, Optional, TypeVar

from .cancellation import CancellationToken, Cancelled

T = TypeVar("T")

REQUEST_TIMEOUT_ENV = "LLM_PLAYGROUND_REQUEST_TIMEOUT_SECONDS"
IDLE_TIMEOUT_ENV = "LLM_PLAYGROUND_IDLE_TIMEOUT_SECONDS"


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        request_timeout_seconds: Deadline for issuing the request and
            receiving the response status line and headers.
        idle_read_timeout_seconds: Deadline for each read of the response
            body once it is open.
    """

    request_timeout_seconds: float = 30.0
    idle_read_timeout_seconds: float = 60.0


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Parse an environment variable as a positive float with a fallback default."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached `TimeoutConfig` instance.

    The cache is refreshed whenever one of the override variables changes so
    tests can adjust timeouts with ``monkeypatch.setenv``.
    """
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    cur_guard = "/".join([os.getenv(REQUEST_TIMEOUT_ENV, ""), os.getenv(IDLE_TIMEOUT_ENV, "")])
    if _CACHED is not None and _ENV_GUARD == cur_guard:
        return _CACHED
    _CACHED = TimeoutConfig(
        request_timeout_seconds=_parse_env_float(REQUEST_TIMEOUT_ENV, 30.0),
        idle_read_timeout_seconds=_parse_env_float(IDLE_TIMEOUT_ENV, 60.0),
    )
    _ENV_GUARD = cur_guard
    return _CACHED


async def _abandon(task: "asyncio.Future[T]") -> None:
    """Cancel a losing operation and close whatever it still produced.

    An operation can finish in the same tick it loses the race, or swallow
    the cancellation and return anyway; an open response left that way would
    never be released.
    """
    task.cancel()
    await asyncio.gather(task, return_exceptions=True)
    if task.cancelled() or task.exception() is not None:
        return
    close = getattr(task.result(), "aclose", None)
    if close is not None:
        with suppress(Exception):
            await close()


async def guarded(
    awaitable: Awaitable[T],
    *,
    timeout: Optional[float],
    token: Optional[CancellationToken] = None,
    what: str = "operation",
) -> T:
    """Await ``awaitable`` bounded by ``timeout`` and abandoned on cancellation.

    Args:
        awaitable: Coroutine or future performing the network operation.
        timeout: Seconds before ``TimeoutError``; ``None`` or ``<= 0`` disables it.
        token: Optional cancellation token raced against the operation.
        what: Label used in the timeout message.

    Returns:
        The operation's result.

    Raises:
        Cancelled: The token was cancelled before the operation finished.
        TimeoutError: The deadline elapsed first.
    """
    if token is not None:
        token.raise_if_cancelled()
    task = asyncio.ensure_future(awaitable)
    waiter = asyncio.ensure_future(token.wait()) if token is not None else None
    pending = {task} if waiter is None else {task, waiter}
    try:
        done, _ = await asyncio.wait(
            pending,
            timeout=timeout if timeout and timeout > 0 else None,
            return_when=asyncio.FIRST_COMPLETED,
        )
    except asyncio.CancelledError:
        await _abandon(task)
        raise
    finally:
        if waiter is not None:
            waiter.cancel()
    if task in done:
        return task.result()
    await _abandon(task)
    if token is not None and token.cancelled:
        raise Cancelled(token.reason or "operation cancelled")
    raise TimeoutError(f"{what} exceeded {timeout}s")


__all__ = [
    "TimeoutConfig",
    "get_timeout_config",
    "guarded",
    "REQUEST_TIMEOUT_ENV",
    "IDLE_TIMEOUT_ENV",
]
