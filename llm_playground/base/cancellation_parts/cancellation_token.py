"""Cooperative cancellation token implementation.

Exposes the ``CancellationToken`` used by the session controller and the
response aggregator. Besides polling (``cancelled`` / ``raise_if_cancelled``)
the token can be awaited, which lets a pending network read be raced against
a cancel request and abandoned instead of awaited to completion.
"""

from __future__ import annotations

import asyncio
from threading import Lock
from typing import List, Tuple

from .cancelled import Cancelled
from .state import State


class CancellationToken:
    """A cooperative cancellation token with optional cascading semantics.

    Thread-safe for ``cancel`` + ``raise_if_cancelled`` usage. Child tokens
    inherit cancellation when the parent is cancelled. Awaiters registered
    through :meth:`wait` are woken on their own event loop.
    """

    def __init__(self, *, parent: "CancellationToken | None" = None) -> None:
        self._state = State()
        self._lock = Lock()
        self._children: List[CancellationToken] = []
        self._waiters: List[Tuple[asyncio.AbstractEventLoop, asyncio.Event]] = []
        if parent is not None:
            parent.link_child(self)

    @property
    def cancelled(self) -> bool:  # noqa: D401 - short form
        """Whether cancellation has been requested."""
        return self._state.cancelled

    @property
    def reason(self) -> str | None:  # noqa: D401 - short form
        """Reason string supplied at cancel time (if any)."""
        return self._state.reason

    def cancel(self, reason: str | None = None) -> None:
        """Request cooperative cancellation and cascade to children.

        Repeated calls are no-ops; the first reason wins.
        """
        with self._lock:
            if self._state.cancelled:
                return
            self._state.cancelled = True
            self._state.reason = reason
            children = list(self._children)
            waiters = list(self._waiters)
        for loop, event in waiters:
            _wake(loop, event)
        for child in children:
            child.cancel(reason)

    def link_child(self, token: "CancellationToken") -> "CancellationToken":
        """Link a child token so parent cancellation cascades (returns child)."""
        with self._lock:
            self._children.append(token)
            should_cancel = self._state.cancelled
            reason = self._state.reason
        if should_cancel:
            token.cancel(reason)
        return token

    def unlink_child(self, token: "CancellationToken") -> None:
        """Detach a finished child so long-lived parents do not accumulate them."""
        with self._lock:
            if token in self._children:
                self._children.remove(token)

    def raise_if_cancelled(self) -> None:
        """Raise ``Cancelled`` if token is cancelled."""
        if self._state.cancelled:
            raise Cancelled(self._state.reason or "operation cancelled")

    async def wait(self) -> None:
        """Suspend until cancellation is requested."""
        loop = asyncio.get_running_loop()
        event = asyncio.Event()
        entry = (loop, event)
        with self._lock:
            if self._state.cancelled:
                return
            self._waiters.append(entry)
        try:
            await event.wait()
        finally:
            with self._lock:
                if entry in self._waiters:
                    self._waiters.remove(entry)

    def child(self) -> "CancellationToken":
        """Create and link a child token (shortcut)."""
        return CancellationToken(parent=self)

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return (
            f"CancellationToken(cancelled={self._state.cancelled}, "
            f"reason={self._state.reason!r}, children={len(self._children)})"
        )


def _wake(loop: asyncio.AbstractEventLoop, event: asyncio.Event) -> None:
    """Set ``event`` from whichever thread ``cancel`` was called on."""
    try:
        running = asyncio.get_running_loop()
    except RuntimeError:
        running = None
    if running is loop:
        event.set()
    elif not loop.is_closed():
        loop.call_soon_threadsafe(event.set)


__all__ = ["CancellationToken"]
