"""Handle returned by ``SessionController.send``.

The handle is the caller's view of one in-flight run: it exposes the message
identifiers, a cooperative ``cancel``, the final :class:`RunResult` and an
async iterator over incremental :class:`StreamUpdate` values.
"""
from __future__ import annotations

import asyncio
from typing import AsyncIterator, Optional

from ..base.cancellation import CancellationToken
from ..base.models import RunResult, StreamUpdate


class StreamHandle:
    """Caller-facing control surface for one aggregator run."""

    def __init__(self, conversation_id: str, token: CancellationToken) -> None:
        self.conversation_id = conversation_id
        self.token = token
        self.message_id: Optional[int] = None
        self.user_message_id: Optional[int] = None
        self._task: Optional["asyncio.Task[RunResult]"] = None
        self._updates: "asyncio.Queue[Optional[StreamUpdate]]" = asyncio.Queue()

    @property
    def done(self) -> bool:
        """True once the run reached its terminal state."""
        return self._task is not None and self._task.done()

    def cancel(self, reason: Optional[str] = None) -> None:
        """Request cancellation. Idempotent; a no-op after the run finished."""
        if self.done:
            return
        self.token.cancel(reason or "cancelled by user")

    async def wait(self) -> RunResult:
        """Wait for and return the run's outcome.

        Cancelling the waiter does not cancel the run; use :meth:`cancel`.
        """
        if self._task is None:
            raise RuntimeError("run has not started")
        return await asyncio.shield(self._task)

    async def updates(self) -> AsyncIterator[StreamUpdate]:
        """Yield updates in order, ending with the terminal one."""
        while True:
            update = await self._updates.get()
            if update is None:
                return
            yield update
            if update.is_terminal:
                return

    # Controller side -------------------------------------------------------
    def _push(self, update: StreamUpdate) -> None:
        self._updates.put_nowait(update)

    def _close_updates(self) -> None:
        self._updates.put_nowait(None)

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return (
            f"StreamHandle(conversation_id={self.conversation_id!r}, "
            f"message_id={self.message_id}, done={self.done})"
        )


__all__ = ["StreamHandle"]
