"""Response aggregator: one end-to-end streaming run.

The aggregator drives an adapter and an SSE decoder over one HTTP response,
accumulates text deltas into the target assistant message, persists every
increment through the store gateway, emits UI updates and finally records
exactly one terminal status.

Suspension points are the request, each body read and each store call.
Cancellation is observed before every read and every content write; a
pending request or read is raced against the token and abandoned (the
response is closed) rather than awaited. Failures never escape ``run``: they
become the terminal status plus an :class:`ErrorInfo` on the result. The one
exception is asyncio task cancellation, which is recorded as ``cancelled``
and then re-raised.
"""
from __future__ import annotations

import asyncio
import logging
import time
from contextlib import suppress
from typing import AsyncIterator, Callable, Optional, Sequence

import httpx

from ..cancellation import CancellationToken, Cancelled
from ..dto.provider_config import ProviderConfig
from ..errors import ErrorInfo, PersistenceError, UnrecognizedEvent
from ..interfaces import ConversationStore, ProviderAdapter
from ..logging import LogContext, get_logger, log_event
from ..models import (
    Delta,
    Message,
    MessageStatus,
    RunResult,
    ServerSentEvent,
    StreamMetrics,
    StreamUpdate,
)
from ..timeouts import TimeoutConfig, get_timeout_config, guarded
from .aggregator_helpers import (
    elapsed_ms,
    ended_early_error,
    log_terminal,
    provider_error_from_response,
)
from .aggregator_state import AggregatorState, can_transition
from .sse import SSEDecoder, iter_sse_events

UpdateCallback = Callable[[StreamUpdate], None]


async def _next_chunk(chunks: AsyncIterator[bytes]) -> Optional[bytes]:
    """Return the next body chunk or ``None`` at end of stream."""
    try:
        return await chunks.__anext__()
    except StopAsyncIteration:
        return None


class ResponseAggregator:
    """Single-writer state machine for one assistant message.

    Parameters:
        adapter: Provider variant building the request and decoding events.
        config: Provider configuration for this call.
        store: Gateway receiving content and status writes.
        message_id: Assistant message (already appended as ``pending``).
        history: Visible history sent to the provider.
        client: Shared ``httpx.AsyncClient``.
        token: Cancellation token for this run.
        timeouts: Request and idle-read bounds (defaults from the environment).
        on_update: Called synchronously with each :class:`StreamUpdate`.
        logger: Structured logger.
        conversation_id: Used for log context only.
        max_event_bytes: SSE decoder ceiling override.
    """

    def __init__(
        self,
        adapter: ProviderAdapter,
        config: ProviderConfig,
        store: ConversationStore,
        message_id: int,
        history: Sequence[Message],
        client: httpx.AsyncClient,
        token: Optional[CancellationToken] = None,
        timeouts: Optional[TimeoutConfig] = None,
        on_update: Optional[UpdateCallback] = None,
        logger: Optional[logging.Logger] = None,
        *,
        conversation_id: Optional[str] = None,
        max_event_bytes: Optional[int] = None,
    ) -> None:
        self._adapter = adapter
        self._config = config
        self._store = store
        self.message_id = message_id
        self._history = list(history)
        self._client = client
        self._token = token or CancellationToken()
        self._timeouts = timeouts or get_timeout_config()
        self._on_update = on_update
        self._logger = logger or get_logger("llm_playground.streaming")
        self._max_event_bytes = max_event_bytes
        self._state = AggregatorState.IDLE
        self._content = ""
        self._stop_reason: Optional[str] = None
        self.metrics = StreamMetrics()
        self.ctx = LogContext(
            provider=config.family.value,
            model=config.model,
            conversation_id=conversation_id,
            message_id=message_id,
        )

    # State ---------------------------------------------------------------
    @property
    def state(self) -> AggregatorState:
        return self._state

    @property
    def content(self) -> str:
        """Content persisted so far."""
        return self._content

    def _transition(self, target: AggregatorState) -> None:
        if not can_transition(self._state, target):
            raise RuntimeError(f"illegal aggregator transition {self._state.value} -> {target.value}")
        self._state = target

    def _emit(self, delta: str, status: MessageStatus) -> None:
        if self._on_update is not None:
            self._on_update(StreamUpdate(self.message_id, self._content, delta, status))

    # Run -----------------------------------------------------------------
    async def run(self) -> RunResult:
        """Execute the run and return its terminal outcome."""
        t0 = time.perf_counter()
        self._transition(AggregatorState.REQUESTING)
        log_event(self._logger, "stream.start", self.ctx, history_len=len(self._history))

        response: Optional[httpx.Response] = None
        status = MessageStatus.COMPLETE
        error: Optional[BaseException] = None
        try:
            response = await self._open()
            await self._consume(response, t0)
        except asyncio.CancelledError:
            await self._close(response)
            await self._terminate(MessageStatus.CANCELLED, Cancelled("run task cancelled"), t0)
            raise
        except Cancelled as exc:
            status, error = MessageStatus.CANCELLED, exc
        except Exception as exc:  # converted to a terminal status, never re-raised
            status, error = MessageStatus.FAILED, exc
        await self._close(response)
        return await self._terminate(status, error, t0)

    async def _open(self) -> httpx.Response:
        """Issue the request; bounded by the request timeout and the token."""
        request = self._adapter.build_request(self._history, self._config)
        self._token.raise_if_cancelled()
        response = await guarded(
            self._client.send(request.to_httpx(self._client), stream=True),
            timeout=self._timeouts.request_timeout_seconds,
            token=self._token,
            what="request",
        )
        if not 200 <= response.status_code < 300:
            try:
                body = await guarded(
                    response.aread(),
                    timeout=self._timeouts.idle_read_timeout_seconds,
                    token=self._token,
                    what="error body read",
                )
            finally:
                await self._close(response)
            raise provider_error_from_response(
                response, body, provider=self.ctx.provider, model=self._config.model
            )
        log_event(
            self._logger,
            "stream.open",
            self.ctx,
            url=request.redacted_url(),
            http_status=response.status_code,
        )
        return response

    async def _reads(self, response: httpx.Response) -> AsyncIterator[bytes]:
        """Body chunks, each read bounded by the idle timeout and the token."""
        chunks = response.aiter_bytes()
        while True:
            self._token.raise_if_cancelled()
            chunk = await guarded(
                _next_chunk(chunks),
                timeout=self._timeouts.idle_read_timeout_seconds,
                token=self._token,
                what="idle read",
            )
            if chunk is None:
                return
            yield chunk

    async def _consume(self, response: httpx.Response, t0: float) -> None:
        decoder = SSEDecoder(self._max_event_bytes) if self._max_event_bytes else SSEDecoder()
        reads = self._reads(response)
        events = iter_sse_events(reads, decoder)
        try:
            async for event in events:
                if await self._apply(event, t0):
                    return
        finally:
            await events.aclose()
            await reads.aclose()
        if self._stop_reason is None:
            raise ended_early_error(provider=self.ctx.provider, model=self._config.model)

    async def _apply(self, event: ServerSentEvent, t0: float) -> bool:
        """Apply one raw event; return True when the provider signalled completion."""
        try:
            delta = self._adapter.decode_event(event)
        except UnrecognizedEvent as exc:
            self.metrics.skipped_events += 1
            log_event(
                self._logger,
                "stream.unrecognized_event",
                self.ctx,
                level=logging.WARNING,
                sse_event=exc.event,
                data=(exc.data or "")[:200] or None,
            )
            return False

        if self._state is AggregatorState.REQUESTING:
            self._token.raise_if_cancelled()
            await self._store.set_message_status(self.message_id, MessageStatus.STREAMING)
            self._transition(AggregatorState.STREAMING)
            self._emit("", MessageStatus.STREAMING)

        if delta.is_noop:
            return False
        if delta.error is not None:
            raise delta.error
        if delta.stop_reason:
            self._stop_reason = delta.stop_reason
        if delta.text:
            await self._append(delta, t0)
        return delta.finish

    async def _append(self, delta: Delta, t0: float) -> None:
        self._token.raise_if_cancelled()
        new_content = self._content + delta.text
        await self._store.update_message_content(self.message_id, new_content)
        self._content = new_content
        self.metrics.emitted += 1
        if self.metrics.time_to_first_token_ms is None:
            self.metrics.time_to_first_token_ms = elapsed_ms(t0)
        log_event(self._logger, "stream.delta", self.ctx, level=logging.DEBUG, chars=len(delta.text))
        self._emit(delta.text, MessageStatus.STREAMING)

    async def _close(self, response: Optional[httpx.Response]) -> None:
        if response is not None and not response.is_closed:
            with suppress(httpx.HTTPError):
                await response.aclose()

    async def _terminate(
        self,
        status: MessageStatus,
        error: Optional[BaseException],
        t0: float,
    ) -> RunResult:
        """Record the single terminal status and build the result."""
        self._transition(
            AggregatorState.FINALIZING if status is MessageStatus.COMPLETE else AggregatorState.ABORTING
        )
        info = ErrorInfo.from_exception(error, provider=self.ctx.provider) if error is not None else None
        try:
            await self._store.set_message_status(self.message_id, status)
        except PersistenceError as exc:
            log_event(
                self._logger,
                "store.error",
                self.ctx,
                level=logging.ERROR,
                operation=exc.operation,
                error=exc.message,
                intended_status=status.value,
            )
            if status is MessageStatus.COMPLETE:
                status = MessageStatus.FAILED
            if info is None:
                info = ErrorInfo.from_exception(exc, provider=self.ctx.provider)
        self._transition(AggregatorState.TERMINAL)
        self.metrics.total_duration_ms = elapsed_ms(t0)
        log_terminal(
            self._logger,
            self.ctx,
            status=status,
            metrics=self.metrics,
            error=info,
            stop_reason=self._stop_reason,
        )
        self._emit("", status)
        return RunResult(
            message_id=self.message_id,
            status=status,
            content=self._content,
            error=info,
            stop_reason=self._stop_reason,
            metrics=self.metrics,
        )


__all__ = ["ResponseAggregator", "UpdateCallback"]
