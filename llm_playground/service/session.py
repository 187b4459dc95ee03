"""Session controller: top-level orchestration of chat runs.

``send`` appends the user turn, appends a ``pending`` assistant message,
builds the visible history and starts a :class:`ResponseAggregator` as an
asyncio task. At most one run may be active per conversation; runs on
different conversations are independent and share only the store and the
pooled HTTP client. A semaphore bounds how many runs stream at once.

Cancellation is cooperative: each run owns a child of the controller's root
token, so ``StreamHandle.cancel`` stops one run and ``aclose`` stops all.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Callable, Dict, List, Optional

import httpx

from ..base.cancellation import CancellationToken
from ..base.dto.provider_config import ProviderConfig
from ..base.errors import ConversationBusy, PersistenceError
from ..base.factory import AdapterFactory
from ..base.http import get_httpx_client
from ..base.interfaces import ConversationStore, ProviderAdapter
from ..base.logging import LogContext, get_logger, log_event
from ..base.models import Conversation, Message, MessageStatus, ProviderFamily, RunResult
from ..base.streaming import AggregatorState, ResponseAggregator
from ..base.timeouts import TimeoutConfig
from ..base.utils.messages import visible_history
from ..config.defaults import DEFAULT_MAX_CONCURRENT_STREAMS
from .stream_handle import StreamHandle

ConfigResolver = Callable[[Conversation], ProviderConfig]
AdapterResolver = Callable[[ProviderFamily], ProviderAdapter]


class SessionController:
    """Accept prompts and drive one aggregator run per conversation.

    Parameters:
        store: Conversation store gateway.
        config_for: Resolves the ``ProviderConfig`` for a conversation
            (typically ``AppSettings.provider_config_for``).
        client: HTTP client; defaults to the shared pool.
        timeouts: Request and idle-read bounds; defaults from the environment.
        max_concurrent_streams: Runs allowed to stream at the same time.
        logger: Structured logger.
        adapter_for: Family to adapter resolution (``AdapterFactory.create``).
    """

    def __init__(
        self,
        store: ConversationStore,
        config_for: ConfigResolver,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeouts: Optional[TimeoutConfig] = None,
        max_concurrent_streams: int = DEFAULT_MAX_CONCURRENT_STREAMS,
        logger: Optional[logging.Logger] = None,
        adapter_for: AdapterResolver = AdapterFactory.create,
    ) -> None:
        if max_concurrent_streams < 1:
            raise ValueError("max_concurrent_streams must be at least 1")
        self._store = store
        self._config_for = config_for
        self._client = client
        self._timeouts = timeouts
        self._semaphore = asyncio.Semaphore(max_concurrent_streams)
        self._logger = logger or get_logger("llm_playground.session")
        self._adapter_for = adapter_for
        self._root = CancellationToken()
        self._active: Dict[str, StreamHandle] = {}

    def active(self, conversation_id: str) -> bool:
        """Whether a run is in flight on ``conversation_id``."""
        return conversation_id in self._active

    async def send(self, conversation_id: str, user_text: str) -> StreamHandle:
        """Start a run answering ``user_text`` on ``conversation_id``.

        Raises:
            ConversationBusy: A run is already active (nothing is written).
            ValueError: ``user_text`` is blank.
            PersistenceError: Unknown conversation or a failed store write.
            pydantic.ValidationError: The conversation cannot be configured.
        """
        if conversation_id in self._active:
            log_event(
                self._logger,
                "session.busy",
                LogContext(conversation_id=conversation_id),
                level=logging.WARNING,
            )
            raise ConversationBusy(conversation_id)
        if not user_text or not user_text.strip():
            raise ValueError("user_text must not be blank")
        if self._root.cancelled:
            raise RuntimeError("session controller is closed")

        handle = StreamHandle(conversation_id, self._root.child())
        self._active[conversation_id] = handle
        try:
            aggregator = await self._prepare(handle, user_text)
        except BaseException:
            self._release(handle)
            raise
        handle._task = asyncio.create_task(self._drive(handle, aggregator))
        return handle

    async def _prepare(self, handle: StreamHandle, user_text: str) -> ResponseAggregator:
        conversation_id = handle.conversation_id
        conversation = await self._store.get_conversation(conversation_id)
        if conversation is None:
            raise PersistenceError("get_conversation", f"unknown conversation {conversation_id}")
        config = self._config_for(conversation)
        adapter = self._adapter_for(config.family)

        handle.user_message_id = await self._store.append_message(
            conversation_id, "user", user_text, status=MessageStatus.COMPLETE
        )
        handle.message_id = await self._store.append_message(
            conversation_id, "assistant", "", status=MessageStatus.PENDING
        )
        try:
            history = visible_history(await self._store.list_messages(conversation_id))
            return self._aggregator_for(handle, config, adapter, history)
        except BaseException as exc:
            await self._abandon(handle, exc)
            raise

    def _aggregator_for(
        self,
        handle: StreamHandle,
        config: ProviderConfig,
        adapter: ProviderAdapter,
        history: List[Message],
    ) -> ResponseAggregator:
        conversation_id = handle.conversation_id
        log_event(
            self._logger,
            "session.send",
            LogContext(
                provider=config.family.value,
                model=config.model,
                conversation_id=conversation_id,
                message_id=handle.message_id,
            ),
            history_len=len(history),
        )
        return ResponseAggregator(
            adapter,
            config,
            self._store,
            handle.message_id,
            history,
            self._client or get_httpx_client(),
            token=handle.token,
            timeouts=self._timeouts,
            on_update=handle._push,
            logger=self._logger,
            conversation_id=conversation_id,
        )

    async def _abandon(self, handle: StreamHandle, exc: BaseException) -> None:
        """Give an assistant message whose run never started its terminal status."""
        status = MessageStatus.CANCELLED if isinstance(exc, asyncio.CancelledError) else MessageStatus.FAILED
        try:
            await self._store.set_message_status(handle.message_id, status)
        except PersistenceError as write_exc:
            log_event(
                self._logger,
                "store.error",
                LogContext(conversation_id=handle.conversation_id, message_id=handle.message_id),
                level=logging.ERROR,
                operation=write_exc.operation,
                error=write_exc.message,
                intended_status=status.value,
            )

    async def _drive(self, handle: StreamHandle, aggregator: ResponseAggregator) -> RunResult:
        try:
            async with self._semaphore:
                return await aggregator.run()
        except asyncio.CancelledError as exc:
            if aggregator.state is AggregatorState.IDLE:
                # cancelled while queued for a stream slot
                await self._abandon(handle, exc)
            raise
        finally:
            self._release(handle)
            handle._close_updates()

    def _release(self, handle: StreamHandle) -> None:
        if self._active.get(handle.conversation_id) is handle:
            del self._active[handle.conversation_id]
        self._root.unlink_child(handle.token)

    async def aclose(self) -> None:
        """Cancel every active run and wait for them to reach a terminal state."""
        self._root.cancel("session closing")
        tasks = [h._task for h in list(self._active.values()) if h._task is not None]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def __aenter__(self) -> "SessionController":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


__all__ = ["SessionController", "ConfigResolver", "AdapterResolver"]
