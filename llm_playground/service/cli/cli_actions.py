"""CLI action handlers.

Purpose
-------
Subcommand handlers for ``llm-playground``, keeping the entrypoint thin. This
module has no top-level side effects and is safe to import in tests.

Fallback & Error Semantics
--------------------------
- Configuration problems (unreadable settings, missing key or model, unknown
  conversation) are printed as JSON to stderr with exit code ``2``.
- A run that ends ``failed`` prints its error as JSON to stderr and returns
  ``1``; a cancelled run keeps its partial output and returns ``130``.

Cancellation
------------
``chat`` installs a SIGINT handler for the duration of the run so Ctrl-C
cancels the stream cooperatively: the partial reply is persisted as
``cancelled`` instead of the process dying mid-write.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import signal
import sys
from contextlib import suppress
from typing import Any, Dict, List, Optional, TextIO

import httpx
from pydantic import ValidationError

from ...base.errors import ConversationBusy, PersistenceError
from ...base.http import close_all_clients
from ...base.models import Conversation, Message, MessageStatus, ProviderFamily
from ...config.defaults import DEFAULT_CONVERSATION_TITLE
from ...config.settings import AppSettings, ConfigError, load_settings, settings_path
from ...persistence.sqlite import SqliteConversationStore
from ..session import SessionController

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2
EXIT_CANCELLED = 130

_TITLE_CHARS = 48


def _error(payload: Dict[str, Any], code: int) -> int:
    print(json.dumps(payload), file=sys.stderr)
    return code


def title_for(prompt: str) -> str:
    """Derive a conversation title from the first prompt."""
    line = prompt.strip().splitlines()[0] if prompt.strip() else ""
    if not line:
        return DEFAULT_CONVERSATION_TITLE
    return line if len(line) <= _TITLE_CHARS else line[: _TITLE_CHARS - 1].rstrip() + "…"


def default_family(settings: AppSettings) -> ProviderFamily:
    """Family of the selected key, else OpenAI."""
    selected = settings.selected_key
    return selected.provider if selected is not None else ProviderFamily.OPENAI


def redacted_settings(settings: AppSettings) -> Dict[str, Any]:
    """Settings as a JSON-ready mapping with key material masked."""
    data = settings.model_dump(mode="json")
    for entry in data.get("api_keys", []):
        if entry.get("key"):
            entry["key"] = "***"
    return data


def conversation_row(conversation: Conversation) -> Dict[str, Any]:
    return {
        "id": conversation.id,
        "title": conversation.title,
        "provider": conversation.provider.value,
        "model": conversation.model,
        "updated_at": conversation.updated_at.isoformat(),
    }


def message_row(message: Message) -> Dict[str, Any]:
    return {
        "id": message.id,
        "role": message.role,
        "status": message.status.value,
        "content": message.content,
        "created_at": message.created_at.isoformat(),
    }


# chat ---------------------------------------------------------------------
async def _resolve_conversation(
    store: SqliteConversationStore, args: argparse.Namespace, settings: AppSettings, prompt: str
) -> Conversation:
    if args.conversation:
        conversation = await store.get_conversation(args.conversation)
        if conversation is None:
            raise PersistenceError("get_conversation", f"unknown conversation {args.conversation}")
        return conversation
    return await store.create_conversation(
        args.title or title_for(prompt),
        args.provider or default_family(settings),
        model=args.model,
        base_url=args.base_url,
    )


async def run_chat(
    args: argparse.Namespace,
    *,
    client: Optional[httpx.AsyncClient] = None,
    out: Optional[TextIO] = None,
) -> int:
    """Send ``args.prompt`` and stream the reply to ``out``.

    Parameters
    ----------
    args: argparse.Namespace
        Parsed ``chat`` arguments.
    client: Optional[httpx.AsyncClient]
        HTTP client override (tests pass one with a mock transport).
    out: Optional[TextIO]
        Destination for the streamed reply; defaults to ``sys.stdout``.

    Returns
    -------
    int
        Process exit code.
    """
    out = out or sys.stdout
    prompt = " ".join(args.prompt)
    try:
        settings = load_settings(args.config)
    except ConfigError as exc:
        return _error({"error": "config", "message": str(exc)}, EXIT_USAGE)

    conversation: Optional[Conversation] = None
    store = SqliteConversationStore(args.db)
    try:
        controller = SessionController(store, settings.provider_config_for, client=client)
        try:
            conversation = await _resolve_conversation(store, args, settings, prompt)
            handle = await controller.send(conversation.id, prompt)
        except (PersistenceError, ConversationBusy, ValueError) as exc:
            # pydantic.ValidationError is a ValueError: no key or model resolved
            if isinstance(exc, ValidationError):
                return _error(
                    {
                        "error": "config",
                        "provider": conversation.provider.value if conversation else None,
                        "message": str(exc),
                    },
                    EXIT_USAGE,
                )
            return _error({"error": type(exc).__name__, "message": str(exc)}, EXIT_USAGE)

        loop = asyncio.get_running_loop()
        installed = False
        with suppress(NotImplementedError, RuntimeError):
            loop.add_signal_handler(signal.SIGINT, handle.cancel)
            installed = True
        try:
            async for update in handle.updates():
                if update.delta:
                    out.write(update.delta)
                    out.flush()
            result = await handle.wait()
        finally:
            if installed:
                loop.remove_signal_handler(signal.SIGINT)
            await controller.aclose()
        out.write("\n")
        out.flush()
    finally:
        store.close()
        if client is None:
            await close_all_clients()

    if result.status is MessageStatus.COMPLETE:
        return EXIT_OK
    if result.status is MessageStatus.CANCELLED:
        print(json.dumps({"status": "cancelled", "conversation": conversation.id}), file=sys.stderr)
        return EXIT_CANCELLED
    info = result.error.to_dict() if result.error is not None else {}
    return _error({"status": "failed", "conversation": conversation.id, **info}, EXIT_FAILED)


def handle_chat(args: argparse.Namespace, *, client: Optional[httpx.AsyncClient] = None) -> int:
    return asyncio.run(run_chat(args, client=client))


# history / show -------------------------------------------------------------
async def _list_conversations(db: Optional[str], limit: int) -> List[Conversation]:
    with SqliteConversationStore(db) as store:
        return await store.list_conversations(limit)


async def _list_messages(db: Optional[str], conversation_id: str) -> Optional[List[Message]]:
    with SqliteConversationStore(db) as store:
        if await store.get_conversation(conversation_id) is None:
            return None
        return await store.list_messages(conversation_id)


def handle_history(args: argparse.Namespace) -> int:
    """Print the most recently updated conversations."""
    try:
        conversations = asyncio.run(_list_conversations(args.db, args.limit))
    except PersistenceError as exc:
        return _error({"error": "persistence", "message": exc.message}, EXIT_FAILED)
    if args.json:
        print(json.dumps([conversation_row(c) for c in conversations], indent=2))
        return EXIT_OK
    for c in conversations:
        model = c.model or "-"
        print(f"{c.id}  {c.updated_at:%Y-%m-%d %H:%M}  {c.provider.value}/{model}  {c.title}")
    return EXIT_OK


def handle_show(args: argparse.Namespace) -> int:
    """Print one conversation's transcript in insertion order."""
    try:
        messages = asyncio.run(_list_messages(args.db, args.conversation_id))
    except PersistenceError as exc:
        return _error({"error": "persistence", "message": exc.message}, EXIT_FAILED)
    if messages is None:
        return _error({"error": "not_found", "conversation": args.conversation_id}, EXIT_USAGE)
    if args.json:
        print(json.dumps([message_row(m) for m in messages], indent=2))
        return EXIT_OK
    for m in messages:
        marker = "" if m.status is MessageStatus.COMPLETE else f" [{m.status.value}]"
        print(f"{m.role}{marker}: {m.content}")
    return EXIT_OK


# config ---------------------------------------------------------------------
def handle_config(args: argparse.Namespace) -> int:
    """``path`` prints the settings location; ``init`` creates it; ``show`` dumps it."""
    path = settings_path(args.config)
    if args.action == "path":
        print(path)
        return EXIT_OK
    try:
        settings = load_settings(path)
    except ConfigError as exc:
        return _error({"error": "config", "message": str(exc)}, EXIT_USAGE)
    if args.action == "init":
        print(path)
    else:
        print(json.dumps(redacted_settings(settings), indent=2))
    return EXIT_OK


__all__ = [
    "EXIT_CANCELLED",
    "EXIT_FAILED",
    "EXIT_OK",
    "EXIT_USAGE",
    "handle_chat",
    "handle_config",
    "handle_history",
    "handle_show",
    "redacted_settings",
    "run_chat",
    "title_for",
]
