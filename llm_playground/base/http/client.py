"""Shared HTTP client pool for provider calls.

Purpose:
    Provide a centralized pool of reusable ``httpx.AsyncClient`` instances so
    concurrent runs share connections instead of allocating a client per
    call. Timeouts derive exclusively from :func:`get_timeout_config`.

External dependencies:
    - ``httpx`` for the underlying asynchronous HTTP client.

Timeout strategy:
    - Connect, write and pool acquisition use the request timeout.
    - Reads use the idle-read timeout. The aggregator additionally enforces
      both bounds itself so a misconfigured injected client cannot stall a
      run.

Lifecycle & cleanup:
    - An ``AsyncClient`` is bound to the event loop that opened its
      connections, so clients are cached per ``(purpose, loop)``.
    - :func:`close_all_clients` closes the clients of the running loop and
      forgets clients whose loop has already closed.
"""

from __future__ import annotations

import asyncio
import threading
from typing import Dict, Optional, Tuple

import httpx

from ..timeouts import TimeoutConfig, get_timeout_config

_CLIENTS: Dict[Tuple[str, int], Tuple[asyncio.AbstractEventLoop, httpx.AsyncClient]] = {}
_LOCK = threading.RLock()


def timeout_for(cfg: Optional[TimeoutConfig] = None) -> httpx.Timeout:
    """Translate a :class:`TimeoutConfig` into an ``httpx.Timeout``."""
    cfg = cfg or get_timeout_config()
    return httpx.Timeout(
        connect=cfg.request_timeout_seconds,
        read=cfg.idle_read_timeout_seconds,
        write=cfg.request_timeout_seconds,
        pool=cfg.request_timeout_seconds,
    )


def get_httpx_client(purpose: str = "stream") -> httpx.AsyncClient:
    """Return a pooled ``httpx.AsyncClient`` for the running loop and purpose.

    Parameters:
        purpose: A short string discriminating separate pools. Keep stable to
            maximize reuse.

    Returns:
        A reusable ``httpx.AsyncClient`` instance.

    Raises:
        RuntimeError: When called outside a running event loop.
    """
    loop = asyncio.get_running_loop()
    key = (purpose, id(loop))
    with _LOCK:
        entry = _CLIENTS.get(key)
        if entry is not None and entry[0] is loop and not entry[1].is_closed:
            return entry[1]
        client = httpx.AsyncClient(timeout=timeout_for())
        _CLIENTS[key] = (loop, client)
        return client


async def close_all_clients() -> None:
    """Close and clear pooled HTTP clients.

    Clients bound to the running loop are closed; clients bound to a loop
    that has already closed are dropped because their transports are gone.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = None
    with _LOCK:
        entries = list(_CLIENTS.items())
        _CLIENTS.clear()
    keep = {}
    for key, (owner, client) in entries:
        if owner is loop:
            await client.aclose()
        elif not owner.is_closed():
            keep[key] = (owner, client)
    with _LOCK:
        _CLIENTS.update(keep)


__all__ = ["get_httpx_client", "close_all_clients", "timeout_for"]
