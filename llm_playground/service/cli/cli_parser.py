"""CLI parser construction for ``llm-playground``.

This module wires subparsers but contains no execution logic. Subcommand
handlers live in ``cli_actions`` to keep files small and testable.
"""

from __future__ import annotations

import argparse

from ...base.models import ProviderFamily

COMMANDS = ("chat", "history", "show", "config")


def _family(value: str) -> ProviderFamily:
    try:
        return ProviderFamily.parse(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from exc
    if n < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return n


def add_storage_flags(parser: argparse.ArgumentParser) -> None:
    """Attach ``--db`` and ``--config`` to a parser.

    Notes
    -----
    - ``--db`` falls back to ``LLM_PLAYGROUND_DB`` and then to
      ``<config dir>/llm-playground/history.db``.
    - ``--config`` falls back to ``<config dir>/llm-playground/config.json``.
    """
    parser.add_argument("--db", default=None, help="History database path")
    parser.add_argument("--config", default=None, help="Settings file path (.json or .yaml)")


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level CLI parser and subcommands.

    Returns
    -------
    argparse.ArgumentParser
        Parser with ``chat``, ``history``, ``show`` and ``config`` subcommands.
        No I/O happens here.
    """
    p = argparse.ArgumentParser(prog="llm-playground", description="Chat with hosted LLM providers")
    p.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ERROR or CRITICAL")
    sub = p.add_subparsers(dest="cmd")

    # chat
    p_chat = sub.add_parser("chat", help="Send a prompt and stream the reply (default)")
    target = p_chat.add_mutually_exclusive_group()
    target.add_argument("--conversation", default=None, help="Continue an existing conversation")
    target.add_argument("--provider", type=_family, default=None, help="Start a new conversation")
    p_chat.add_argument("--model", default=None)
    p_chat.add_argument("--base-url", dest="base_url", default=None)
    p_chat.add_argument("--title", default=None)
    p_chat.add_argument("prompt", nargs="+")
    add_storage_flags(p_chat)

    # history
    p_hist = sub.add_parser("history", help="List recent conversations")
    p_hist.add_argument("--limit", type=_positive_int, default=20)
    p_hist.add_argument("--json", action="store_true")
    add_storage_flags(p_hist)

    # show
    p_show = sub.add_parser("show", help="Print a conversation transcript")
    p_show.add_argument("conversation_id")
    p_show.add_argument("--json", action="store_true")
    add_storage_flags(p_show)

    # config
    p_cfg = sub.add_parser("config", help="Inspect or initialise the settings file")
    p_cfg.add_argument("action", choices=("path", "show", "init"))
    add_storage_flags(p_cfg)

    return p


__all__ = ["COMMANDS", "add_storage_flags", "build_parser"]
