"""``llm-playground`` command-line interface (package entrypoint).

This package wires argument parsing to action handlers kept in small, focused
modules. It performs no provider logic directly.

Public API re-exports:
- ``main``: CLI entrypoint callable
- ``build_parser``: parser factory used by tests
"""

from __future__ import annotations

import sys
from typing import Optional

from ...base.logging import configure_logger
from .cli_actions import handle_chat, handle_config, handle_history, handle_show
from .cli_parser import COMMANDS, build_parser


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entrypoint.

    Parameters
    ----------
    argv: Optional[list[str]]
        Argument vector; when ``None`` uses ``sys.argv[1:]``.

    Returns
    -------
    int
        Process exit code (0 success, non-zero on error).
    """
    p = build_parser()
    # A bare prompt is shorthand for "chat PROMPT".
    argv_list = list(sys.argv[1:] if argv is None else argv)
    if argv_list and not argv_list[0].startswith("-") and argv_list[0] not in COMMANDS:
        argv_list = ["chat"] + argv_list
    args = p.parse_args(argv_list)
    if args.cmd is None:
        p.print_help()
        return 2
    if args.log_level:
        configure_logger(level=args.log_level)

    if args.cmd == "history":
        return handle_history(args)
    if args.cmd == "show":
        return handle_show(args)
    return handle_config(args) if args.cmd == "config" else handle_chat(args)


__all__ = ["main", "build_parser"]
