#!/usr/bin/env python3

# ruff: noqa: T201

from __future__ import annotations

import argparse
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from accesswatch.api import create_app, run_server
from accesswatch.app import build_application
from accesswatch.common.logging import configure_logging
from accesswatch.config import ConfigurationError, get_app_config

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from accesswatch.config import AppConfig

COMMANDS = ("serve", "reconcile-once")


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Notify chats when tracked identities come and go")
    parser.add_argument(
        "command",
        nargs="?",
        choices=COMMANDS,
        default="serve",
        help="serve the API with the background scheduler, or run a single cycle "
        "(default: %(default)s)",
    )
    parser.add_argument("--host", type=str, help="Override HOST for the API server")
    parser.add_argument("--port", type=int, help="Override PORT for the API server")
    return parser.parse_args(list(argv))


def _serve(config: AppConfig, args: argparse.Namespace) -> None:
    application = build_application(config)
    app = create_app(application, auth_string=config.server.auth_string)
    run_server(
        app,
        host=args.host or config.server.host,
        port=args.port or config.server.port,
        log_level="debug" if config.debug else "info",
    )


def _reconcile_once(config: AppConfig) -> None:
    application = build_application(config)
    result = application.reconcile_once()
    print(
        f"entry_updates={result.entry_updates} exit_updates={result.exit_updates} "
        f"events={len(result.events)} dispatched={result.dispatched}"
    )
    if result.dispatch_error is not None:
        print(f"Dispatch failed: {result.dispatch_error}", file=sys.stderr)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    parsed_args = _parse_args(sys.argv[1:] if argv is None else argv)
    try:
        config = get_app_config()
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)

    configure_logging(level=config.log_level)

    try:
        if parsed_args.command == "reconcile-once":
            _reconcile_once(config)
        else:
            _serve(config, parsed_args)
    except Exception as e:  # noqa: BLE001
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    print("\nClosed by user (Ctrl+C)")
    sys.exit(0)


def cli() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    cli()
