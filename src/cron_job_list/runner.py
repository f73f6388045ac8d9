#!/usr/bin/env python3
"""Main entry point for cron-job-list."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Sequence

from textual.logging import TextualHandler

from . import __version__
from .config import DEFAULT_PORT, Destination, RunConfig, default_key_path, load_destinations
from .errors import ConfigError
from .executor import Executor
from .output import write_result


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on usage errors."""

    def error(self, message: str) -> None:
        self.print_usage(sys.stderr)
        self.exit(1, f"ERROR: {message}\n")


def _port(value: str) -> int:
    try:
        port = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid port: {value!r}")
    if not 0 < port < 65536:
        raise argparse.ArgumentTypeError(f"port out of range: {port}")
    return port


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1: {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="cron-job-list",
        description=(
            "Print the crontab of every user@host listed in a JSON config file. "
            "Host keys are NOT verified: any host key is accepted."
        ),
    )
    parser.add_argument("config", type=Path, help="Path to JSON configuration file")
    parser.add_argument(
        "-q",
        dest="quiet",
        action="store_true",
        help="Don't show the INFO log",
    )
    parser.add_argument(
        "-i",
        dest="key",
        type=Path,
        help="Private key (default: ~/.ssh/id_rsa)",
    )
    parser.add_argument(
        "-p",
        dest="port",
        type=_port,
        default=DEFAULT_PORT,
        help=f"SSH port for all hosts (default: {DEFAULT_PORT})",
    )
    parser.add_argument(
        "-c",
        "--concurrency",
        type=_positive_int,
        help="Maximum number of simultaneous SSH sessions (default: unlimited)",
    )
    parser.add_argument(
        "--dashboard",
        action="store_true",
        help="Run with the TUI dashboard",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def setup_logging(quiet: bool, dashboard: bool = False) -> None:
    """Send log records to stderr, or to the textual devtools console while
    the dashboard owns the terminal. INFO unless quiet.
    """
    if dashboard:
        handler: logging.Handler = TextualHandler()
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logging.basicConfig(
        level=logging.WARNING if quiet else logging.INFO,
        handlers=[handler],
        force=True,
    )
    logging.getLogger("asyncssh").setLevel(logging.WARNING)


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    config = RunConfig(
        config_path=args.config,
        key_path=args.key.expanduser() if args.key else default_key_path(),
        port=args.port,
        quiet=args.quiet,
        max_concurrency=args.concurrency,
        dashboard=args.dashboard,
    )
    setup_logging(config.quiet, config.dashboard)

    try:
        destinations = load_destinations(config.config_path)
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    if not config.dashboard:
        return _run_headless(config, destinations)

    from .dashboard import Dashboard

    app = Dashboard(config, destinations)
    app.run()
    return 0


def _run_headless(config: RunConfig, destinations: list[Destination]) -> int:
    """Print each result as soon as its destination finishes."""
    executor = Executor(config, destinations, on_result=write_result)
    asyncio.run(executor.run_all())

    # Per-destination failures are reported, not fatal
    return 0


if __name__ == "__main__":
    sys.exit(main())
