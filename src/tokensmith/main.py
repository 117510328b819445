#!/usr/bin/env python3

# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from tokensmith.app import run_worker
from tokensmith.common.logging import configure_logging
from tokensmith.config import ConfigurationError, get_worker_config
from tokensmith.supervisor import StartupError

if TYPE_CHECKING:
    from collections.abc import Sequence


def _non_negative_seconds(value: str) -> float:
    try:
        seconds = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not a number: {value}") from exc
    if seconds < 0:
        raise argparse.ArgumentTypeError(f"must be non-negative: {value}")
    return seconds


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Keep token artifacts built and up to date",
    )
    parser.add_argument(
        "--interval",
        type=_non_negative_seconds,
        help="Seconds between sweeps (default: TOKENSMITH_SWEEP_INTERVAL or 10)",
    )
    parser.add_argument(
        "--shutdown-timeout",
        type=_non_negative_seconds,
        help="Seconds to wait for a running sweep on shutdown (default: 15)",
    )
    parser.add_argument(
        "--startup-delay",
        type=_non_negative_seconds,
        help="Seconds to wait before the first upstream call (default: 2)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(list(argv))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        config = get_worker_config().with_overrides(
            sweep_interval_seconds=args.interval,
            shutdown_timeout_seconds=args.shutdown_timeout,
            startup_delay_seconds=args.startup_delay,
        )
        run_worker(worker_config=config)
    except (ConfigurationError, StartupError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    sys.exit(0)


def cli() -> None:
    """Console script entry point; reads a local `.env` before starting."""
    load_dotenv()
    main()


if __name__ == "__main__":
    cli()
