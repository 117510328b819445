"""Shared logging helpers for tokensmith."""

from __future__ import annotations

import logging


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once.

    The worker is long-running, so unlike a one-shot CLI the timestamps carry the
    date as well. Pass ``force=True`` to reconfigure from tests or alternative
    entry points.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=force,
    )
    # Per-request logs from the HTTP stack drown out sweep progress.
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
