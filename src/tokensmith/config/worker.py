"""Timing and budget defaults for the reconciliation worker."""

from __future__ import annotations

from dataclasses import dataclass, replace

from .env import optional_seconds

DEFAULT_SWEEP_INTERVAL_SECONDS = 10.0
DEFAULT_SHUTDOWN_TIMEOUT_SECONDS = 15.0
DEFAULT_STARTUP_DELAY_SECONDS = 2.0
DEFAULT_REBUILD_BUDGET = 10
DEFAULT_REBUILD_AFTER_SECONDS = 60
DEFAULT_ERROR_WARNING_THRESHOLD = 5


@dataclass(frozen=True, slots=True)
class WorkerConfig:
    sweep_interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS
    shutdown_timeout_seconds: float = DEFAULT_SHUTDOWN_TIMEOUT_SECONDS
    startup_delay_seconds: float = DEFAULT_STARTUP_DELAY_SECONDS
    rebuild_budget: int = DEFAULT_REBUILD_BUDGET
    rebuild_after_seconds: int = DEFAULT_REBUILD_AFTER_SECONDS
    error_warning_threshold: int = DEFAULT_ERROR_WARNING_THRESHOLD

    def with_overrides(
        self,
        *,
        sweep_interval_seconds: float | None = None,
        shutdown_timeout_seconds: float | None = None,
        startup_delay_seconds: float | None = None,
    ) -> WorkerConfig:
        """Return a copy with every non-``None`` override applied."""

        changes: dict[str, float] = {}
        if sweep_interval_seconds is not None:
            changes["sweep_interval_seconds"] = sweep_interval_seconds
        if shutdown_timeout_seconds is not None:
            changes["shutdown_timeout_seconds"] = shutdown_timeout_seconds
        if startup_delay_seconds is not None:
            changes["startup_delay_seconds"] = startup_delay_seconds
        return replace(self, **changes)


def get_worker_config() -> WorkerConfig:
    return WorkerConfig(
        sweep_interval_seconds=optional_seconds(
            "TOKENSMITH_SWEEP_INTERVAL", DEFAULT_SWEEP_INTERVAL_SECONDS
        ),
        shutdown_timeout_seconds=optional_seconds(
            "TOKENSMITH_SHUTDOWN_TIMEOUT", DEFAULT_SHUTDOWN_TIMEOUT_SECONDS
        ),
        startup_delay_seconds=optional_seconds(
            "TOKENSMITH_STARTUP_DELAY", DEFAULT_STARTUP_DELAY_SECONDS
        ),
    )
