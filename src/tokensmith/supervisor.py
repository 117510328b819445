"""Worker lifecycle: startup registration, periodic sweeps and graceful shutdown."""

from __future__ import annotations

import signal
import threading
import time
from logging import getLogger
from typing import TYPE_CHECKING

from tokensmith.config.worker import WorkerConfig
from tokensmith.domain.ports.sourcing import EntitySourceError

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import FrameType

    from tokensmith.domain.ports.sourcing import EntitySource
    from tokensmith.domain.reconciliation import Reconciler

log = getLogger(__name__)

INTERRUPT_POLL_SECONDS = 0.5


class StartupError(RuntimeError):
    """Raised when the worker cannot establish its initial state."""


class PeriodicTask:
    """Call ``action`` every ``interval`` seconds on a background thread.

    The stop token is only checked between runs; an ``action`` already in progress
    always runs to completion.
    """

    def __init__(
        self,
        action: Callable[[], object],
        *,
        interval: float,
        name: str = "periodic-task",
    ) -> None:
        self._action = action
        self._interval = interval
        self._stop = threading.Event()
        # Daemon so an action still running after the shutdown deadline cannot keep
        # the process alive.
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    @property
    def running(self) -> bool:
        return self._thread.is_alive()

    def start(self) -> None:
        self._thread.start()

    def stop(self, *, timeout: float) -> bool:
        """Request a stop and wait up to ``timeout`` seconds; return ``True`` if it stopped."""

        self._stop.set()
        if self._thread.ident is not None:
            self._thread.join(timeout)
        return not self._thread.is_alive()

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            try:
                self._action()
            except Exception:
                log.exception("Periodic task failed, retrying on the next tick")
        log.info("Stopping periodic task %s", self._thread.name)


class Supervisor:
    def __init__(
        self,
        *,
        source: EntitySource,
        reconciler: Reconciler,
        config: WorkerConfig | None = None,
        sleep: Callable[[float], None] = time.sleep,
        handle_signals: bool = True,
    ) -> None:
        self._source = source
        self._reconciler = reconciler
        self._config = config or WorkerConfig()
        self._sleep = sleep
        self._handle_signals = handle_signals
        self._interrupted = threading.Event()
        self._task: PeriodicTask | None = None

    def start(self) -> None:
        """Run the worker until interrupted, then shut down within the configured deadline.

        Raises :class:`StartupError` if the initial token count cannot be read. The
        SIGINT handler is in place from the start, so an interrupt during the settle
        delay skips the sweeps instead of raising ``KeyboardInterrupt``.
        """

        previous_handler = self._install_signal_handler()
        try:
            self.initialize()
            if self._interrupted.is_set():
                log.info("Interrupted during startup, not starting sweeps")
            else:
                self._run_until_interrupted()
        finally:
            if previous_handler is not None:
                signal.signal(signal.SIGINT, previous_handler)

        self.shutdown()

    def _run_until_interrupted(self) -> None:
        self._task = PeriodicTask(
            self._reconciler.sweep,
            interval=self._config.sweep_interval_seconds,
            name="artifact-sweeper",
        )
        self._task.start()
        log.info("Started worker")

        while not self._interrupted.wait(INTERRUPT_POLL_SECONDS):
            pass

    def initialize(self) -> int:
        """Register every existing token id and return the observed count."""

        # Give the upstream connection a moment before the first call.
        self._sleep(self._config.startup_delay_seconds)
        try:
            count = self._source.count()
        except EntitySourceError as exc:
            raise StartupError("Could not get token count for initialization") from exc

        registered = self._reconciler.register_existing(count)
        log.info("Tracking %d existing tokens (count=%d)", registered, count)
        return count

    def request_shutdown(self) -> None:
        self._interrupted.set()

    def shutdown(self) -> bool:
        """Stop the periodic task, waiting at most the shutdown timeout.

        Returns ``True`` if the task acknowledged the stop before the deadline.
        """

        if self._task is None:
            return True
        timeout = self._config.shutdown_timeout_seconds
        stopped = self._task.stop(timeout=timeout)
        if not stopped:
            log.warning(
                "Sweep still running after %.0fs, shutting down without waiting", timeout
            )
        log.info("Shutting down")
        return stopped

    def _install_signal_handler(self) -> signal.Handlers | Callable[..., object] | int | None:
        if not self._handle_signals:
            return None
        return signal.signal(signal.SIGINT, self._on_interrupt)

    def _on_interrupt(self, _signal_received: int, _frame: FrameType | None) -> None:
        log.info("Interrupt received")
        self._interrupted.set()
