"""Artifact reconciliation over every known token.

A sweep reads the current token count, walks ids ``1 .. count - 1`` in order
and (re)builds the artifact of every token whose status is not ``success``.
Tokens that built successfully get a bounded number of forced rebuilds, spaced
at least ``rebuild_after_seconds`` apart, so that upstream data which settles
after the first build still ends up in the artifact.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from tokensmith.config.worker import (
    DEFAULT_ERROR_WARNING_THRESHOLD,
    DEFAULT_REBUILD_AFTER_SECONDS,
    DEFAULT_REBUILD_BUDGET,
)

from .build_status import BuildStatusStore
from .decoding import decode_record
from .model import BuildStatus
from .ports import ArtifactBuildError, EntitySourceError

if TYPE_CHECKING:
    from collections.abc import Callable

    from .model import TokenId
    from .ports import ArtifactBuilder, EntitySource, RecordDecoder

log = getLogger(__name__)

FIRST_TOKEN_ID = 1


def epoch_seconds() -> int:
    return int(time.time())


@dataclass(slots=True)
class SweepResult:
    """Counters for one sweep. ``count`` is ``None`` when the sweep was aborted."""

    count: int | None
    registered: int = 0
    forced_rebuilds: int = 0
    built: int = 0
    errors: int = 0

    @property
    def aborted(self) -> bool:
        return self.count is None


class Reconciler:
    """Owns the build status of every token and runs sweeps over them.

    All access to the status store goes through this class and happens under a
    single lock, so two sweeps (or a sweep and startup registration) never
    interleave.
    """

    def __init__(
        self,
        *,
        source: EntitySource,
        builder: ArtifactBuilder,
        decoder: RecordDecoder = decode_record,
        clock: Callable[[], int] = epoch_seconds,
        rebuild_budget: int = DEFAULT_REBUILD_BUDGET,
        rebuild_after_seconds: int = DEFAULT_REBUILD_AFTER_SECONDS,
        error_warning_threshold: int = DEFAULT_ERROR_WARNING_THRESHOLD,
    ) -> None:
        self._source = source
        self._builder = builder
        self._decoder = decoder
        self._clock = clock
        self._rebuild_budget = rebuild_budget
        self._rebuild_after_seconds = rebuild_after_seconds
        self._error_warning_threshold = error_warning_threshold
        self._store = BuildStatusStore()
        self._lock = threading.Lock()

    def register_existing(self, count: int) -> int:
        """Track ids ``1 .. count - 1`` seen at startup, without a rebuild budget.

        Returns the number of newly tracked ids.
        """

        registered = 0
        with self._lock:
            for token_id in range(FIRST_TOKEN_ID, count):
                if token_id not in self._store:
                    self._store.set(token_id, BuildStatus(updates_left=0))
                    registered += 1
        return registered

    def status(self, token_id: TokenId) -> BuildStatus | None:
        with self._lock:
            return self._store.get(token_id)

    def snapshot(self) -> dict[TokenId, BuildStatus]:
        with self._lock:
            return self._store.snapshot()

    def sweep(self) -> SweepResult:
        """Run one pass over all known tokens.

        Upstream and builder failures are logged and counted, never raised.
        """

        with self._lock:
            return self._sweep()

    def _sweep(self) -> SweepResult:
        log.info("Checking token artifacts")
        try:
            count = self._source.count()
        except EntitySourceError as exc:
            log.warning(f"Could not read token count, skipping sweep: {exc}")
            return SweepResult(count=None)

        log.info("Processing tokens for artifact building, total count: %d", count)
        result = SweepResult(count=count)
        now = self._clock()

        for token_id in range(FIRST_TOKEN_ID, count):
            if result.errors > self._error_warning_threshold:
                # Diagnostic only; the sweep keeps going.
                log.warning(
                    "Too many errors (%d) in this sweep, something is wrong upstream",
                    result.errors,
                )

            if token_id not in self._store:
                result.registered += 1
            status = self._store.ensure(token_id, BuildStatus(updates_left=self._rebuild_budget))

            if status.due_for_rebuild(now, rebuild_after_seconds=self._rebuild_after_seconds):
                status = status.marked_for_rebuild()
                self._store.set(token_id, status)
                result.forced_rebuilds += 1
                log.debug(
                    "Forcing rebuild of token %d, %d rebuilds left",
                    token_id,
                    status.updates_left,
                )

            if status.success:
                continue

            if self._build(token_id):
                self._store.set(token_id, status.built_at(now))
                result.built += 1
            else:
                result.errors += 1

        log.info(
            "Sweep finished: count=%d, registered=%d, forced=%d, built=%d, errors=%d",
            count,
            result.registered,
            result.forced_rebuilds,
            result.built,
            result.errors,
        )
        return result

    def _build(self, token_id: TokenId) -> bool:
        log.info("Building artifact for token %d", token_id)
        try:
            raw = self._source.fetch(token_id)
        except EntitySourceError as exc:
            log.error(f"Could not fetch token {token_id}: {exc}")
            return False

        token, traits = self._decoder(raw)
        log.debug("Retrieved and decoded data for token %d", token_id)

        try:
            self._builder.create(token_id, token, traits, overwrite=True)
        except ArtifactBuildError as exc:
            log.error(f"Could not build artifact for token {token_id}: {exc}")
            return False

        log.info("Built and stored artifact for token %d", token_id)
        return True
