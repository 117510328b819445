from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from tests.support.tokens import FakeClock, FakeEntitySource, RecordingArtifactBuilder
from tokensmith.domain.model import BuildStatus, Token, TokenId, TraitSet

if TYPE_CHECKING:
    from collections.abc import Callable

    import pytest

    from tokensmith.domain.reconciliation import Reconciler


def test_first_sweep_registers_and_builds_every_token_in_order(
    reconciler: Reconciler,
    source: FakeEntitySource,
    builder: RecordingArtifactBuilder,
    clock: FakeClock,
) -> None:
    result = reconciler.sweep()

    assert result.count == 4
    assert result.registered == 3
    assert result.built == 3
    assert result.errors == 0
    assert source.fetched == [1, 2, 3]
    assert builder.created == [(1, True), (2, True), (3, True)]
    assert reconciler.snapshot() == {
        token_id: BuildStatus(updates_left=10, last_update_time=clock.now, success=True)
        for token_id in (1, 2, 3)
    }


def test_token_zero_is_never_tracked(reconciler: Reconciler, source: FakeEntitySource) -> None:
    source.total = 1

    result = reconciler.sweep()

    assert result.count == 1
    assert reconciler.snapshot() == {}
    assert source.fetched == []


def test_new_token_is_registered_before_its_build_is_attempted(
    reconciler: Reconciler,
    builder: RecordingArtifactBuilder,
) -> None:
    builder.failing_ids = {2}

    reconciler.sweep()

    assert reconciler.status(2) == BuildStatus(updates_left=10, last_update_time=0, success=False)


def test_back_to_back_sweeps_are_idempotent(
    reconciler: Reconciler,
    builder: RecordingArtifactBuilder,
) -> None:
    reconciler.sweep()
    after_first = reconciler.snapshot()

    second = reconciler.sweep()

    assert reconciler.snapshot() == after_first
    assert second.built == 0
    assert len(builder.created) == 3


def test_startup_tokens_are_never_rebuilt_once_built(
    reconciler: Reconciler,
    builder: RecordingArtifactBuilder,
    clock: FakeClock,
) -> None:
    assert reconciler.register_existing(4) == 3
    assert reconciler.status(1) == BuildStatus(updates_left=0)

    reconciler.sweep()
    built_at = clock.now
    clock.advance(10_000)
    result = reconciler.sweep()

    assert result.forced_rebuilds == 0
    assert builder.built_ids == [1, 2, 3]
    assert reconciler.status(3) == BuildStatus(
        updates_left=0, last_update_time=built_at, success=True
    )


def test_register_existing_keeps_known_entries(
    reconciler: Reconciler,
    source: FakeEntitySource,
) -> None:
    source.total = 2
    reconciler.sweep()
    before = reconciler.status(1)

    registered = reconciler.register_existing(4)

    assert registered == 2
    assert reconciler.status(1) == before
    assert reconciler.status(3) == BuildStatus(updates_left=0)


def test_builder_failure_is_isolated_to_its_token(
    reconciler: Reconciler,
    source: FakeEntitySource,
    builder: RecordingArtifactBuilder,
) -> None:
    builder.failing_ids = {2}

    result = reconciler.sweep()

    assert result.errors == 1
    assert result.built == 2
    assert builder.built_ids == [1, 3]
    status = reconciler.status(2)
    assert status is not None
    assert status.success is False
    assert source.fetched == [1, 2, 3]


def test_failing_token_is_retried_on_every_sweep(
    reconciler: Reconciler,
    source: FakeEntitySource,
    builder: RecordingArtifactBuilder,
) -> None:
    builder.failing_ids = {2}

    for _ in range(3):
        reconciler.sweep()

    assert source.fetched.count(2) == 3
    assert reconciler.status(2) == BuildStatus(updates_left=10, last_update_time=0, success=False)

    builder.failing_ids = set()
    reconciler.sweep()

    status = reconciler.status(2)
    assert status is not None
    assert status.success is True
    assert status.updates_left == 10


def test_fetch_failure_leaves_status_untouched(
    reconciler: Reconciler,
    source: FakeEntitySource,
    builder: RecordingArtifactBuilder,
) -> None:
    source.failing_ids = {1}

    result = reconciler.sweep()

    assert result.errors == 1
    assert builder.built_ids == [2, 3]
    assert reconciler.status(1) == BuildStatus(updates_left=10, last_update_time=0, success=False)


def test_count_failure_aborts_sweep_without_mutation(
    reconciler: Reconciler,
    source: FakeEntitySource,
    builder: RecordingArtifactBuilder,
) -> None:
    reconciler.register_existing(3)
    before = reconciler.snapshot()
    source.count_error = True

    result = reconciler.sweep()

    assert result.aborted
    assert reconciler.snapshot() == before
    assert builder.created == []
    assert source.fetched == []


def test_backfill_rebuilds_after_delay_within_budget(
    make_reconciler: Callable[..., Reconciler],
    source: FakeEntitySource,
    builder: RecordingArtifactBuilder,
    clock: FakeClock,
) -> None:
    source.total = 2
    reconciler = make_reconciler(rebuild_budget=3)
    t0 = clock.now
    reconciler.sweep()
    assert reconciler.status(1) == BuildStatus(updates_left=3, last_update_time=t0, success=True)

    builder.failing_ids = {1}
    clock.now = t0 + 61
    result = reconciler.sweep()

    assert result.forced_rebuilds == 1
    assert reconciler.status(1) == BuildStatus(updates_left=2, last_update_time=t0, success=False)

    builder.failing_ids = set()
    clock.now = t0 + 65
    reconciler.sweep()

    assert reconciler.status(1) == BuildStatus(
        updates_left=2, last_update_time=t0 + 65, success=True
    )


def test_forced_rebuild_waits_for_full_delay(
    reconciler: Reconciler,
    source: FakeEntitySource,
    builder: RecordingArtifactBuilder,
    clock: FakeClock,
) -> None:
    source.total = 2
    reconciler.sweep()

    clock.advance(59)
    assert reconciler.sweep().forced_rebuilds == 0

    clock.advance(1)
    result = reconciler.sweep()

    assert result.forced_rebuilds == 1
    assert result.built == 1
    assert builder.built_ids == [1, 1]
    assert reconciler.status(1) == BuildStatus(
        updates_left=9, last_update_time=clock.now, success=True
    )


def test_rebuild_budget_runs_out(
    make_reconciler: Callable[..., Reconciler],
    source: FakeEntitySource,
    builder: RecordingArtifactBuilder,
    clock: FakeClock,
) -> None:
    source.total = 2
    reconciler = make_reconciler(rebuild_budget=2)

    for _ in range(5):
        reconciler.sweep()
        clock.advance(60)

    assert builder.built_ids == [1, 1, 1]
    status = reconciler.status(1)
    assert status is not None
    assert status.updates_left == 0
    assert status.success is True


def test_growing_count_extends_tracked_range_and_never_shrinks(
    reconciler: Reconciler,
    source: FakeEntitySource,
) -> None:
    source.total = 2
    reconciler.sweep()

    source.total = 5
    result = reconciler.sweep()

    assert result.registered == 3
    assert reconciler.status(4) is not None

    source.total = 2
    reconciler.sweep()

    assert sorted(reconciler.snapshot()) == [1, 2, 3, 4]


def test_error_threshold_only_warns(
    reconciler: Reconciler,
    source: FakeEntitySource,
    builder: RecordingArtifactBuilder,
    caplog: pytest.LogCaptureFixture,
) -> None:
    source.total = 10
    builder.failing_ids = set(range(1, 10))

    with caplog.at_level(logging.WARNING, logger="tokensmith.domain.reconciliation"):
        result = reconciler.sweep()

    assert result.errors == 9
    assert source.fetched == list(range(1, 10))
    assert "Too many errors" in caplog.text


def test_concurrent_sweeps_do_not_overlap(
    make_reconciler: Callable[..., Reconciler],
    source: FakeEntitySource,
) -> None:
    entered = threading.Event()
    release = threading.Event()
    active = 0
    overlapped = False

    class _BlockingBuilder:
        def create(
            self,
            token_id: TokenId,
            token: Token,
            traits: TraitSet,
            *,
            overwrite: bool,
        ) -> None:
            nonlocal active, overlapped
            active += 1
            overlapped = overlapped or active > 1
            entered.set()
            release.wait(timeout=5)
            active -= 1

    source.total = 2
    reconciler = make_reconciler(builder=_BlockingBuilder())

    first = threading.Thread(target=reconciler.sweep)
    first.start()
    assert entered.wait(timeout=5)

    second = threading.Thread(target=reconciler.sweep)
    second.start()
    second.join(timeout=0.2)

    assert second.is_alive()
    assert source.count_calls == 1

    release.set()
    first.join(timeout=5)
    second.join(timeout=5)

    assert not overlapped
    assert source.count_calls == 2
