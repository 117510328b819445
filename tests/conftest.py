from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tests.support.http import make_client_factory
from tests.support.tokens import FakeClock, FakeEntitySource, RecordingArtifactBuilder
from tokensmith.domain.reconciliation import Reconciler

if TYPE_CHECKING:
    from collections.abc import Callable

    from tests.support.http import ClientFactory, Handler


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "CHAIN_RPC_URL",
        "TOKEN_CONTRACT_ADDRESS",
        "TOKEN_RECORD_SELECTOR",
        "TOKEN_COUNT_SELECTOR",
        "TOKENSMITH_ARTIFACT_DIR",
        "TOKENSMITH_UPLOAD_URL",
        "TOKENSMITH_SWEEP_INTERVAL",
        "TOKENSMITH_SHUTDOWN_TIMEOUT",
        "TOKENSMITH_STARTUP_DELAY",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def source() -> FakeEntitySource:
    return FakeEntitySource(total=4)


@pytest.fixture
def builder() -> RecordingArtifactBuilder:
    return RecordingArtifactBuilder()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_reconciler(
    source: FakeEntitySource,
    builder: RecordingArtifactBuilder,
    clock: FakeClock,
) -> Callable[..., Reconciler]:
    def factory(**overrides: object) -> Reconciler:
        kwargs: dict[str, object] = {"source": source, "builder": builder, "clock": clock}
        kwargs.update(overrides)
        return Reconciler(**kwargs)  # type: ignore[arg-type]

    return factory


@pytest.fixture
def reconciler(make_reconciler: Callable[..., Reconciler]) -> Reconciler:
    return make_reconciler()


@pytest.fixture
def client_factory() -> Callable[[Handler], ClientFactory]:
    return make_client_factory
