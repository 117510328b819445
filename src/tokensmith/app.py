"""Application wiring for the artifact worker."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from tokensmith.adapters.artifacts import (
    HttpArtifactStore,
    LocalArtifactStore,
    SvgArtifactBuilder,
)
from tokensmith.adapters.chain import ChainEntitySource
from tokensmith.config import get_chain_config, get_storage_config, get_worker_config
from tokensmith.domain.reconciliation import Reconciler
from tokensmith.supervisor import Supervisor

if TYPE_CHECKING:
    from tokensmith.adapters.artifacts import ArtifactStore
    from tokensmith.config import StorageConfig, WorkerConfig
    from tokensmith.domain.ports import ArtifactBuilder, EntitySource


log = getLogger(__name__)


def build_artifact_store(storage: StorageConfig) -> ArtifactStore:
    if storage.upload_resilience is not None:
        log.info(f"Uploading artifacts to {storage.upload_url}")
        return HttpArtifactStore(storage.upload_resilience)
    artifact_dir = storage.ensure_artifact_dir()
    log.info(f"Writing artifacts to {artifact_dir}")
    return LocalArtifactStore(artifact_dir)


def build_supervisor(
    *,
    worker_config: WorkerConfig | None = None,
    source: EntitySource | None = None,
    builder: ArtifactBuilder | None = None,
    handle_signals: bool = True,
) -> Supervisor:
    """Construct the supervisor and its collaborators from the environment."""

    config = worker_config or get_worker_config()
    effective_source = source or ChainEntitySource(get_chain_config())
    effective_builder = builder or SvgArtifactBuilder(build_artifact_store(get_storage_config()))

    reconciler = Reconciler(
        source=effective_source,
        builder=effective_builder,
        rebuild_budget=config.rebuild_budget,
        rebuild_after_seconds=config.rebuild_after_seconds,
        error_warning_threshold=config.error_warning_threshold,
    )
    log.info(
        "Configured worker: interval=%ss, shutdown_timeout=%ss, startup_delay=%ss",
        config.sweep_interval_seconds,
        config.shutdown_timeout_seconds,
        config.startup_delay_seconds,
    )
    return Supervisor(
        source=effective_source,
        reconciler=reconciler,
        config=config,
        handle_signals=handle_signals,
    )


def run_worker(*, worker_config: WorkerConfig | None = None) -> None:
    """Run the worker in the foreground until interrupted."""

    build_supervisor(worker_config=worker_config).start()
