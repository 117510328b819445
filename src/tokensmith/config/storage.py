"""Artifact storage configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .http_resilience import ResilienceConfig

APP_DIR_NAME: Final[str] = "tokensmith"
ARTIFACT_DIR_NAME: Final[str] = "artifacts"
UPLOAD_TIMEOUT_SECONDS: Final[float] = 30.0


@dataclass(frozen=True, slots=True)
class StorageConfig:
    artifact_dir: Path
    upload_url: str | None = None
    upload_resilience: ResilienceConfig | None = None

    def ensure_artifact_dir(self) -> Path:
        artifact_dir = self.artifact_dir.expanduser().resolve()
        artifact_dir.mkdir(parents=True, exist_ok=True)
        return artifact_dir


def _default_data_dir() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME")
        base_path = Path(base) if base else (Path.home() / ".local" / "share")
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def get_storage_config() -> StorageConfig:
    env_dir = os.getenv("TOKENSMITH_ARTIFACT_DIR")
    artifact_dir = Path(env_dir) if env_dir else _default_data_dir() / ARTIFACT_DIR_NAME
    upload_url = (os.getenv("TOKENSMITH_UPLOAD_URL") or "").strip() or None
    resilience = (
        ResilienceConfig(
            name="artifact-upload",
            base_url=upload_url,
            timeout_seconds=UPLOAD_TIMEOUT_SECONDS,
        )
        if upload_url
        else None
    )
    return StorageConfig(
        artifact_dir=artifact_dir,
        upload_url=upload_url,
        upload_resilience=resilience,
    )
