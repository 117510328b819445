"""Destinations for rendered artifacts."""

from __future__ import annotations

import asyncio
import os
import tempfile
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import httpx

from tokensmith.adapters.http_resilience import (
    ClientFactory,
    build_limiter,
    default_client_factory,
)

if TYPE_CHECKING:
    from pathlib import Path

    from aiolimiter import AsyncLimiter

    from tokensmith.config.http_resilience import ResilienceConfig

log = getLogger(__name__)


@runtime_checkable
class ArtifactStore(Protocol):
    def exists(self, name: str) -> bool: ...

    def put(self, name: str, data: bytes, *, content_type: str) -> None: ...


@dataclass(slots=True)
class LocalArtifactStore:
    """Write artifacts as files below ``root``."""

    root: Path

    def path_for(self, name: str) -> Path:
        return self.root / name

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def put(self, name: str, data: bytes, *, content_type: str) -> None:  # noqa: ARG002
        self.root.mkdir(parents=True, exist_ok=True)
        target = self.path_for(name)
        fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=f".{name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
            os.replace(tmp_name, target)
        except BaseException:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise
        log.debug("Wrote %d bytes to %s", len(data), target)


@dataclass(slots=True)
class HttpArtifactStore:
    """Upload artifacts with ``PUT <base_url>/<name>``."""

    resilience: ResilienceConfig
    client_factory: ClientFactory = field(default=default_client_factory)
    _limiter: AsyncLimiter | None = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._limiter = build_limiter(self.resilience)

    def _url(self, name: str) -> str:
        base_url = (self.resilience.base_url or "").rstrip("/")
        return f"{base_url}/{name}"

    def exists(self, name: str) -> bool:
        return asyncio.run(self._exists(name))

    def put(self, name: str, data: bytes, *, content_type: str) -> None:
        asyncio.run(self._put(name, data, content_type))

    async def _exists(self, name: str) -> bool:
        async with self.client_factory(self.resilience, limiter=self._limiter) as client:
            response = await client.head(self._url(name))
        if response.status_code == httpx.codes.NOT_FOUND:
            return False
        response.raise_for_status()
        return True

    async def _put(self, name: str, data: bytes, content_type: str) -> None:
        async with self.client_factory(self.resilience, limiter=self._limiter) as client:
            response = await client.put(
                self._url(name),
                content=data,
                headers={"Content-Type": content_type},
            )
        response.raise_for_status()
        log.debug("Uploaded %d bytes to %s", len(data), response.request.url)
