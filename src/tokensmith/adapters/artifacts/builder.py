"""Artifact builder rendering SVG images into an :class:`ArtifactStore`."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from tokensmith.domain.ports.artifacts import ArtifactBuilder, ArtifactBuildError

from .renderer import render_svg

if TYPE_CHECKING:
    from tokensmith.domain.model import Token, TokenId, TraitSet

    from .store import ArtifactStore

log = getLogger(__name__)

SVG_CONTENT_TYPE = "image/svg+xml"


def artifact_name(token_id: TokenId) -> str:
    return f"{token_id}.svg"


@dataclass(slots=True)
class SvgArtifactBuilder:
    store: ArtifactStore

    def create(
        self,
        token_id: TokenId,
        token: Token,
        traits: TraitSet,
        *,
        overwrite: bool,
    ) -> None:
        name = artifact_name(token_id)
        try:
            if not overwrite and self.store.exists(name):
                log.debug("Artifact %s already exists, keeping it", name)
                return
            document = render_svg(token, traits)
            self.store.put(name, document.encode("utf-8"), content_type=SVG_CONTENT_TYPE)
        except (OSError, httpx.HTTPError) as exc:
            raise ArtifactBuildError(f"Could not store {name}: {exc}", token_id=token_id) from exc


if TYPE_CHECKING:
    from pathlib import Path

    from .store import LocalArtifactStore

    _builder_check: ArtifactBuilder = SvgArtifactBuilder(LocalArtifactStore(Path()))
