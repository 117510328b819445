"""Public interface for the artifact adapter."""

from __future__ import annotations

from .builder import SVG_CONTENT_TYPE, SvgArtifactBuilder, artifact_name
from .renderer import render_svg
from .store import ArtifactStore, HttpArtifactStore, LocalArtifactStore

__all__ = [
    "SVG_CONTENT_TYPE",
    "ArtifactStore",
    "HttpArtifactStore",
    "LocalArtifactStore",
    "SvgArtifactBuilder",
    "artifact_name",
    "render_svg",
]
