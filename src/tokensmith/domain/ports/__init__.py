"""Domain port definitions for adapters."""

from __future__ import annotations

from .artifacts import ArtifactBuilder, ArtifactBuildError
from .decoding import RecordDecoder
from .sourcing import EntitySource, EntitySourceError

__all__ = [
    "ArtifactBuildError",
    "ArtifactBuilder",
    "EntitySource",
    "EntitySourceError",
    "RecordDecoder",
]
