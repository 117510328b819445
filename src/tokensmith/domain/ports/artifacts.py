"""Ports for rendering and persisting token artifacts."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from tokensmith.domain.model import Token, TokenId, TraitSet


class ArtifactBuildError(RuntimeError):
    """Raised when an artifact could not be rendered or stored."""

    def __init__(self, message: str, *, token_id: TokenId | None = None) -> None:
        super().__init__(message)
        self.token_id = token_id


@runtime_checkable
class ArtifactBuilder(Protocol):
    def create(
        self,
        token_id: TokenId,
        token: Token,
        traits: TraitSet,
        *,
        overwrite: bool,
    ) -> None:
        """Render and persist the artifact, raising :class:`ArtifactBuildError` on failure."""
        ...


__all__ = ["ArtifactBuildError", "ArtifactBuilder"]
