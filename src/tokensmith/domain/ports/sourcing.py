"""Ports for reading token data from the upstream source."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from tokensmith.domain.model import RawRecord, TokenId


class EntitySourceError(RuntimeError):
    """Raised when the upstream source cannot answer; callers treat it as transient."""


@runtime_checkable
class EntitySource(Protocol):
    def count(self) -> int:
        """Return the total token count; valid ids are ``1 .. count - 1``."""
        ...

    def fetch(self, token_id: TokenId) -> RawRecord: ...


__all__ = ["EntitySource", "EntitySourceError"]
