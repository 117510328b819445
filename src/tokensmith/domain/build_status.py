"""In-memory build status bookkeeping."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from .model import BuildStatus, TokenId


class BuildStatusStore:
    """Mapping from token id to its :class:`BuildStatus`.

    The store does no locking; the reconciler owns it and only touches it while
    holding its sweep guard. Entries are never removed.
    """

    def __init__(self) -> None:
        self._statuses: dict[TokenId, BuildStatus] = {}

    def get(self, token_id: TokenId) -> BuildStatus | None:
        return self._statuses.get(token_id)

    def set(self, token_id: TokenId, status: BuildStatus) -> None:
        self._statuses[token_id] = status

    def ensure(self, token_id: TokenId, default: BuildStatus) -> BuildStatus:
        """Insert ``default`` for ``token_id`` unless an entry exists; return the entry."""

        return self._statuses.setdefault(token_id, default)

    def __contains__(self, token_id: object) -> bool:
        return token_id in self._statuses

    def __len__(self) -> int:
        return len(self._statuses)

    def __iter__(self) -> Iterator[TokenId]:
        return iter(sorted(self._statuses))

    def snapshot(self) -> dict[TokenId, BuildStatus]:
        return dict(self._statuses)
