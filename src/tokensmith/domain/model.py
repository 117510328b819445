"""Domain types for tokens, their decoded traits and artifact build state."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

TokenId: TypeAlias = int


@dataclass(frozen=True, slots=True)
class RawRecord:
    """Token record exactly as read from the upstream contract."""

    token_id: TokenId
    owner: str
    genotype: tuple[int, int]
    can_breed_after: int = 0
    generation: int = 0
    father: int = 0
    mother: int = 0
    cooldown_index: int = 0


@dataclass(frozen=True, slots=True)
class Token:
    token_id: TokenId
    owner: str
    generation: int
    father: TokenId | None
    mother: TokenId | None
    genotype: tuple[int, int]

    @property
    def is_founder(self) -> bool:
        return self.father is None and self.mother is None


@dataclass(frozen=True, slots=True)
class TraitSet:
    """Decoded visual traits, keyed by slot name in decoding order."""

    values: Mapping[str, int] = field(default_factory=dict[str, int])

    def __getitem__(self, name: str) -> int:
        return self.values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)


@dataclass(frozen=True, slots=True)
class BuildStatus:
    """Artifact build state for one token.

    ``updates_left`` is the remaining number of forced rebuilds after a successful
    build. ``last_update_time`` is the epoch second of the last successful build,
    or ``0`` if the token was never built.
    """

    updates_left: int = 0
    last_update_time: int = 0
    success: bool = False

    def __post_init__(self) -> None:
        if self.updates_left < 0:
            raise ValueError("updates_left must be non-negative")

    def due_for_rebuild(self, now: int, *, rebuild_after_seconds: int) -> bool:
        return (
            self.success
            and self.updates_left > 0
            and now - self.last_update_time >= rebuild_after_seconds
        )

    def marked_for_rebuild(self) -> BuildStatus:
        return replace(self, success=False, updates_left=self.updates_left - 1)

    def built_at(self, now: int) -> BuildStatus:
        return replace(self, success=True, last_update_time=now)
