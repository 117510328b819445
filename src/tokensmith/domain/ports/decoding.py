"""Port for turning raw upstream records into domain values."""

from __future__ import annotations

from collections.abc import Callable

from tokensmith.domain.model import RawRecord, Token, TraitSet

RecordDecoder = Callable[[RawRecord], tuple[Token, TraitSet]]

__all__ = ["RecordDecoder"]
