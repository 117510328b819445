"""Decode raw token records into a :class:`Token` and its visual traits.

The genotype is two 256-bit words. They are joined (first word high) into one
512-bit integer and read as a fixed table of slots. Each slot takes ``width``
bits starting at ``offset`` (counted from the least significant bit) and maps
them onto ``variants`` possible values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .model import RawRecord, Token, TraitSet

GENOTYPE_WORD_BITS: Final[int] = 256


@dataclass(frozen=True, slots=True)
class TraitSlot:
    name: str
    offset: int
    width: int
    variants: int

    def read(self, genome: int) -> int:
        bits = (genome >> self.offset) & ((1 << self.width) - 1)
        return bits % self.variants


TRAIT_SLOTS: Final[tuple[TraitSlot, ...]] = (
    TraitSlot("skin_hue", offset=0, width=16, variants=360),
    TraitSlot("body", offset=16, width=8, variants=4),
    TraitSlot("eyes", offset=24, width=8, variants=6),
    TraitSlot("eye_hue", offset=32, width=16, variants=360),
    TraitSlot("mouth", offset=48, width=8, variants=5),
    TraitSlot("head", offset=56, width=8, variants=7),
    TraitSlot("head_hue", offset=64, width=16, variants=360),
    TraitSlot("shirt", offset=80, width=8, variants=6),
    TraitSlot("shirt_hue", offset=88, width=16, variants=360),
    TraitSlot("background_hue", offset=104, width=16, variants=360),
    TraitSlot("glasses", offset=120, width=8, variants=4),
)


def join_genotype(genotype: tuple[int, int]) -> int:
    high, low = genotype
    mask = (1 << GENOTYPE_WORD_BITS) - 1
    return ((high & mask) << GENOTYPE_WORD_BITS) | (low & mask)


def decode_traits(genotype: tuple[int, int]) -> TraitSet:
    genome = join_genotype(genotype)
    return TraitSet({slot.name: slot.read(genome) for slot in TRAIT_SLOTS})


def decode_record(raw: RawRecord) -> tuple[Token, TraitSet]:
    """Build the domain token and its traits from ``raw``. Never fails on a valid record."""

    token = Token(
        token_id=raw.token_id,
        owner=raw.owner,
        generation=raw.generation,
        # Parent id 0 means "no parent" upstream.
        father=raw.father or None,
        mother=raw.mother or None,
        genotype=raw.genotype,
    )
    return token, decode_traits(raw.genotype)
