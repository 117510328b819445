"""Minimal ABI helpers for static ``eth_call`` arguments and results."""

from __future__ import annotations

from typing import Final

WORD_HEX_CHARS: Final[int] = 64
UINT256_MAX: Final[int] = (1 << 256) - 1
ADDRESS_BITS: Final[int] = 160


def encode_uint256(value: int) -> str:
    if not 0 <= value <= UINT256_MAX:
        raise ValueError(f"Value out of uint256 range: {value}")
    return f"{value:064x}"


def encode_call(selector: str, *args: int) -> str:
    return selector + "".join(encode_uint256(arg) for arg in args)


def decode_words(result: str) -> list[int]:
    """Split a ``0x``-prefixed return blob into 32-byte words."""

    if not result.startswith("0x"):
        raise ValueError("Call result is not 0x-prefixed")
    body = result[2:]
    if not body or len(body) % WORD_HEX_CHARS:
        raise ValueError(f"Call result has {len(body)} hex chars, not whole words")
    try:
        return [
            int(body[start : start + WORD_HEX_CHARS], 16)
            for start in range(0, len(body), WORD_HEX_CHARS)
        ]
    except ValueError as exc:
        raise ValueError("Call result is not valid hex") from exc


def word_to_address(word: int) -> str:
    return f"0x{word & ((1 << ADDRESS_BITS) - 1):040x}"
