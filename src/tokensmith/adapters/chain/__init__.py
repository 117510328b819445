"""Public interface for the JSON-RPC chain adapter."""

from __future__ import annotations

from .abi import decode_words, encode_call, encode_uint256, word_to_address
from .client import ChainEntitySource, ChainRpcError, parse_record
from .schema import JsonRpcError, JsonRpcResponse

__all__ = [
    "ChainEntitySource",
    "ChainRpcError",
    "JsonRpcError",
    "JsonRpcResponse",
    "decode_words",
    "encode_call",
    "encode_uint256",
    "parse_record",
    "word_to_address",
]
