"""JSON-RPC ``eth_call`` client reading token data from the token contract."""

from __future__ import annotations

import asyncio
import itertools
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from tokensmith.adapters.http_resilience import (
    ClientFactory,
    build_limiter,
    default_client_factory,
)
from tokensmith.config.chain import ChainConfig, get_chain_config
from tokensmith.domain.model import RawRecord
from tokensmith.domain.ports.sourcing import EntitySource, EntitySourceError

from .abi import decode_words, encode_call, word_to_address
from .schema import JsonRpcResponse

if TYPE_CHECKING:
    from aiolimiter import AsyncLimiter

    from tokensmith.domain.model import TokenId

log = getLogger(__name__)

# (owner, genotype[0], genotype[1], can_breed_after, generation, father, mother, cooldown_index)
RECORD_WORDS = 8


class ChainRpcError(EntitySourceError):
    """Raised when the node answers with a JSON-RPC error object."""

    def __init__(self, message: str, *, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


def parse_record(token_id: TokenId, words: list[int]) -> RawRecord:
    if len(words) < RECORD_WORDS:
        raise ValueError(f"Expected {RECORD_WORDS} words for token {token_id}, got {len(words)}")
    owner, gene_high, gene_low, can_breed_after, generation, father, mother, cooldown = words[
        :RECORD_WORDS
    ]
    return RawRecord(
        token_id=token_id,
        owner=word_to_address(owner),
        genotype=(gene_high, gene_low),
        can_breed_after=can_breed_after,
        generation=generation,
        father=father,
        mother=mother,
        cooldown_index=cooldown,
    )


@dataclass(slots=True)
class ChainEntitySource:
    config: ChainConfig = field(default_factory=get_chain_config)
    client_factory: ClientFactory = field(default=default_client_factory)
    _request_ids: itertools.count[int] = field(
        default_factory=lambda: itertools.count(1), init=False, repr=False
    )
    # One limiter for every call this source makes; each call opens a fresh client.
    _limiter: AsyncLimiter | None = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._limiter = build_limiter(self.config.resilience)

    def count(self) -> int:
        words = self._call(self.config.count_selector)
        return words[0]

    def fetch(self, token_id: TokenId) -> RawRecord:
        words = self._call(encode_call(self.config.record_selector, token_id))
        try:
            return parse_record(token_id, words)
        except ValueError as exc:
            raise EntitySourceError(str(exc)) from exc

    def _call(self, data: str) -> list[int]:
        try:
            result = asyncio.run(self._eth_call(data))
            return decode_words(result)
        except httpx.HTTPError as exc:
            raise EntitySourceError(f"eth_call to {self.config.rpc_url} failed: {exc}") from exc
        except ValueError as exc:
            raise EntitySourceError(f"Malformed eth_call response: {exc}") from exc

    async def _eth_call(self, data: str) -> str:
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._request_ids),
            "method": "eth_call",
            "params": [{"to": self.config.contract_address, "data": data}, "latest"],
        }
        async with self.client_factory(self.config.resilience, limiter=self._limiter) as client:
            response = await client.post(self.config.rpc_url, json=payload)
        response.raise_for_status()

        rpc_response = JsonRpcResponse.model_validate(response.json())
        if rpc_response.error is not None:
            log.error(f"JSON-RPC error {rpc_response.error.code}: {rpc_response.error.message}")
            raise ChainRpcError(rpc_response.error.message, code=rpc_response.error.code)
        if rpc_response.result is None:
            raise ValueError("JSON-RPC response has no result")
        return rpc_response.result


if TYPE_CHECKING:
    _source_check: EntitySource = ChainEntitySource()
