"""Upstream chain (JSON-RPC) configuration values."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass

from .env import require_env_vars
from .errors import ConfigurationError
from .http_resilience import RateLimit, ResilienceConfig

TOTAL_SUPPLY_SELECTOR = "0x18160ddd"
CHAIN_TIMEOUT_SECONDS = 15.0

_ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")
_SELECTOR_PATTERN = re.compile(r"^0x[0-9a-fA-F]{8}$")


@dataclass(frozen=True)
class ChainConfig:
    """Holds the JSON-RPC endpoint and token contract call layout."""

    rpc_url: str
    contract_address: str
    record_selector: str
    count_selector: str
    resilience: ResilienceConfig

    def __post_init__(self) -> None:
        if not _ADDRESS_PATTERN.match(self.contract_address):
            raise ConfigurationError(f"Invalid contract address: {self.contract_address}")
        for selector in (self.record_selector, self.count_selector):
            if not _SELECTOR_PATTERN.match(selector):
                raise ConfigurationError(f"Invalid function selector: {selector}")


def get_chain_config(*, resilience: ResilienceConfig | None = None) -> ChainConfig:
    values = require_env_vars(("CHAIN_RPC_URL", "TOKEN_CONTRACT_ADDRESS", "TOKEN_RECORD_SELECTOR"))
    rpc_url = values["CHAIN_RPC_URL"]
    return ChainConfig(
        rpc_url=rpc_url,
        contract_address=values["TOKEN_CONTRACT_ADDRESS"],
        record_selector=values["TOKEN_RECORD_SELECTOR"].lower(),
        count_selector=(os.getenv("TOKEN_COUNT_SELECTOR") or TOTAL_SUPPLY_SELECTOR).lower(),
        resilience=resilience
        or ResilienceConfig(
            name="chain",
            base_url=rpc_url,
            timeout_seconds=CHAIN_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        ),
    )
