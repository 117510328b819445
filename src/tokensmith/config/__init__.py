"""Application configuration helpers."""

from __future__ import annotations

from .chain import TOTAL_SUPPLY_SELECTOR, ChainConfig, get_chain_config
from .env import optional_seconds, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .storage import StorageConfig, get_storage_config
from .worker import WorkerConfig, get_worker_config

__all__ = [
    "TOTAL_SUPPLY_SELECTOR",
    "ChainConfig",
    "ConfigurationError",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "WorkerConfig",
    "get_chain_config",
    "get_storage_config",
    "get_worker_config",
    "optional_seconds",
    "require_env_vars",
]
