"""Application configuration helpers."""

from __future__ import annotations

from .account import AccountServiceConfig, get_account_config
from .env import float_env_var, optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .storage import StorageConfig, get_storage_config

__all__ = [
    "AccountServiceConfig",
    "CacheConfig",
    "ConfigurationError",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "float_env_var",
    "get_account_config",
    "get_storage_config",
    "optional_env_var",
    "require_env_vars",
]
