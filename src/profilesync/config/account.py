"""Remote account service configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import float_env_var, optional_env_var
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_ACCOUNT_BASE_URL = "http://localhost:3000/api"
DEFAULT_ACCOUNT_TIMEOUT_SECONDS = 10.0
PROFILE_FETCH_PATH = "/auth/me"
PROFILE_UPDATE_PATH = "/auth/profile"


@dataclass(frozen=True, slots=True)
class AccountServiceConfig:
    """Where and how to reach the account service."""

    resilience: ResilienceConfig
    token: str | None = None
    fetch_path: str = PROFILE_FETCH_PATH
    update_path: str = PROFILE_UPDATE_PATH

    @property
    def base_url(self) -> str:
        return self.resilience.base_url or DEFAULT_ACCOUNT_BASE_URL

    def url_for(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"


def get_account_config(
    *,
    resilience: ResilienceConfig | None = None,
    cache: CacheConfig | None = None,
) -> AccountServiceConfig:
    base_url = optional_env_var("ACCOUNT_API_BASE_URL") or DEFAULT_ACCOUNT_BASE_URL
    timeout = float_env_var(
        "ACCOUNT_API_TIMEOUT_SECONDS",
        default=DEFAULT_ACCOUNT_TIMEOUT_SECONDS,
    )
    return AccountServiceConfig(
        token=optional_env_var("ACCOUNT_API_TOKEN"),
        resilience=resilience
        or ResilienceConfig(
            name="account",
            base_url=base_url,
            timeout_seconds=timeout,
            retry=RetryPolicy(total=2),
            ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
            cache=cache,
            default_headers={"Accept": "application/json"},
        ),
    )
