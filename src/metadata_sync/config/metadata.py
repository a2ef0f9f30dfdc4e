"""Metadata API connection settings."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, positive_float_env_var, rate_limit_env_var, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig

DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_DB_NAME = "default"


@dataclass(frozen=True, slots=True)
class MetadataConfig:
    """Holds the endpoint, credentials and defaults for one metadata source.

    ``ratelimit`` comes from ``HASURA_METADATA_RATE_LIMIT``. Response hooks,
    default headers and a custom retry policy are set in code by passing a
    full ``resilience`` config, which then replaces ``timeout_seconds`` and
    ``ratelimit``.
    """

    url: str
    admin_secret: str
    db_name: str = DEFAULT_DB_NAME
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    ratelimit: RateLimit | None = None
    resilience: ResilienceConfig | None = None

    def resilience_config(self) -> ResilienceConfig:
        if self.resilience is not None:
            return self.resilience
        return ResilienceConfig(
            name="hasura-metadata",
            timeout_seconds=self.timeout_seconds,
            ratelimit=self.ratelimit,
        )


def get_metadata_config(
    *,
    db_name: str | None = None,
    timeout_seconds: float | None = None,
) -> MetadataConfig:
    values = require_env_vars(("HASURA_METADATA_URL", "HASURA_ADMIN_SECRET"))
    env_timeout = positive_float_env_var("HASURA_METADATA_TIMEOUT")
    return MetadataConfig(
        url=values["HASURA_METADATA_URL"],
        admin_secret=values["HASURA_ADMIN_SECRET"],
        db_name=db_name or optional_env_var("HASURA_DB_NAME") or DEFAULT_DB_NAME,
        timeout_seconds=timeout_seconds or env_timeout or DEFAULT_TIMEOUT_SECONDS,
        ratelimit=rate_limit_env_var("HASURA_METADATA_RATE_LIMIT"),
    )
