"""Application configuration helpers."""

from __future__ import annotations

from .env import (
    optional_env_var,
    positive_float_env_var,
    rate_limit_env_var,
    require_env_vars,
)
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .metadata import (
    DEFAULT_DB_NAME,
    DEFAULT_TIMEOUT_SECONDS,
    MetadataConfig,
    get_metadata_config,
)

__all__ = [
    "DEFAULT_DB_NAME",
    "DEFAULT_TIMEOUT_SECONDS",
    "ConfigurationError",
    "MetadataConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "configure_logging",
    "get_metadata_config",
    "optional_env_var",
    "positive_float_env_var",
    "rate_limit_env_var",
    "require_env_vars",
]
