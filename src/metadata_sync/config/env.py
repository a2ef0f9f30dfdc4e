"""Environment variable loaders for configuration."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit

if TYPE_CHECKING:
    from collections.abc import Sequence


def optional_env_var(name: str) -> str | None:
    """Return a stripped environment variable, treating blank values as unset."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def require_env_vars(names: Sequence[str]) -> dict[str, str]:
    """Return the given environment variables or raise naming every missing one."""

    values = {name: optional_env_var(name) for name in names}
    missing = [name for name, value in values.items() if value is None]
    if missing:
        raise MissingConfigurationError(missing)
    return {name: value for name, value in values.items() if value is not None}


def positive_float_env_var(name: str) -> float | None:
    raw = optional_env_var(name)
    if raw is None:
        return None
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value


def rate_limit_env_var(name: str) -> RateLimit | None:
    """Parse ``CALLS/SECONDS`` (for example ``10/1``) into a ``RateLimit``."""

    raw = optional_env_var(name)
    if raw is None:
        return None
    calls, _, seconds = raw.partition("/")
    try:
        max_calls, per_seconds = int(calls), float(seconds)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must look like CALLS/SECONDS, got {raw!r}") from exc
    return RateLimit(max_calls=max_calls, per_seconds=per_seconds)
