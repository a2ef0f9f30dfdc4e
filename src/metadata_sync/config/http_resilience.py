"""Retry, rate limit and hook settings for the metadata HTTP client."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field

import httpx

from .errors import ConfigurationError

type ResponseHook = Callable[[httpx.Response], Awaitable[None] | None]

GATEWAY_STATUS_CODES = frozenset({502, 503, 504})


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """Replays of a metadata command; only gateway errors and failed connections qualify."""

    total: int = 2
    backoff_factor: float = 0.5
    max_backoff_wait: float = 10.0
    respect_retry_after_header: bool = True
    allowed_methods: frozenset[str] = frozenset({"POST"})
    status_forcelist: frozenset[int] = GATEWAY_STATUS_CODES
    retry_on_exceptions: tuple[type[httpx.HTTPError], ...] = (
        httpx.ConnectError,
        httpx.ConnectTimeout,
    )
    backoff_jitter: float = 1.0

    @classmethod
    def disabled(cls) -> RetryPolicy:
        return cls(total=0)


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float

    def __post_init__(self) -> None:
        if self.max_calls <= 0 or self.per_seconds <= 0:
            raise ConfigurationError(
                f"Rate limit needs positive values, got {self.max_calls}/{self.per_seconds}s"
            )


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    timeout_seconds: float
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    response_hooks: tuple[ResponseHook, ...] = ()
    default_headers: Mapping[str, str] = field(default_factory=dict[str, str])
