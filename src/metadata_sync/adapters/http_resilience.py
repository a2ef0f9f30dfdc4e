"""``httpx.AsyncClient`` carrying retries, an optional rate limit and response hooks."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, TypedDict

import httpx
from aiolimiter import AsyncLimiter
from httpx_retries import Retry, RetryTransport

from metadata_sync.config.http_resilience import (
    RateLimit,
    ResilienceConfig,
    ResponseHook,
    RetryPolicy,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping
    from types import TracebackType

__all__ = [
    "RateLimit",
    "ResilienceConfig",
    "ResilientClient",
    "RetryPolicy",
    "build_limiter",
    "build_retry",
]

log = getLogger(__name__)


def build_retry(policy: RetryPolicy) -> Retry:
    return Retry(
        total=policy.total,
        backoff_factor=policy.backoff_factor,
        max_backoff_wait=policy.max_backoff_wait,
        respect_retry_after_header=policy.respect_retry_after_header,
        allowed_methods=tuple(policy.allowed_methods),
        status_forcelist=tuple(policy.status_forcelist),
        retry_on_exceptions=policy.retry_on_exceptions,
        backoff_jitter=policy.backoff_jitter,
    )


def build_limiter(ratelimit: RateLimit | None) -> AsyncLimiter | None:
    if ratelimit is None:
        return None
    return AsyncLimiter(ratelimit.max_calls, ratelimit.per_seconds)


class _ClientOptions(TypedDict, total=False):
    timeout: float
    headers: dict[str, str]
    event_hooks: dict[str, list[ResponseHook]]
    transport: httpx.AsyncBaseTransport


class ResilientClient:
    """Sends POST requests through a retrying transport.

    ``transport`` replaces the network layer underneath the retries; tests pass
    an ``httpx.MockTransport`` here.
    """

    def __init__(
        self,
        config: ResilienceConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._limiter = build_limiter(config.ratelimit)

        options: _ClientOptions = {
            "timeout": config.timeout_seconds,
            "transport": RetryTransport(transport=transport, retry=build_retry(config.retry)),
        }
        if config.default_headers:
            options["headers"] = dict(config.default_headers)
        if config.response_hooks:
            options["event_hooks"] = {"response": list(config.response_hooks)}
        self._client = httpx.AsyncClient(**options)
        log.debug(
            "Opened HTTP client %s: timeout=%ss, retries=%s, rate limit=%s",
            config.name,
            config.timeout_seconds,
            config.retry.total,
            config.ratelimit,
        )

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def post(
        self,
        url: str,
        *,
        json: object,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        async def do_post() -> httpx.Response:
            return await self._client.post(url, json=json, headers=headers)

        return await self._send(do_post)

    async def _send(self, func: Callable[[], Awaitable[httpx.Response]]) -> httpx.Response:
        if self._limiter is None:
            return await func()
        async with self._limiter:
            return await func()
