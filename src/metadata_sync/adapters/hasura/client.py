"""HTTP transport for the metadata API."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from metadata_sync.adapters.http_resilience import ResilientClient
from metadata_sync.domain.errors import (
    IDEMPOTENT_CODES,
    MetadataAPIError,
    MetadataConflictError,
    MetadataTransportError,
)

from .schema import ErrorResponse

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from types import TracebackType

    from metadata_sync.config.http_resilience import ResilienceConfig
    from metadata_sync.config.metadata import MetadataConfig

log = getLogger(__name__)

ADMIN_SECRET_HEADER = "X-Hasura-Admin-Secret"

type ClientFactory = Callable[[ResilienceConfig], ResilientClient]


class HasuraMetadataClient:
    """Posts metadata commands and classifies the responses.

    Use as an async context manager; one underlying HTTP client serves the
    whole run. Retries, if any, come from the ``ResilientClient`` transport.
    """

    def __init__(
        self,
        *,
        config: MetadataConfig,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or ResilientClient
        self._client: ResilientClient | None = None

    async def __aenter__(self) -> HasuraMetadataClient:
        self._client = self._client_factory(self._config.resilience_config())
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def post(self, payload: Mapping[str, object]) -> bytes:
        if self._client is None:
            raise RuntimeError("HasuraMetadataClient must be used as an async context manager")

        log.debug("Posting metadata command %s", payload.get("type"))
        try:
            response = await self._client.post(
                self._config.url,
                json=payload,
                headers={
                    "Content-Type": "application/json; charset=UTF-8",
                    ADMIN_SECRET_HEADER: self._config.admin_secret,
                },
            )
        except httpx.HTTPError as exc:
            raise MetadataTransportError(f"problem executing request: {exc}") from exc

        if response.is_success:
            return response.content
        raise _classify_failure(response.status_code, response.content)


def _classify_failure(
    status_code: int, body: bytes
) -> MetadataConflictError | MetadataAPIError:
    text = body.decode("utf-8", errors="replace")
    try:
        error = ErrorResponse.model_validate_json(body)
    except ValidationError:
        return MetadataAPIError(status_code, text)

    if error.code is not None and error.code in IDEMPOTENT_CODES:
        return MetadataConflictError(error.error, code=error.code, path=error.path)
    return MetadataAPIError(status_code, text, code=error.code)
