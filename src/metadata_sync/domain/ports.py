"""Ports the reconciliation engine depends on."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .model import TableSnapshot


@runtime_checkable
class MetadataTransport(Protocol):
    """Sends one JSON request to the metadata API and returns the raw success body.

    Implementations raise ``MetadataConflictError`` for idempotent markers and
    another ``MetadataError`` subclass for every hard failure.
    """

    async def post(self, payload: Mapping[str, object]) -> bytes: ...


@runtime_checkable
class SnapshotFetcher(Protocol):
    """Reads the tables the API currently tracks for one source."""

    async def __call__(self, transport: MetadataTransport) -> TableSnapshot: ...


__all__ = ["MetadataTransport", "SnapshotFetcher"]
