"""Hasura metadata API adapter."""

from __future__ import annotations

from .client import ADMIN_SECRET_HEADER, ClientFactory, HasuraMetadataClient
from .fetcher import MetadataSnapshotFetcher
from .schema import ErrorResponse, ExportMetadataResponse

__all__ = [
    "ADMIN_SECRET_HEADER",
    "ClientFactory",
    "ErrorResponse",
    "ExportMetadataResponse",
    "HasuraMetadataClient",
    "MetadataSnapshotFetcher",
]
