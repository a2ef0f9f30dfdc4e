"""Read the tables the metadata API currently tracks."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import TypeAdapter, ValidationError

from metadata_sync.config.metadata import DEFAULT_DB_NAME
from metadata_sync.domain import commands
from metadata_sync.domain.errors import MetadataResponseError
from metadata_sync.domain.model import ExistingTableSnapshot

from .schema import ExportedTable, ExportMetadataResponse

if TYPE_CHECKING:
    from metadata_sync.domain.model import TableSnapshot
    from metadata_sync.domain.ports import MetadataTransport, SnapshotFetcher

log = getLogger(__name__)

_EXPORTED_TABLES = TypeAdapter(list[ExportedTable])


@dataclass(slots=True, frozen=True)
class MetadataSnapshotFetcher:
    """Export the full metadata and index one source's tables by identity."""

    source: str = DEFAULT_DB_NAME

    async def __call__(self, transport: MetadataTransport) -> TableSnapshot:
        body = await transport.post(commands.export_metadata())
        try:
            response = ExportMetadataResponse.model_validate_json(body)
        except ValidationError as exc:
            raise MetadataResponseError(f"problem parsing metadata response: {exc}") from exc

        snapshot: TableSnapshot = {}
        for source in response.metadata.sources:
            if source.name != self.source:
                continue
            try:
                tables = _EXPORTED_TABLES.validate_python(source.tables)
            except ValidationError as exc:
                raise MetadataResponseError(
                    f"problem parsing tables of source {self.source}: {exc}"
                ) from exc
            for exported in tables:
                snapshot[exported.table] = ExistingTableSnapshot(
                    configuration=exported.configuration,
                    object_relationships=tuple(exported.object_relationships),
                    array_relationships=tuple(exported.array_relationships),
                )

        log.debug("Fetched metadata for %s tables in source %s", len(snapshot), self.source)
        return snapshot


if TYPE_CHECKING:
    _fetcher_check: SnapshotFetcher = MetadataSnapshotFetcher()
