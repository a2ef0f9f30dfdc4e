"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Mapping
from logging import getLogger
from typing import TYPE_CHECKING, Any, cast

from pydantic import TypeAdapter, ValidationError

from metadata_sync.adapters.hasura import HasuraMetadataClient, MetadataSnapshotFetcher
from metadata_sync.config import ConfigurationError, get_metadata_config
from metadata_sync.domain import DeclaredTable, MetadataReconciler

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from metadata_sync.adapters.hasura import ClientFactory
    from metadata_sync.config import MetadataConfig
    from metadata_sync.domain import ConvergeResult, TableSnapshot

log = getLogger(__name__)

_DECLARED_TABLES = TypeAdapter(list[DeclaredTable])


def load_declared_tables(path: Path, *, default_source: str) -> list[DeclaredTable]:
    """Read a JSON list of declared tables; entries without ``source`` get ``default_source``."""

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Cannot read declared tables from {path}: {exc}") from exc
    if not isinstance(raw, list):
        raise ConfigurationError(f"Declared tables in {path} must be a JSON list")

    entries: list[Any] = []
    for entry in cast(list[Any], raw):
        if isinstance(entry, Mapping):
            entries.append({"source": default_source, **cast(Mapping[str, Any], entry)})
        else:
            entries.append(entry)

    try:
        return _DECLARED_TABLES.validate_python(entries)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid declared tables in {path}: {exc}") from exc


def apply_metadata(
    tables: Sequence[DeclaredTable],
    *,
    config: MetadataConfig | None = None,
    client_factory: ClientFactory | None = None,
) -> ConvergeResult:
    """Track ``tables`` and converge their customizations and relationships."""

    effective_config = config or get_metadata_config()
    log.info(
        "Applying metadata: url=%s, db_name=%s, tables=%s",
        effective_config.url,
        effective_config.db_name,
        len(tables),
    )
    return asyncio.run(_apply_metadata_async(tables, effective_config, client_factory))


async def _apply_metadata_async(
    tables: Sequence[DeclaredTable],
    config: MetadataConfig,
    client_factory: ClientFactory | None,
) -> ConvergeResult:
    async with HasuraMetadataClient(config=config, client_factory=client_factory) as client:
        reconciler = MetadataReconciler(
            transport=client,
            fetch_snapshot=MetadataSnapshotFetcher(source=config.db_name),
        )
        return await reconciler.converge(tables)


def fetch_table_snapshot(
    *,
    config: MetadataConfig | None = None,
    client_factory: ClientFactory | None = None,
) -> TableSnapshot:
    """Return what the metadata API currently tracks for the configured source."""

    effective_config = config or get_metadata_config()
    return asyncio.run(_fetch_table_snapshot_async(effective_config, client_factory))


async def _fetch_table_snapshot_async(
    config: MetadataConfig,
    client_factory: ClientFactory | None,
) -> TableSnapshot:
    async with HasuraMetadataClient(config=config, client_factory=client_factory) as client:
        return await MetadataSnapshotFetcher(source=config.db_name)(client)
