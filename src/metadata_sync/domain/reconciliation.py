"""Converge the metadata API towards a list of declared tables.

A run has two phases. Phase A tracks every table in declared order, falling
back to a merged customization update when a table is already tracked. Phase B
creates missing relationships only once every table is tracked, so a
relationship may point at a table declared later in the list.

Every request is idempotent from the run's point of view: ``already-tracked``
and ``already-exists`` responses are absorbed, which makes a repeated run safe.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from . import commands
from .errors import (
    ALREADY_EXISTS,
    ALREADY_TRACKED,
    ConvergenceError,
    MetadataConflictError,
    MetadataError,
)
from .merge import merge_array_relationships, merge_configuration, merge_object_relationships
from .model import EMPTY_SNAPSHOT, Configuration

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from .model import DeclaredTable, ExistingTableSnapshot, TableIdentity, TableSnapshot
    from .ports import MetadataTransport, SnapshotFetcher

log = getLogger(__name__)


@dataclass(slots=True)
class ConvergeResult:
    """Summary of one convergence run."""

    baseline_available: bool = True
    tracked: list[TableIdentity] = field(default_factory=list)
    customized: list[TableIdentity] = field(default_factory=list)
    relationships_created: list[tuple[TableIdentity, str]] = field(default_factory=list)
    relationships_existing: list[tuple[TableIdentity, str]] = field(default_factory=list)


@dataclass(slots=True)
class MetadataReconciler:
    transport: MetadataTransport
    fetch_snapshot: SnapshotFetcher

    async def converge(self, tables: Sequence[DeclaredTable]) -> ConvergeResult:
        """Track, customize and relate ``tables``; raise ``ConvergenceError`` on failure."""

        result = ConvergeResult()
        log.info("Converging metadata for %s tables", len(tables))

        snapshot = await self._fetch_baseline(result)

        for table in tables:
            await self._track_table(table, snapshot.get(table.table, EMPTY_SNAPSHOT), result)

        for table in tables:
            await self._create_relationships(
                table, snapshot.get(table.table, EMPTY_SNAPSHOT), result
            )

        log.info(
            f"Finished metadata convergence: tracked={len(result.tracked)}, "
            f"customized={len(result.customized)}, "
            f"relationships_created={len(result.relationships_created)}, "
            f"relationships_existing={len(result.relationships_existing)}"
        )
        return result

    async def _fetch_baseline(self, result: ConvergeResult) -> TableSnapshot:
        try:
            return await self.fetch_snapshot(self.transport)
        except MetadataError as exc:
            log.warning(
                "Failed to fetch existing metadata, will overwrite configurations: %s", exc
            )
            result.baseline_available = False
            return {}

    async def _track_table(
        self,
        table: DeclaredTable,
        existing: ExistingTableSnapshot,
        result: ConvergeResult,
    ) -> None:
        try:
            await self.transport.post(commands.track_table(table))
        except MetadataConflictError as exc:
            if exc.code != ALREADY_TRACKED:
                raise ConvergenceError(table.table, phase="track", cause=exc) from exc
        except MetadataError as exc:
            raise ConvergenceError(table.table, phase="track", cause=exc) from exc
        else:
            log.debug("Tracked table %s", table.table)
            result.tracked.append(table.table)
            return

        configuration = self._customization_for(table, existing.configuration)
        try:
            await self.transport.post(commands.set_table_customization(table, configuration))
        except MetadataError as exc:
            raise ConvergenceError(table.table, phase="customize", cause=exc) from exc
        log.debug("Updated customization for already tracked table %s", table.table)
        result.customized.append(table.table)

    def _customization_for(self, table: DeclaredTable, raw_existing: object) -> Configuration:
        if not raw_existing:
            return table.configuration
        try:
            existing = Configuration.model_validate(raw_existing)
        except ValidationError as exc:
            log.warning(
                "Failed to parse existing configuration for %s, overwriting: %s",
                table.table,
                exc,
            )
            return table.configuration
        return merge_configuration(existing, table.configuration)

    async def _create_relationships(
        self,
        table: DeclaredTable,
        existing: ExistingTableSnapshot,
        result: ConvergeResult,
    ) -> None:
        existing_object_names = {rel.name for rel in existing.object_relationships}
        for relationship in merge_object_relationships(
            existing.object_relationships, table.object_relationships
        ):
            if relationship.name in existing_object_names:
                continue
            await self._post_relationship(
                table,
                relationship.name,
                commands.create_object_relationship(table, relationship),
                result,
            )

        existing_array_names = {rel.name for rel in existing.array_relationships}
        for relationship in merge_array_relationships(
            existing.array_relationships, table.array_relationships
        ):
            if relationship.name in existing_array_names:
                continue
            await self._post_relationship(
                table,
                relationship.name,
                commands.create_array_relationship(table, relationship),
                result,
            )

    async def _post_relationship(
        self,
        table: DeclaredTable,
        name: str,
        payload: Mapping[str, object],
        result: ConvergeResult,
    ) -> None:
        try:
            await self.transport.post(payload)
        except MetadataConflictError as exc:
            if exc.code != ALREADY_EXISTS:
                raise ConvergenceError(
                    table.table, phase="relationship", relationship=name, cause=exc
                ) from exc
            log.debug("Relationship %s on %s already exists", name, table.table)
            result.relationships_existing.append((table.table, name))
        except MetadataError as exc:
            raise ConvergenceError(
                table.table, phase="relationship", relationship=name, cause=exc
            ) from exc
        else:
            log.debug("Created relationship %s on %s", name, table.table)
            result.relationships_created.append((table.table, name))
