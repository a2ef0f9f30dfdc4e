"""Pydantic models for metadata API response envelopes."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from metadata_sync.domain.model import ArrayRelationship, ObjectRelationship, TableIdentity


class HasuraBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ErrorResponse(HasuraBaseModel):
    path: str | None = None
    error: str
    code: str | None = None


class ExportedTable(HasuraBaseModel):
    table: TableIdentity
    configuration: Any = None
    object_relationships: list[ObjectRelationship] = Field(
        default_factory=list["ObjectRelationship"]
    )
    array_relationships: list[ArrayRelationship] = Field(
        default_factory=list["ArrayRelationship"]
    )


class ExportedSource(HasuraBaseModel):
    name: str
    # Table shapes differ between backends; only the selected source is parsed.
    tables: list[Any] = Field(default_factory=list[Any])


class ExportedMetadata(HasuraBaseModel):
    sources: list[ExportedSource] = Field(default_factory=list["ExportedSource"])


class ExportMetadataResponse(HasuraBaseModel):
    metadata: ExportedMetadata
