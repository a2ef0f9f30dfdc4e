"""Declared and existing table metadata.

``Configuration`` and ``CustomRootFields`` are open JSON objects: fields we know
about are typed, everything else the API sends lands in the pydantic extra bag
and is written back verbatim.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Self, cast

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    field_validator,
    model_serializer,
    model_validator,
)

type JSONObject = dict[str, Any]


class MetadataBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TableIdentity(MetadataBaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    schema_name: str = Field(alias="schema")
    name: str

    def __str__(self) -> str:
        return f"{self.schema_name}.{self.name}"

    def to_payload(self) -> JSONObject:
        return self.model_dump(mode="json", by_alias=True)


class OpenMetadataModel(BaseModel):
    """Typed known fields plus an ordered bag of unknown ones."""

    model_config = ConfigDict(extra="allow")

    @property
    def additional_properties(self) -> JSONObject:
        return dict(self.model_extra or {})

    def known_fields(self) -> JSONObject:
        return {name: getattr(self, name) for name in type(self).model_fields}

    def with_additional_properties(self, extra: Mapping[str, Any]) -> Self:
        """Return a copy holding this model's known fields and exactly ``extra``."""

        return type(self).model_construct(
            _fields_set=set(self.model_fields_set),
            **self.known_fields(),
            **extra,
        )

    def to_payload(self) -> JSONObject:
        return self.model_dump(mode="json", by_alias=True)

    @model_serializer(mode="wrap")
    def _drop_unset_nulls(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        # Known fields that were never set stay off the wire; explicit nulls survive.
        data = cast(JSONObject, handler(self))
        for name in type(self).model_fields:
            if name in data and data[name] is None and name not in self.model_fields_set:
                del data[name]
        return data


class CustomRootFields(OpenMetadataModel):
    select: str | None = None
    select_by_pk: str | None = None
    select_aggregate: str | None = None
    insert: str | None = None
    insert_one: str | None = None
    update: str | None = None
    update_by_pk: str | None = None
    delete: str | None = None
    delete_by_pk: str | None = None


class Configuration(OpenMetadataModel):
    custom_name: str | None = None
    custom_root_fields: CustomRootFields = Field(default_factory=CustomRootFields)
    custom_column_names: dict[str, str] | None = None


class ObjectRelationshipUsing(MetadataBaseModel):
    # Either a column name or a list of column names; see fk_constraint_columns.
    foreign_key_constraint_on: Any = None


class ObjectRelationship(MetadataBaseModel):
    name: str
    using: ObjectRelationshipUsing = Field(default_factory=ObjectRelationshipUsing)


class ForeignKeyConstraintOn(MetadataBaseModel):
    table: TableIdentity
    columns: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _normalize_single_column(cls, value: object) -> object:
        if isinstance(value, Mapping):
            mapping_value = cast(Mapping[str, object], value)
            if "column" in mapping_value and "columns" not in mapping_value:
                data: dict[str, object] = dict(mapping_value)
                column = data.pop("column")
                data["columns"] = [column] if isinstance(column, str) else column
                return data
        return value

    def to_payload(self) -> JSONObject:
        return {"table": self.table.to_payload(), "columns": list(self.columns)}


class ArrayRelationshipUsing(MetadataBaseModel):
    # Absent for relationships defined by manual configuration.
    foreign_key_constraint_on: ForeignKeyConstraintOn | None = None


class ArrayRelationship(MetadataBaseModel):
    name: str
    using: ArrayRelationshipUsing = Field(default_factory=ArrayRelationshipUsing)


class DeclaredTable(MetadataBaseModel):
    """One table the caller wants tracked, with its customization and relationships."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    table: TableIdentity
    source: str
    is_enum: bool = False
    configuration: Configuration = Field(default_factory=Configuration)
    object_relationships: tuple[ObjectRelationship, ...] = ()
    array_relationships: tuple[ArrayRelationship, ...] = ()

    @field_validator("configuration")
    @classmethod
    def _reject_unknown_configuration(cls, value: Configuration) -> Configuration:
        # Declared configurations hold known keys only; extras come from the live table.
        root_fields = value.custom_root_fields.additional_properties
        unknown = [
            *value.additional_properties,
            *(f"custom_root_fields.{key}" for key in root_fields),
        ]
        if unknown:
            raise ValueError(f"unknown configuration keys: {', '.join(unknown)}")
        return value


class ExistingTableSnapshot(MetadataBaseModel):
    """What the API currently holds for one tracked table.

    ``configuration`` is kept raw so a malformed value only affects the merge
    for that table, not the whole snapshot.
    """

    configuration: Any = None
    object_relationships: tuple[ObjectRelationship, ...] = ()
    array_relationships: tuple[ArrayRelationship, ...] = ()


EMPTY_SNAPSHOT = ExistingTableSnapshot()

type TableSnapshot = dict[TableIdentity, ExistingTableSnapshot]
