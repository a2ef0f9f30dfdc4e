"""Metadata API request bodies."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .merge import fk_constraint_columns

if TYPE_CHECKING:
    from .model import (
        ArrayRelationship,
        Configuration,
        DeclaredTable,
        JSONObject,
        ObjectRelationship,
    )

EXPORT_METADATA_VERSION = 2


def export_metadata() -> JSONObject:
    return {"type": "export_metadata", "version": EXPORT_METADATA_VERSION}


def track_table(table: DeclaredTable) -> JSONObject:
    payload: JSONObject = {
        "type": "pg_track_table",
        "args": {
            "source": table.source,
            "table": table.table.to_payload(),
            "configuration": table.configuration.to_payload(),
        },
    }
    if table.is_enum:
        payload["is_enum"] = True
    return payload


def set_table_customization(table: DeclaredTable, configuration: Configuration) -> JSONObject:
    return {
        "type": "pg_set_table_customization",
        "args": {
            "source": table.source,
            "table": table.table.to_payload(),
            "configuration": configuration.to_payload(),
        },
    }


def create_object_relationship(
    table: DeclaredTable,
    relationship: ObjectRelationship,
) -> JSONObject:
    columns = fk_constraint_columns(relationship.using.foreign_key_constraint_on)
    return {
        "type": "pg_create_object_relationship",
        "args": {
            "source": table.source,
            "table": table.table.to_payload(),
            "name": relationship.name,
            "using": {"foreign_key_constraint_on": columns},
        },
    }


def create_array_relationship(
    table: DeclaredTable,
    relationship: ArrayRelationship,
) -> JSONObject:
    constraint = relationship.using.foreign_key_constraint_on
    return {
        "type": "pg_create_array_relationship",
        "args": {
            "source": table.source,
            "table": table.table.to_payload(),
            "name": relationship.name,
            "using": {
                "foreign_key_constraint_on": (
                    constraint.to_payload() if constraint is not None else None
                ),
            },
        },
    }
