"""Table metadata model, merge rules and the convergence engine."""

from __future__ import annotations

from .errors import (
    ALREADY_EXISTS,
    ALREADY_TRACKED,
    ConvergenceError,
    MetadataAPIError,
    MetadataConflictError,
    MetadataError,
    MetadataResponseError,
    MetadataTransportError,
)
from .merge import (
    fk_constraint_columns,
    merge_array_relationships,
    merge_configuration,
    merge_custom_root_fields,
    merge_object_relationships,
)
from .model import (
    ArrayRelationship,
    ArrayRelationshipUsing,
    Configuration,
    CustomRootFields,
    DeclaredTable,
    ExistingTableSnapshot,
    ForeignKeyConstraintOn,
    ObjectRelationship,
    ObjectRelationshipUsing,
    TableIdentity,
    TableSnapshot,
)
from .reconciliation import ConvergeResult, MetadataReconciler

__all__ = [
    "ALREADY_EXISTS",
    "ALREADY_TRACKED",
    "ArrayRelationship",
    "ArrayRelationshipUsing",
    "Configuration",
    "ConvergeResult",
    "ConvergenceError",
    "CustomRootFields",
    "DeclaredTable",
    "ExistingTableSnapshot",
    "ForeignKeyConstraintOn",
    "MetadataAPIError",
    "MetadataConflictError",
    "MetadataError",
    "MetadataReconciler",
    "MetadataResponseError",
    "MetadataTransportError",
    "ObjectRelationship",
    "ObjectRelationshipUsing",
    "TableIdentity",
    "TableSnapshot",
    "fk_constraint_columns",
    "merge_array_relationships",
    "merge_configuration",
    "merge_custom_root_fields",
    "merge_object_relationships",
]
