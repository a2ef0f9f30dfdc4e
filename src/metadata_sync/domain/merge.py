"""Merge a desired table configuration into what the API already holds.

Known fields always come from the desired side. Unknown fields (set by other
tools or newer API versions) and relationships we do not declare are carried
over from the existing side, so a convergence run never drops them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .model import ArrayRelationship, Configuration, CustomRootFields, ObjectRelationship


class _Named(Protocol):
    @property
    def name(self) -> str: ...


def merge_custom_root_fields(
    existing: CustomRootFields,
    desired: CustomRootFields,
) -> CustomRootFields:
    return desired.with_additional_properties(existing.additional_properties)


def merge_configuration(existing: Configuration, desired: Configuration) -> Configuration:
    merged_root_fields = merge_custom_root_fields(
        existing.custom_root_fields,
        desired.custom_root_fields,
    )
    merged = desired.with_additional_properties(existing.additional_properties)
    merged.custom_root_fields = merged_root_fields
    return merged


def _union_by_name[R: _Named](existing: Iterable[R], desired: Sequence[R]) -> list[R]:
    merged = list(desired)
    seen = {relationship.name for relationship in desired}
    merged.extend(relationship for relationship in existing if relationship.name not in seen)
    return merged


def merge_object_relationships(
    existing: Iterable[ObjectRelationship],
    desired: Sequence[ObjectRelationship],
) -> list[ObjectRelationship]:
    return _union_by_name(existing, desired)


def merge_array_relationships(
    existing: Iterable[ArrayRelationship],
    desired: Sequence[ArrayRelationship],
) -> list[ArrayRelationship]:
    return _union_by_name(existing, desired)


def fk_constraint_columns(value: object) -> list[str]:
    """Normalize an object relationship's ``foreign_key_constraint_on`` to column names.

    A single column name becomes a one-element list, non-string list items are
    dropped, and any other shape yields no columns. The API reports the error
    for an empty column list, so malformed declarations never abort a run here.
    """

    match value:
        case str():
            return [value]
        case list() | tuple():
            return [item for item in value if isinstance(item, str)]
        case _:
            return []
