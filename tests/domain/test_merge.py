from __future__ import annotations

import pytest

from metadata_sync.domain.merge import (
    fk_constraint_columns,
    merge_array_relationships,
    merge_configuration,
    merge_custom_root_fields,
    merge_object_relationships,
)
from metadata_sync.domain.model import (
    ArrayRelationship,
    Configuration,
    CustomRootFields,
    ObjectRelationship,
)


def _object(name: str, column: str) -> ObjectRelationship:
    return ObjectRelationship.model_validate(
        {"name": name, "using": {"foreign_key_constraint_on": column}}
    )


def _array(name: str, remote: str) -> ArrayRelationship:
    return ArrayRelationship.model_validate(
        {
            "name": name,
            "using": {
                "foreign_key_constraint_on": {
                    "table": {"schema": "public", "name": remote},
                    "columns": ["parent_id"],
                }
            },
        }
    )


def test_merge_configuration_desired_wins_and_extras_survive() -> None:
    existing = Configuration.model_validate({"custom_name": "old", "comment": "x"})
    desired = Configuration(custom_name="new")

    merged = merge_configuration(existing, desired)

    assert merged.custom_name == "new"
    assert merged.additional_properties == {"comment": "x"}
    assert merged.to_payload() == {
        "custom_name": "new",
        "custom_root_fields": {},
        "comment": "x",
    }


def test_merge_configuration_replaces_every_known_field() -> None:
    existing = Configuration.model_validate(
        {
            "custom_name": "old_name",
            "custom_root_fields": {"select": "old_select", "select_stream": "old_stream"},
            "custom_column_names": {"old_col": "oc"},
            "column_config": {"id": {"comment": "pk"}},
            "comment": "old comment",
        }
    )
    desired = Configuration(
        custom_name="new_name",
        custom_root_fields=CustomRootFields(select="new_select", select_by_pk="new_sbp"),
        custom_column_names={"new_col": "nc"},
    )

    merged = merge_configuration(existing, desired)

    assert merged.to_payload() == {
        "custom_name": "new_name",
        "custom_root_fields": {
            "select": "new_select",
            "select_by_pk": "new_sbp",
            "select_stream": "old_stream",
        },
        "custom_column_names": {"new_col": "nc"},
        "column_config": {"id": {"comment": "pk"}},
        "comment": "old comment",
    }


def test_merge_configuration_without_existing_extras() -> None:
    existing = Configuration(
        custom_name="old_name",
        custom_root_fields=CustomRootFields(select="old_select"),
        custom_column_names={"old_col": "oc"},
    )
    desired = Configuration(
        custom_name="new_name",
        custom_root_fields=CustomRootFields(select="new_select"),
        custom_column_names={"new_col": "nc"},
    )

    merged = merge_configuration(existing, desired)

    assert not merged.additional_properties
    assert not merged.custom_root_fields.additional_properties
    assert merged.custom_name == "new_name"
    assert merged.to_payload() == desired.to_payload()


def test_merge_configuration_does_not_mutate_inputs() -> None:
    existing = Configuration.model_validate(
        {"custom_name": "old", "custom_root_fields": {"stream": "st"}, "comment": "x"}
    )
    desired = Configuration(custom_name="new")
    desired_before = desired.to_payload()
    existing_before = existing.to_payload()

    merge_configuration(existing, desired)

    assert desired.to_payload() == desired_before
    assert existing.to_payload() == existing_before


def test_merge_custom_root_fields() -> None:
    existing = CustomRootFields.model_validate(
        {"select": "old_select", "select_by_pk": "old_sbp", "select_stream": "old_stream"}
    )
    desired = CustomRootFields(
        select="new_select",
        select_by_pk="new_sbp",
        select_aggregate="new_agg",
        insert="new_insert",
        insert_one="new_insert_one",
        update="new_update",
        update_by_pk="new_update_by_pk",
        delete="new_delete",
        delete_by_pk="new_delete_by_pk",
    )

    merged = merge_custom_root_fields(existing, desired)

    assert merged.known_fields() == desired.known_fields()
    assert merged.additional_properties == {"select_stream": "old_stream"}


def test_merge_object_relationships_unions_by_name() -> None:
    existing = [_object("A", "old_a_id"), _object("B", "b_id")]
    desired = [_object("A", "a_id"), _object("C", "c_id")]

    merged = merge_object_relationships(existing, desired)

    assert [rel.name for rel in merged] == ["A", "C", "B"]
    assert merged[0] is desired[0]
    assert merged[2] is existing[1]


def test_merge_object_relationships_without_existing() -> None:
    desired = [_object("A", "a_id")]

    assert merge_object_relationships([], desired) == desired


def test_merge_array_relationships_unions_by_name() -> None:
    existing = [_array("A", "old"), _array("B", "b")]
    desired = [_array("A", "a"), _array("C", "c")]

    merged = merge_array_relationships(existing, desired)

    assert [rel.name for rel in merged] == ["A", "C", "B"]
    constraint = merged[0].using.foreign_key_constraint_on
    assert constraint is not None
    assert constraint.table.name == "a"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("col", ["col"]),
        (["a", "b"], ["a", "b"]),
        (("a", "b"), ["a", "b"]),
        (["a", 42, "b"], ["a", "b"]),
        ([], []),
        (None, []),
        (42, []),
        ({"column": "a"}, []),
    ],
)
def test_fk_constraint_columns(value: object, expected: list[str]) -> None:
    assert fk_constraint_columns(value) == expected
