from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

import pytest

from metadata_sync.config import MetadataConfig
from metadata_sync.domain import ConvergeResult, ExistingTableSnapshot, TableIdentity
from metadata_sync.domain.errors import ConvergenceError, MetadataTransportError
from metadata_sync.ui import cli

if TYPE_CHECKING:
    from pathlib import Path

    from metadata_sync.domain import DeclaredTable, TableSnapshot


@pytest.fixture(autouse=True)
def metadata_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HASURA_METADATA_URL", "http://hasura.local/v1/metadata")
    monkeypatch.setenv("HASURA_ADMIN_SECRET", "s3cret")
    monkeypatch.delenv("HASURA_DB_NAME", raising=False)
    monkeypatch.delenv("HASURA_METADATA_TIMEOUT", raising=False)
    monkeypatch.delenv("HASURA_METADATA_RATE_LIMIT", raising=False)


@pytest.fixture
def tables_file(tmp_path: Path) -> Path:
    path = tmp_path / "tables.json"
    path.write_text(
        json.dumps(
            [
                {
                    "table": {"schema": "storage", "name": "files"},
                    "configuration": {"custom_name": "files"},
                    "object_relationships": [
                        {"name": "bucket", "using": {"foreign_key_constraint_on": "bucket_id"}}
                    ],
                },
                {
                    "table": {"schema": "auth", "name": "provider_types"},
                    "source": "auth_db",
                    "is_enum": True,
                },
            ]
        ),
        encoding="utf-8",
    )
    return path


def test_apply_passes_tables_and_config(
    monkeypatch: pytest.MonkeyPatch,
    tables_file: Path,
) -> None:
    captured: dict[str, object] = {}

    def fake_apply(tables: list[DeclaredTable], *, config: MetadataConfig) -> ConvergeResult:
        captured["tables"] = tables
        captured["config"] = config
        return ConvergeResult()

    monkeypatch.setattr(cli, "apply_metadata", fake_apply)

    cli.main(["apply", str(tables_file), "--db-name", "main", "--timeout", "4"])

    config = captured["config"]
    assert isinstance(config, MetadataConfig)
    assert config.db_name == "main"
    assert config.timeout_seconds == 4.0
    tables = captured["tables"]
    assert isinstance(tables, list)
    assert [table.source for table in tables] == ["main", "auth_db"]
    assert tables[0].object_relationships[0].name == "bucket"
    assert tables[1].is_enum is True


def test_apply_warns_when_baseline_was_unavailable(
    monkeypatch: pytest.MonkeyPatch,
    tables_file: Path,
    caplog: pytest.LogCaptureFixture,
) -> None:
    def fake_apply(*_: object, **__: object) -> ConvergeResult:
        return ConvergeResult(baseline_available=False)

    monkeypatch.setattr(cli, "apply_metadata", fake_apply)

    with caplog.at_level(logging.WARNING):
        cli.main(["apply", str(tables_file)])

    assert "Existing metadata was unavailable" in caplog.text


def test_apply_rejects_missing_tables_file(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["apply", str(tmp_path / "missing.json")])

    assert excinfo.value.code == 2


def test_apply_rejects_invalid_declarations(tmp_path: Path) -> None:
    path = tmp_path / "tables.json"
    path.write_text(json.dumps([{"table": {"schema": "public"}}]), encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["apply", str(path)])

    assert excinfo.value.code == 2


def test_apply_rejects_non_positive_timeout(tables_file: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["apply", str(tables_file), "--timeout", "0"])

    assert excinfo.value.code == 2


def test_missing_environment_exits_with_validation_code(
    monkeypatch: pytest.MonkeyPatch,
    tables_file: Path,
) -> None:
    monkeypatch.delenv("HASURA_ADMIN_SECRET")

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["apply", str(tables_file)])

    assert excinfo.value.code == 2


def test_convergence_failure_exits_with_run_failure_code(
    monkeypatch: pytest.MonkeyPatch,
    tables_file: Path,
) -> None:
    def fake_apply(*_: object, **__: object) -> ConvergeResult:
        raise ConvergenceError(
            TableIdentity(schema="storage", name="files"),
            phase="track",
            cause=MetadataTransportError("connection refused"),
        )

    monkeypatch.setattr(cli, "apply_metadata", fake_apply)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["apply", str(tables_file)])

    assert excinfo.value.code == 1


def test_snapshot_logs_each_table(
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    captured: dict[str, object] = {}

    def fake_snapshot(*, config: MetadataConfig) -> TableSnapshot:
        captured["config"] = config
        return {
            TableIdentity(schema="storage", name="files"): ExistingTableSnapshot(
                configuration={"custom_name": "files"},
            ),
            TableIdentity(schema="auth", name="users"): ExistingTableSnapshot(),
        }

    monkeypatch.setattr(cli, "fetch_table_snapshot", fake_snapshot)

    with caplog.at_level(logging.INFO):
        cli.main(["snapshot", "--db-name", "analytics"])

    config = captured["config"]
    assert isinstance(config, MetadataConfig)
    assert config.db_name == "analytics"
    lines = [record.getMessage() for record in caplog.records if record.name == cli.__name__]
    assert lines == [
        "auth.users: customized=False, object_relationships=0, array_relationships=0",
        "storage.files: customized=True, object_relationships=0, array_relationships=0",
    ]


def test_missing_subcommand_is_a_usage_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main([])

    assert excinfo.value.code == 2
