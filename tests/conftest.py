from __future__ import annotations

import pytest

from metadata_sync.config.metadata import MetadataConfig
from metadata_sync.domain.model import DeclaredTable
from tests.support.gateway import FakeGateway, buckets_and_files


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def storage_tables() -> list[DeclaredTable]:
    return buckets_and_files()


@pytest.fixture
def metadata_config() -> MetadataConfig:
    return MetadataConfig(
        url="http://hasura.local/v1/metadata",
        admin_secret="s3cret",  # noqa: S106
    )
