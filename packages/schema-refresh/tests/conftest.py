"""Shared test fixtures for Schema Refresh tests.

Provides:
  - An AsyncMock control-plane API specced on ControlPlaneApiClient
  - The in-memory MockFeatureFlagClient
  - A frozen clock
  - Mock HTTP transport for httpx (intercepts all requests)
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from unittest.mock import AsyncMock

import httpx
import pytest
from conduit_schema_refresh.api_client import ControlPlaneApiClient
from conduit_shared.catalog_models import (
    ActorCatalogWithUpdatedAt,
    SourceDiscoverSchemaRead,
    SourceRead,
    WorkspaceRead,
)
from conduit_shared.feature_flags import MockFeatureFlagClient

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)
WORKSPACE_ID = uuid.UUID("5ae6b09b-fdec-41af-aaf7-7d94cfc33ef6")
SOURCE_DEFINITION_ID = uuid.UUID("dfd88b22-b603-4c3d-aad7-3701784586b1")
CATALOG_ID = uuid.UUID("0b2c1f55-6d1c-4a77-9a51-6c3d9ad4e3f1")


class MockTransport(httpx.AsyncBaseTransport):
    """Mock HTTP transport that returns preconfigured responses.

    Each call to handle_async_request pops the next response from the list.
    If the list is exhausted, returns a 500 error.
    """

    def __init__(self, responses: list[httpx.Response] | None = None) -> None:
        self.responses = list(responses or [])
        self.requests: list[httpx.Request] = []

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.responses:
            response = self.responses.pop(0)
            response.stream = httpx.ByteStream(response.content)
            return response
        return httpx.Response(500, json={"error": "No more mock responses"})


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def source_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def connection_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def workspace_id() -> uuid.UUID:
    return WORKSPACE_ID


@pytest.fixture
def source(source_id) -> SourceRead:
    return SourceRead(
        source_id=source_id,
        source_definition_id=SOURCE_DEFINITION_ID,
        workspace_id=WORKSPACE_ID,
        name="Sample Faker",
    )


@pytest.fixture
def api(source) -> AsyncMock:
    mock = AsyncMock(spec=ControlPlaneApiClient)
    mock.get_most_recent_source_actor_catalog.return_value = ActorCatalogWithUpdatedAt(updated_at=None)
    mock.get_source.return_value = source
    mock.discover_schema_for_source.return_value = SourceDiscoverSchemaRead(
        catalog={"streams": [{"name": "users"}]},
        catalog_id=CATALOG_ID,
    )
    mock.get_workspace_by_connection_id.return_value = WorkspaceRead(workspace_id=WORKSPACE_ID)
    mock.apply_schema_change_for_source.return_value = None
    return mock


@pytest.fixture
def flags_factory():
    return MockFeatureFlagClient


@pytest.fixture
def transport_factory():
    return MockTransport
