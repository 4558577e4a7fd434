"""Test fixtures for the Version Engine.

The handler is exercised against AsyncMock collaborators specced on the real
ConfigRepository and resolver, so every test can assert exactly which lookups
were made and how often.

Records model the Faker source connector at 1.0.2 in a single workspace.
"""

from __future__ import annotations

import uuid
from unittest.mock import AsyncMock

import pytest
from conduit_config_access.repository import ConfigRepository
from conduit_shared.feature_flags import MockFeatureFlagClient
from conduit_shared.version_models import (
    Actor,
    ActorDefinitionVersion,
    ActorType,
    BreakingChange,
    ConnectorDefinition,
    SupportState,
)
from conduit_version_engine.handler import ActorDefinitionVersionHandler
from conduit_version_engine.resolver import ActorDefinitionVersionResolver

SOURCE_DEFINITION_ID = uuid.UUID("dfd88b22-b603-4c3d-aad7-3701784586b1")
DESTINATION_DEFINITION_ID = uuid.UUID("25c5221d-dce2-4163-ade9-739ef790f503")
WORKSPACE_ID = uuid.UUID("5ae6b09b-fdec-41af-aaf7-7d94cfc33ef6")
VERSION_ID = uuid.UUID("8f1ba4c4-4ac6-4ab7-8e7b-5b1b4dc0f9d2")


@pytest.fixture
def source_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def destination_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def faker_version() -> ActorDefinitionVersion:
    return ActorDefinitionVersion(
        version_id=VERSION_ID,
        actor_definition_id=SOURCE_DEFINITION_ID,
        docker_repository="airbyte/source-faker",
        docker_image_tag="1.0.2",
        support_state=SupportState.SUPPORTED,
    )


@pytest.fixture
def source_definition() -> ConnectorDefinition:
    return ConnectorDefinition(definition_id=SOURCE_DEFINITION_ID, actor_type=ActorType.SOURCE, name="Faker")


@pytest.fixture
def destination_definition() -> ConnectorDefinition:
    return ConnectorDefinition(
        definition_id=DESTINATION_DEFINITION_ID, actor_type=ActorType.DESTINATION, name="Postgres"
    )


@pytest.fixture
def source_factory(source_id):
    def make(default_version_id: uuid.UUID | None = VERSION_ID) -> Actor:
        return Actor(
            actor_id=source_id,
            workspace_id=WORKSPACE_ID,
            actor_definition_id=SOURCE_DEFINITION_ID,
            actor_type=ActorType.SOURCE,
            default_version_id=default_version_id,
        )

    return make


@pytest.fixture
def destination_factory(destination_id):
    def make(default_version_id: uuid.UUID | None = VERSION_ID) -> Actor:
        return Actor(
            actor_id=destination_id,
            workspace_id=WORKSPACE_ID,
            actor_definition_id=DESTINATION_DEFINITION_ID,
            actor_type=ActorType.DESTINATION,
            default_version_id=default_version_id,
        )

    return make


@pytest.fixture
def breaking_change_factory():
    def make(version: str, deadline: str, message: str) -> BreakingChange:
        return BreakingChange(
            actor_definition_id=SOURCE_DEFINITION_ID,
            version=version,
            migration_documentation_url=f"https://docs.airbyte.io/{version.split('.')[0]}",
            upgrade_deadline=deadline,
            message=message,
        )

    return make


@pytest.fixture
def config_store() -> AsyncMock:
    store = AsyncMock(spec=ConfigRepository)
    store.list_breaking_changes_for_actor_definition_version.return_value = []
    return store


@pytest.fixture
def version_resolver(faker_version) -> AsyncMock:
    resolver = AsyncMock(spec=ActorDefinitionVersionResolver)
    resolver.get_source_version.return_value = faker_version
    resolver.get_destination_version.return_value = faker_version
    return resolver


@pytest.fixture
def handler(config_store, version_resolver) -> ActorDefinitionVersionHandler:
    return ActorDefinitionVersionHandler(config_store, version_resolver)


@pytest.fixture
def flags_factory():
    return MockFeatureFlagClient
