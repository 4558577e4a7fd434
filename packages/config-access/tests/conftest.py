"""Test fixtures for Config Access.

The repository runs against a real RedisAdapter over an in-process fakeredis
server (one fresh server per test), so key layout and JSON round trips are
exercised exactly as in local dev.

Fixtures provide a realistic connector catalog: the Faker source definition
with a beta release, and the breaking changes announced for it.
"""

from __future__ import annotations

import uuid

import pytest
from conduit_config_access.client import RedisAdapter
from conduit_config_access.repository import ConfigRepository
from conduit_shared.version_models import (
    Actor,
    ActorDefinitionVersion,
    ActorType,
    BreakingChange,
    ConnectorDefinition,
    ReleaseStage,
    SupportState,
)
from fakeredis import FakeServer
from fakeredis.aioredis import FakeRedis

FAKER_DEFINITION_ID = uuid.UUID("dfd88b22-b603-4c3d-aad7-3701784586b1")
WORKSPACE_ID = uuid.UUID("5ae6b09b-fdec-41af-aaf7-7d94cfc33ef6")


@pytest.fixture
def redis_adapter() -> RedisAdapter:
    return RedisAdapter(FakeRedis(server=FakeServer(), decode_responses=True))


@pytest.fixture
def repository(redis_adapter) -> ConfigRepository:
    return ConfigRepository(redis_adapter)


@pytest.fixture
def faker_version() -> ActorDefinitionVersion:
    return ActorDefinitionVersion(
        version_id=uuid.uuid4(),
        actor_definition_id=FAKER_DEFINITION_ID,
        docker_repository="airbyte/source-faker",
        docker_image_tag="1.0.2",
        documentation_url="https://docs.airbyte.io",
        release_stage=ReleaseStage.BETA,
        support_state=SupportState.SUPPORTED,
    )


@pytest.fixture
def faker_definition(faker_version) -> ConnectorDefinition:
    return ConnectorDefinition(
        definition_id=FAKER_DEFINITION_ID,
        actor_type=ActorType.SOURCE,
        name="Faker",
        default_version_id=faker_version.version_id,
    )


@pytest.fixture
def faker_source(faker_version) -> Actor:
    return Actor(
        actor_id=uuid.uuid4(),
        workspace_id=WORKSPACE_ID,
        actor_definition_id=FAKER_DEFINITION_ID,
        actor_type=ActorType.SOURCE,
        name="Sample Faker",
        default_version_id=faker_version.version_id,
    )


def make_breaking_change(version: str, deadline: str, message: str = "Breaking change") -> BreakingChange:
    return BreakingChange(
        actor_definition_id=FAKER_DEFINITION_ID,
        version=version,
        migration_documentation_url=f"https://docs.airbyte.io/{version}",
        upgrade_deadline=deadline,
        message=message,
    )


@pytest.fixture
def breaking_change_factory():
    return make_breaking_change
