"""ConfigRepository — typed reads and seeding writes over the Config Access store.

Every read loads one JSON record and validates it into a conduit_shared model.
Failures are reported through the shared error taxonomy:

  - record missing          → ConfigNotFoundError
  - Redis/Upstash raised    → ServiceUnavailableError
  - record fails validation → InvalidRequestError

The repository never retries; callers (and ultimately Temporal) decide.
"""

from __future__ import annotations

import logging
from typing import TypeVar
from uuid import UUID

from conduit_shared.errors import (
    ConfigNotFoundError,
    InvalidRequestError,
    ServiceUnavailableError,
)
from conduit_shared.version_models import (
    Actor,
    ActorDefinitionVersion,
    ActorType,
    BreakingChange,
    ConnectorDefinition,
)
from conduit_shared.versions import Version
from pydantic import BaseModel, ValidationError

from conduit_config_access.client import RedisAdapter
from conduit_config_access.keys import (
    breaking_changes_key,
    destination_definition_key,
    destination_key,
    source_definition_key,
    source_key,
    version_key,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _breaking_change_order(change: BreakingChange) -> tuple[Version, str]:
    # ISO dates sort lexicographically
    return (Version.parse(change.version), change.upgrade_deadline)


class ConfigRepository:
    """Reads and writes connector configuration records."""

    def __init__(self, client: RedisAdapter) -> None:
        self._client = client

    # ========================================================================
    # Internal helpers
    # ========================================================================

    async def _load(self, key: str, model: type[M], config_type: str, config_id: UUID) -> M:
        try:
            raw = await self._client.get(key)
        except Exception as e:
            raise ServiceUnavailableError(f"Config store read failed for {config_type} {config_id}: {e}") from e

        if raw is None:
            raise ConfigNotFoundError(config_type, config_id)

        try:
            return model.model_validate_json(raw)
        except ValidationError as e:
            raise InvalidRequestError(f"Malformed {config_type} record {config_id}: {e}") from e

    async def _store(self, key: str, record: BaseModel) -> None:
        try:
            await self._client.set(key, record.model_dump_json())
        except Exception as e:
            raise ServiceUnavailableError(f"Config store write failed for {key}: {e}") from e

    # ========================================================================
    # Actors
    # ========================================================================

    async def get_source_connection(self, source_id: UUID) -> Actor:
        return await self._load(source_key(source_id), Actor, "source", source_id)

    async def get_destination_connection(self, destination_id: UUID) -> Actor:
        return await self._load(destination_key(destination_id), Actor, "destination", destination_id)

    # ========================================================================
    # Definitions
    # ========================================================================

    async def get_source_definition_from_source(self, source_id: UUID) -> ConnectorDefinition:
        """Resolve a source to the connector definition it was created from."""
        source = await self.get_source_connection(source_id)
        return await self._load(
            source_definition_key(source.actor_definition_id),
            ConnectorDefinition,
            "source definition",
            source.actor_definition_id,
        )

    async def get_destination_definition_from_destination(self, destination_id: UUID) -> ConnectorDefinition:
        """Resolve a destination to the connector definition it was created from."""
        destination = await self.get_destination_connection(destination_id)
        return await self._load(
            destination_definition_key(destination.actor_definition_id),
            ConnectorDefinition,
            "destination definition",
            destination.actor_definition_id,
        )

    # ========================================================================
    # Versions and breaking changes
    # ========================================================================

    async def get_actor_definition_version(self, version_id: UUID) -> ActorDefinitionVersion:
        return await self._load(version_key(version_id), ActorDefinitionVersion, "actor definition version", version_id)

    async def list_breaking_changes(self, actor_definition_id: UUID) -> list[BreakingChange]:
        """All breaking changes announced for a definition, ordered by (version, deadline)."""
        try:
            entries = await self._client.hgetall(breaking_changes_key(actor_definition_id))
        except Exception as e:
            raise ServiceUnavailableError(
                f"Config store read failed for breaking changes of {actor_definition_id}: {e}"
            ) from e

        try:
            changes = [BreakingChange.model_validate_json(raw) for raw in entries.values()]
            return sorted(changes, key=_breaking_change_order)
        except (ValidationError, ValueError) as e:
            raise InvalidRequestError(f"Malformed breaking change for {actor_definition_id}: {e}") from e

    async def list_breaking_changes_for_actor_definition_version(
        self, version: ActorDefinitionVersion
    ) -> list[BreakingChange]:
        """Breaking changes still ahead of a version: those announced for a newer release.

        Images with a non-semantic tag (dev builds, `latest`) are outside the
        release train and have no upcoming breaking changes.
        """
        current = Version.try_parse(version.docker_image_tag)
        if current is None:
            logger.debug(
                f"Tag '{version.docker_image_tag}' of {version.docker_repository} is not semantic; "
                "no breaking changes apply"
            )
            return []

        changes = await self.list_breaking_changes(version.actor_definition_id)
        return [change for change in changes if Version.parse(change.version) > current]

    # ========================================================================
    # Writes (seeding and tests)
    # ========================================================================

    async def write_actor(self, actor: Actor) -> None:
        if actor.actor_type == ActorType.SOURCE:
            await self._store(source_key(actor.actor_id), actor)
        else:
            await self._store(destination_key(actor.actor_id), actor)

    async def write_connector_definition(self, definition: ConnectorDefinition) -> None:
        if definition.actor_type == ActorType.SOURCE:
            await self._store(source_definition_key(definition.definition_id), definition)
        else:
            await self._store(destination_definition_key(definition.definition_id), definition)

    async def write_actor_definition_version(self, version: ActorDefinitionVersion) -> None:
        await self._store(version_key(version.version_id), version)

    async def write_breaking_change(self, change: BreakingChange) -> None:
        """Announce (or replace) the breaking change for one version of a definition."""
        if Version.try_parse(change.version) is None:
            raise InvalidRequestError(f"Breaking change version must be semantic: {change.version!r}")
        try:
            await self._client.hset(
                breaking_changes_key(change.actor_definition_id),
                change.version,
                change.model_dump_json(),
            )
        except Exception as e:
            raise ServiceUnavailableError(f"Config store write failed for breaking change {change.version}: {e}") from e
