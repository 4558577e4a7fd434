"""ActorDefinitionVersionResolver — decides which connector version an actor runs.

Precedence, first match wins:

  1. connector-version-override flag, evaluated against the workspace, the
     definition, and the actor. Its value is a version id. Used to roll a fix
     out to (or hold back) specific workspaces without touching actor config.
  2. The actor's own default_version_id (the version it is pinned to).
  3. The definition's default_version_id.

The chosen version record is loaded from the config store. No candidate, or a
candidate id with no record behind it, is a ConfigNotFoundError.
"""

from __future__ import annotations

import logging
from typing import Protocol
from uuid import UUID

from conduit_shared.errors import ConfigNotFoundError, InvalidRequestError
from conduit_shared.feature_flags import (
    CONNECTOR_VERSION_OVERRIDE,
    Destination,
    DestinationDefinition,
    FeatureFlagClient,
    Multi,
    Source,
    SourceDefinition,
    Workspace,
)
from conduit_shared.version_models import (
    Actor,
    ActorDefinitionVersion,
    ConnectorDefinition,
)

logger = logging.getLogger(__name__)


class VersionStore(Protocol):
    async def get_source_connection(self, source_id: UUID) -> Actor: ...

    async def get_destination_connection(self, destination_id: UUID) -> Actor: ...

    async def get_actor_definition_version(self, version_id: UUID) -> ActorDefinitionVersion: ...


class ActorDefinitionVersionResolver:
    def __init__(self, store: VersionStore, flags: FeatureFlagClient) -> None:
        self._store = store
        self._flags = flags

    async def get_source_version(
        self, definition: ConnectorDefinition, workspace_id: UUID, source_id: UUID
    ) -> ActorDefinitionVersion:
        """Effective version for a source."""
        override = self._flags.string_variation(
            CONNECTOR_VERSION_OVERRIDE,
            Multi([Workspace(workspace_id), SourceDefinition(definition.definition_id), Source(source_id)]),
        )
        if override:
            return await self._load_override(override, definition, source_id)

        source = await self._store.get_source_connection(source_id)
        return await self._resolve_default(definition, source)

    async def get_destination_version(
        self, definition: ConnectorDefinition, workspace_id: UUID, destination_id: UUID
    ) -> ActorDefinitionVersion:
        """Effective version for a destination."""
        override = self._flags.string_variation(
            CONNECTOR_VERSION_OVERRIDE,
            Multi(
                [
                    Workspace(workspace_id),
                    DestinationDefinition(definition.definition_id),
                    Destination(destination_id),
                ]
            ),
        )
        if override:
            return await self._load_override(override, definition, destination_id)

        destination = await self._store.get_destination_connection(destination_id)
        return await self._resolve_default(definition, destination)

    async def _load_override(
        self, override: str, definition: ConnectorDefinition, actor_id: UUID
    ) -> ActorDefinitionVersion:
        try:
            version_id = UUID(override)
        except ValueError as e:
            raise InvalidRequestError(f"Version override for {actor_id} is not a version id: {override!r}") from e

        version = await self._store.get_actor_definition_version(version_id)
        if version.actor_definition_id != definition.definition_id:
            raise InvalidRequestError(
                f"Version override {version_id} belongs to definition {version.actor_definition_id}, "
                f"not {definition.definition_id}"
            )
        logger.info(f"Using overridden version {version_id} for actor {actor_id}")
        return version

    async def _resolve_default(self, definition: ConnectorDefinition, actor: Actor) -> ActorDefinitionVersion:
        version_id = actor.default_version_id or definition.default_version_id
        if version_id is None:
            raise ConfigNotFoundError("actor definition version", f"default for {definition.definition_id}")
        return await self._store.get_actor_definition_version(version_id)
