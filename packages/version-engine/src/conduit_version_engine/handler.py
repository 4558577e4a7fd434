"""ActorDefinitionVersionHandler — assembles the version read for a source or destination.

Each query performs one lookup per datum, always in the same order:

  actor → connector definition → effective version → breaking changes

and surfaces whatever the collaborators raise unchanged. Keeping the order
fixed means a failure can always be attributed to a single lookup.

The handler is constructed with its collaborators (the config store and the
version resolver) so tests can substitute fakes that count calls.
"""

from __future__ import annotations

import logging
from typing import Protocol
from uuid import UUID

from conduit_shared.errors import parse_id
from conduit_shared.version_models import (
    Actor,
    ActorDefinitionVersion,
    ActorDefinitionVersionRead,
    BreakingChange,
    ConnectorDefinition,
)

from conduit_version_engine.breaking_changes import project_breaking_changes

logger = logging.getLogger(__name__)


class ConfigStore(Protocol):
    async def get_source_connection(self, source_id: UUID) -> Actor: ...

    async def get_destination_connection(self, destination_id: UUID) -> Actor: ...

    async def get_source_definition_from_source(self, source_id: UUID) -> ConnectorDefinition: ...

    async def get_destination_definition_from_destination(self, destination_id: UUID) -> ConnectorDefinition: ...

    async def list_breaking_changes_for_actor_definition_version(
        self, version: ActorDefinitionVersion
    ) -> list[BreakingChange]: ...


class VersionResolver(Protocol):
    async def get_source_version(
        self, definition: ConnectorDefinition, workspace_id: UUID, source_id: UUID
    ) -> ActorDefinitionVersion: ...

    async def get_destination_version(
        self, definition: ConnectorDefinition, workspace_id: UUID, destination_id: UUID
    ) -> ActorDefinitionVersion: ...


def _is_actor_default(actor: Actor, version: ActorDefinitionVersion) -> bool:
    return actor.default_version_id is not None and actor.default_version_id == version.version_id


class ActorDefinitionVersionHandler:
    def __init__(self, config_store: ConfigStore, version_resolver: VersionResolver) -> None:
        self._config_store = config_store
        self._version_resolver = version_resolver

    async def get_version_for_source(self, source_id: UUID | str) -> ActorDefinitionVersionRead:
        """Version read for the source with the given id."""
        sid = parse_id(source_id, "source_id")

        source = await self._config_store.get_source_connection(sid)
        definition = await self._config_store.get_source_definition_from_source(sid)
        version = await self._version_resolver.get_source_version(definition, source.workspace_id, sid)

        return await self.build_read(version, _is_actor_default(source, version))

    async def get_version_for_destination(self, destination_id: UUID | str) -> ActorDefinitionVersionRead:
        """Version read for the destination with the given id."""
        did = parse_id(destination_id, "destination_id")

        destination = await self._config_store.get_destination_connection(did)
        definition = await self._config_store.get_destination_definition_from_destination(did)
        version = await self._version_resolver.get_destination_version(definition, destination.workspace_id, did)

        return await self.build_read(version, _is_actor_default(destination, version))

    async def build_read(
        self, version: ActorDefinitionVersion, is_actor_default_version: bool
    ) -> ActorDefinitionVersionRead:
        """Combine a resolved version with the breaking changes that still lie ahead of it."""
        breaking_changes = await self._config_store.list_breaking_changes_for_actor_definition_version(version)

        block = None
        if breaking_changes:
            block = project_breaking_changes(breaking_changes)
            logger.debug(
                f"{version.docker_repository}:{version.docker_image_tag} has "
                f"{len(breaking_changes)} upcoming breaking change(s)"
            )

        return ActorDefinitionVersionRead(
            docker_repository=version.docker_repository,
            docker_image_tag=version.docker_image_tag,
            support_state=version.support_state,
            is_actor_default_version=is_actor_default_version,
            breaking_changes=block,
        )
