"""Connector version boundary models — the contract between callers and the Version Engine.

Two families of types live here:

  - Config records (Actor, ConnectorDefinition, ActorDefinitionVersion,
    BreakingChange) are storage-agnostic. They serialize to JSON for the Redis
    config store but would work identically with PostgreSQL.
  - Public read models (ActorDefinitionVersionRead and friends) extend ApiModel,
    so they serialize to the camelCase wire shape via `to_wire()`.

Request bodies carry ids as strings; the handler validates them so a malformed
id is reported as an InvalidRequestError instead of a pydantic ValidationError
deep inside Temporal's data converter.
"""

from __future__ import annotations

from datetime import date
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel

from conduit_shared.models import ApiModel

# ============================================================================
# Enums
# ============================================================================


class ActorType(StrEnum):
    SOURCE = "source"
    DESTINATION = "destination"


class ReleaseStage(StrEnum):
    ALPHA = "alpha"
    BETA = "beta"
    GENERALLY_AVAILABLE = "generally_available"
    CUSTOM = "custom"


class SupportState(StrEnum):
    """Lifecycle marker of a published version. Shared by records and reads."""

    SUPPORTED = "supported"
    DEPRECATED = "deprecated"
    UNSUPPORTED = "unsupported"


# ============================================================================
# Config records — stored as JSON in Redis
# ============================================================================


class Actor(BaseModel):
    """A configured source or destination instance."""

    actor_id: UUID
    workspace_id: UUID
    actor_definition_id: UUID
    actor_type: ActorType
    name: str = ""
    default_version_id: UUID | None = None  # version the actor is pinned to


class ConnectorDefinition(BaseModel):
    """Metadata describing a connector family."""

    definition_id: UUID
    actor_type: ActorType
    name: str = ""
    default_version_id: UUID | None = None  # definition-wide default release


class ActorDefinitionVersion(BaseModel):
    """A concrete released image/tag of a connector. Immutable once published."""

    version_id: UUID
    actor_definition_id: UUID
    docker_repository: str
    docker_image_tag: str
    documentation_url: str | None = None
    release_stage: ReleaseStage = ReleaseStage.ALPHA
    support_state: SupportState = SupportState.SUPPORTED


class BreakingChange(BaseModel):
    """A forward-incompatible change announcement for a connector definition."""

    actor_definition_id: UUID
    version: str  # semantic version, e.g. "2.0.0"
    migration_documentation_url: str
    upgrade_deadline: str  # ISO-8601 calendar date, e.g. "2023-01-01"
    message: str


# ============================================================================
# Public read models — camelCase on the wire
# ============================================================================


class BreakingChangeRead(ApiModel):
    """One upcoming breaking change as shown to API consumers."""

    migration_documentation_url: str
    version: str
    upgrade_deadline: date
    message: str


class VersionBreakingChanges(ApiModel):
    """Upcoming breaking changes plus the earliest deadline among them."""

    min_upgrade_deadline: date
    upcoming_breaking_changes: list[BreakingChangeRead]


class ActorDefinitionVersionRead(ApiModel):
    """The version an actor currently runs, as returned by the version surface."""

    docker_repository: str
    docker_image_tag: str
    support_state: SupportState
    is_actor_default_version: bool
    breaking_changes: VersionBreakingChanges | None = None


# ============================================================================
# Activity / workflow requests
# ============================================================================


class SourceIdRequestBody(ApiModel):
    source_id: str


class DestinationIdRequestBody(ApiModel):
    destination_id: str


class ActorVersionRequest(BaseModel):
    """Input for DescribeActorVersionWorkflow."""

    actor_id: str
    actor_type: ActorType = ActorType.SOURCE
