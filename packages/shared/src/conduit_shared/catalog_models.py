"""Schema refresh boundary models — the contract between Data Manager and Schema Refresh.

Two groups:
  - Control-plane API payloads (SourceRead, ActorCatalogWithUpdatedAt, ...)
    mirror the public API, so they extend ApiModel and read/write camelCase.
  - Activity requests/results cross the Temporal boundary. RefreshSchemaResult
    extends PlatformResult because a flag-gated skip is an expected outcome,
    not a failure.

Catalogs are opaque to this slice: discovery produces them and the control
plane applies them, so they travel as plain JSON objects.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from pydantic import BaseModel

from conduit_shared.models import ApiModel, PlatformResult

# ============================================================================
# Control-plane API payloads
# ============================================================================


class ActorCatalogWithUpdatedAt(ApiModel):
    """Most recent catalog fetch event for a source."""

    updated_at: int | None = None  # epoch seconds; None when never fetched
    catalog: dict[str, Any] | None = None


class SourceRead(ApiModel):
    source_id: UUID
    source_definition_id: UUID
    workspace_id: UUID | None = None
    name: str = ""


class WorkspaceRead(ApiModel):
    workspace_id: UUID
    name: str = ""


class SourceDiscoverSchemaRequestBody(ApiModel):
    source_id: UUID
    connection_id: UUID | None = None
    disable_cache: bool = False
    notify_schema_change: bool = False


class SourceDiscoverSchemaRead(ApiModel):
    catalog: dict[str, Any] | None = None
    catalog_id: UUID | None = None
    job_info: dict[str, Any] | None = None


class SourceAutoPropagateChange(ApiModel):
    source_id: UUID
    workspace_id: UUID
    catalog_id: UUID | None = None
    catalog: dict[str, Any] | None = None


class ConnectionIdRequestBody(ApiModel):
    connection_id: UUID


# ============================================================================
# Activity Request/Result Pairs
# ============================================================================


class ShouldRefreshSchemaRequest(BaseModel):
    """Input for should_refresh_schema."""

    source_id: str


class RefreshSchemaRequest(BaseModel):
    """Input for refresh_schema and RefreshSchemaWorkflow."""

    source_id: str
    connection_id: str


class RefreshSchemaResult(PlatformResult):
    """Result of refresh_schema."""

    source_id: str = ""
    connection_id: str = ""
    discovered: bool = False
    catalog_id: str | None = None
    auto_propagated: bool = False
