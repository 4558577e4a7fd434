"""SchemaRefresher — triggers discovery for a source and optionally auto-propagates it.

Gated by three flags: the global auto-detect-schema toggle, the per definition /
connection should-run-refresh-schema rollout flag, and the per workspace
auto-propagate-schema flag. A gate that is off produces a skipped result;
any API failure propagates so the workflow engine can retry the activity.
"""

from __future__ import annotations

import logging
from typing import Protocol
from uuid import UUID

from conduit_shared.catalog_models import (
    RefreshSchemaResult,
    SourceAutoPropagateChange,
    SourceDiscoverSchemaRead,
    SourceDiscoverSchemaRequestBody,
    SourceRead,
    WorkspaceRead,
)
from conduit_shared.feature_flags import (
    AUTO_DETECT_SCHEMA,
    AUTO_PROPAGATE_SCHEMA,
    SHOULD_RUN_REFRESH_SCHEMA,
    Connection,
    FeatureFlagClient,
    Multi,
    SourceDefinition,
    Workspace,
)
from conduit_shared.tracing import (
    CONNECTION_ID_KEY,
    SOURCE_ID_KEY,
    WORKSPACE_ID_KEY,
    add_tags_to_trace,
)

logger = logging.getLogger(__name__)


class RefreshApi(Protocol):
    async def get_source(self, source_id: UUID) -> SourceRead: ...

    async def discover_schema_for_source(
        self, request: SourceDiscoverSchemaRequestBody
    ) -> SourceDiscoverSchemaRead: ...

    async def get_workspace_by_connection_id(self, connection_id: UUID) -> WorkspaceRead: ...

    async def apply_schema_change_for_source(self, change: SourceAutoPropagateChange) -> None: ...


class SchemaRefresher:
    def __init__(self, api: RefreshApi, flags: FeatureFlagClient) -> None:
        self._api = api
        self._flags = flags

    def _skipped(self, source_id: UUID, connection_id: UUID, reason: str) -> RefreshSchemaResult:
        logger.info(f"Skipping schema refresh for source {source_id}: {reason}")
        return RefreshSchemaResult(
            success=True,
            message=f"Schema refresh skipped: {reason}",
            source_id=str(source_id),
            connection_id=str(connection_id),
        )

    async def refresh(self, source_id: UUID, connection_id: UUID) -> RefreshSchemaResult:
        if not self._flags.bool_variation(AUTO_DETECT_SCHEMA):
            return self._skipped(source_id, connection_id, "auto-detect schema is disabled")

        source = await self._api.get_source(source_id)
        rollout = Multi([SourceDefinition(source.source_definition_id), Connection(connection_id)])
        if not self._flags.bool_variation(SHOULD_RUN_REFRESH_SCHEMA, rollout):
            return self._skipped(source_id, connection_id, "not enabled for this definition or connection")

        add_tags_to_trace({CONNECTION_ID_KEY: connection_id, SOURCE_ID_KEY: source_id})

        discovered = await self._api.discover_schema_for_source(
            SourceDiscoverSchemaRequestBody(
                source_id=source_id,
                connection_id=connection_id,
                disable_cache=True,
                notify_schema_change=True,
            )
        )

        workspace = await self._api.get_workspace_by_connection_id(connection_id)
        add_tags_to_trace({WORKSPACE_ID_KEY: workspace.workspace_id})

        auto_propagated = False
        if self._flags.bool_variation(AUTO_PROPAGATE_SCHEMA, Workspace(workspace.workspace_id)):
            await self._api.apply_schema_change_for_source(
                SourceAutoPropagateChange(
                    source_id=source_id,
                    workspace_id=workspace.workspace_id,
                    catalog_id=discovered.catalog_id,
                    catalog=discovered.catalog,
                )
            )
            auto_propagated = True

        catalog_id = str(discovered.catalog_id) if discovered.catalog_id else None
        return RefreshSchemaResult(
            success=True,
            message=(
                f"Schema refreshed for source {source_id}"
                + (" and propagated to the connection" if auto_propagated else "")
            ),
            source_id=str(source_id),
            connection_id=str(connection_id),
            discovered=True,
            catalog_id=catalog_id,
            auto_propagated=auto_propagated,
        )
