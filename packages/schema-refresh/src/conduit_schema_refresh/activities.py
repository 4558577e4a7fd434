"""Schema Refresh activities — Temporal activity functions for schema re-discovery.

These run on the schema-refresh worker (SCHEMA_REFRESH_QUEUE). The Data
Manager's RefreshSchemaWorkflow calls them back to back:

  should_refresh_schema — advisory throttle, fails open
  refresh_schema        — discover, then auto-propagate when enabled

Each activity opens a control-plane API client, delegates, and closes the
client afterward. The client handles retries internally.
"""

from conduit_shared.catalog_models import (
    RefreshSchemaRequest,
    RefreshSchemaResult,
    ShouldRefreshSchemaRequest,
)
from conduit_shared.errors import PlatformError, parse_id, to_application_error
from conduit_shared.feature_flags import get_feature_flag_client
from temporalio import activity

from conduit_schema_refresh.api_client import ControlPlaneApiClient
from conduit_schema_refresh.refresher import SchemaRefresher
from conduit_schema_refresh.throttle import SchemaRefreshThrottle

# Per request; the throttle bounds the whole lookup separately.
THROTTLE_REQUEST_TIMEOUT_SECONDS = 5.0


@activity.defn
async def should_refresh_schema(request: ShouldRefreshSchemaRequest) -> bool:
    """Decide whether the source's schema should be re-discovered now.

    Lookup errors make the throttle answer True rather than fail, but a
    malformed source id is still rejected.
    """
    try:
        source_id = parse_id(request.source_id, "source_id")
    except PlatformError as e:
        raise to_application_error(e) from e

    async with ControlPlaneApiClient.from_env(timeout=THROTTLE_REQUEST_TIMEOUT_SECONDS) as api:
        throttle = SchemaRefreshThrottle(api, get_feature_flag_client())
        should_refresh = await throttle.should_refresh(source_id)

    activity.logger.info(f"Schema refresh for source '{source_id}' due: {should_refresh}")
    return should_refresh


@activity.defn
async def refresh_schema(request: RefreshSchemaRequest) -> RefreshSchemaResult:
    """Trigger schema discovery for a source and auto-propagate it to the connection."""
    try:
        source_id = parse_id(request.source_id, "source_id")
        connection_id = parse_id(request.connection_id, "connection_id")
        activity.logger.info(f"Refreshing schema for source '{source_id}' on connection '{connection_id}'")

        async with ControlPlaneApiClient.from_env() as api:
            return await SchemaRefresher(api, get_feature_flag_client()).refresh(source_id, connection_id)
    except PlatformError as e:
        activity.logger.warning(f"Schema refresh for source '{request.source_id}' failed: {e}")
        raise to_application_error(e) from e
