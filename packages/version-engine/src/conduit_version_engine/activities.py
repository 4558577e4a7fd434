"""Version Engine activities — the inbound surface for connector version queries.

Run on VERSION_ENGINE_QUEUE. Each activity builds a handler over the Config
Access store, delegates, and converts PlatformErrors into Temporal
ApplicationErrors:

  get_source_version       — version read for a source actor
  get_destination_version  — version read for a destination actor

ConfigNotFoundError and InvalidRequestError are non-retryable; a
ServiceUnavailableError is left to the activity retry policy.
"""

from conduit_config_access.client import get_client
from conduit_config_access.repository import ConfigRepository
from conduit_shared.errors import PlatformError, to_application_error
from conduit_shared.feature_flags import get_feature_flag_client
from conduit_shared.version_models import (
    ActorDefinitionVersionRead,
    DestinationIdRequestBody,
    SourceIdRequestBody,
)
from temporalio import activity

from conduit_version_engine.handler import ActorDefinitionVersionHandler
from conduit_version_engine.resolver import ActorDefinitionVersionResolver


def build_handler() -> ActorDefinitionVersionHandler:
    """Wire the handler to the process-wide store client and flag client."""
    repository = ConfigRepository(get_client())
    resolver = ActorDefinitionVersionResolver(repository, get_feature_flag_client())
    return ActorDefinitionVersionHandler(repository, resolver)


@activity.defn
async def get_source_version(request: SourceIdRequestBody) -> ActorDefinitionVersionRead:
    """Resolve the connector version a source runs, with its upcoming breaking changes."""
    activity.logger.info(f"Resolving connector version for source '{request.source_id}'")
    try:
        return await build_handler().get_version_for_source(request.source_id)
    except PlatformError as e:
        activity.logger.warning(f"Version lookup for source '{request.source_id}' failed: {e}")
        raise to_application_error(e) from e


@activity.defn
async def get_destination_version(request: DestinationIdRequestBody) -> ActorDefinitionVersionRead:
    """Resolve the connector version a destination runs, with its upcoming breaking changes."""
    activity.logger.info(f"Resolving connector version for destination '{request.destination_id}'")
    try:
        return await build_handler().get_version_for_destination(request.destination_id)
    except PlatformError as e:
        activity.logger.warning(f"Version lookup for destination '{request.destination_id}' failed: {e}")
        raise to_application_error(e) from e
