"""SchemaRefreshThrottle — decides whether a source's schema is due for re-discovery.

A source is due when its catalog was never fetched, or when the last fetch is
older than the workspace's refresh period (the refresh-schema-period flag,
24 hours when the source has no workspace).

The throttle is advisory and fails open: if any lookup raises (other than a
cancellation), or the lookups together overrun the lookup budget, the answer
is "refresh".
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID

from conduit_shared.catalog_models import ActorCatalogWithUpdatedAt, SourceRead
from conduit_shared.feature_flags import (
    AUTO_DETECT_SCHEMA,
    REFRESH_SCHEMA_PERIOD,
    FeatureFlagClient,
    Workspace,
)
from conduit_shared.tracing import SOURCE_ID_KEY, add_exception_to_trace, add_tags_to_trace
from temporalio.exceptions import CancelledError

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_PERIOD_HOURS = 24

# Whole-lookup budget; kept well inside the activity start_to_close_timeout.
DEFAULT_LOOKUP_TIMEOUT_SECONDS = 20.0


class CatalogApi(Protocol):
    async def get_most_recent_source_actor_catalog(self, source_id: UUID) -> ActorCatalogWithUpdatedAt: ...

    async def get_source(self, source_id: UUID) -> SourceRead: ...


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SchemaRefreshThrottle:
    def __init__(
        self,
        api: CatalogApi,
        flags: FeatureFlagClient,
        clock: Callable[[], datetime] = _utcnow,
        lookup_timeout: float = DEFAULT_LOOKUP_TIMEOUT_SECONDS,
    ) -> None:
        self._api = api
        self._flags = flags
        self._clock = clock
        self._lookup_timeout = lookup_timeout

    async def should_refresh(self, source_id: UUID) -> bool:
        """True when the source's schema should be re-discovered now."""
        if not self._flags.bool_variation(AUTO_DETECT_SCHEMA):
            return False

        add_tags_to_trace({SOURCE_ID_KEY: source_id})
        return not await self._refreshed_recently(source_id)

    async def _refreshed_recently(self, source_id: UUID) -> bool:
        try:
            async with asyncio.timeout(self._lookup_timeout):
                return await self._last_fetch_within_period(source_id)
        except CancelledError:
            raise
        except Exception as e:
            # TimeoutError from the lookup budget lands here too
            add_exception_to_trace(e)
            logger.info(f"Encountered an error fetching most recent actor catalog fetch event for {source_id}", exc_info=e)
            return False

    async def _last_fetch_within_period(self, source_id: UUID) -> bool:
        fetch_event = await self._api.get_most_recent_source_actor_catalog(source_id)
        if fetch_event.updated_at is None:
            return False

        source = await self._api.get_source(source_id)
        refresh_period = DEFAULT_REFRESH_PERIOD_HOURS
        if source.workspace_id is not None:
            refresh_period = self._flags.int_variation(REFRESH_SCHEMA_PERIOD, Workspace(source.workspace_id))
        else:
            logger.warning(
                f"Source {source_id} has no workspace; using the default "
                f"{DEFAULT_REFRESH_PERIOD_HOURS}h schema refresh period"
            )

        cutoff = self._clock() - timedelta(hours=refresh_period)
        return fetch_event.updated_at >= cutoff.timestamp()
