"""RefreshSchemaWorkflow: Schema Refresh throttle → Schema Refresh discover/propagate.

Runs ahead of a sync:

1. should_refresh_schema (schema-refresh-queue): is the source due for
   re-discovery? The throttle is advisory. If the activity itself fails
   (timeouts included) after its bounded retries, the source counts as due.
2. refresh_schema (schema-refresh-queue): discover the schema and, when the
   workspace has auto-propagation enabled, apply it to the connection.
"""

from datetime import timedelta

from temporalio import workflow
from temporalio.common import RetryPolicy
from temporalio.exceptions import ActivityError

with workflow.unsafe.imports_passed_through():
    from conduit_schema_refresh.activities import refresh_schema, should_refresh_schema
    from conduit_shared.catalog_models import (
        RefreshSchemaRequest,
        RefreshSchemaResult,
        ShouldRefreshSchemaRequest,
    )
    from conduit_shared.task_queues import SCHEMA_REFRESH_QUEUE


@workflow.defn
class RefreshSchemaWorkflow:
    """Re-discovers a source's schema when the throttle says it is due."""

    @workflow.run
    async def run(self, request: RefreshSchemaRequest) -> RefreshSchemaResult:
        try:
            due: bool = await workflow.execute_activity(
                should_refresh_schema,
                ShouldRefreshSchemaRequest(source_id=request.source_id),
                task_queue=SCHEMA_REFRESH_QUEUE,
                start_to_close_timeout=timedelta(seconds=30),
                retry_policy=RetryPolicy(maximum_attempts=2),
            )
        except ActivityError as e:
            workflow.logger.warning(f"Schema refresh throttle failed for source {request.source_id}; refreshing: {e}")
            due = True

        if not due:
            return RefreshSchemaResult(
                success=True,
                message="Schema refreshed recently; nothing to do",
                source_id=request.source_id,
                connection_id=request.connection_id,
            )

        # Discovery spins up the connector, so give it room.
        return await workflow.execute_activity(
            refresh_schema,
            request,
            task_queue=SCHEMA_REFRESH_QUEUE,
            start_to_close_timeout=timedelta(minutes=30),
        )
