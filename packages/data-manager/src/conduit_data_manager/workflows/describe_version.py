"""DescribeActorVersionWorkflow: Version Engine.

Resolves the connector version a source or destination runs, together with
the breaking changes it still has to go through. The workflow runs on
data-manager-queue; the lookup itself executes on the version-engine worker.

ConfigNotFoundError and InvalidRequestError come back as non-retryable
ApplicationErrors, so a missing actor fails the workflow after one attempt.
"""

from datetime import timedelta

from temporalio import workflow
from temporalio.common import RetryPolicy

with workflow.unsafe.imports_passed_through():
    from conduit_shared.task_queues import VERSION_ENGINE_QUEUE
    from conduit_shared.version_models import (
        ActorDefinitionVersionRead,
        ActorType,
        ActorVersionRequest,
        DestinationIdRequestBody,
        SourceIdRequestBody,
    )
    from conduit_version_engine.activities import (
        get_destination_version,
        get_source_version,
    )


@workflow.defn
class DescribeActorVersionWorkflow:
    """Looks up the effective connector version for one actor."""

    @workflow.run
    async def run(self, request: ActorVersionRequest) -> ActorDefinitionVersionRead:
        retry_policy = RetryPolicy(maximum_attempts=5, maximum_interval=timedelta(seconds=30))

        if request.actor_type == ActorType.DESTINATION:
            return await workflow.execute_activity(
                get_destination_version,
                DestinationIdRequestBody(destination_id=request.actor_id),
                task_queue=VERSION_ENGINE_QUEUE,
                start_to_close_timeout=timedelta(seconds=30),
                retry_policy=retry_policy,
            )

        return await workflow.execute_activity(
            get_source_version,
            SourceIdRequestBody(source_id=request.actor_id),
            task_queue=VERSION_ENGINE_QUEUE,
            start_to_close_timeout=timedelta(seconds=30),
            retry_policy=retry_policy,
        )
