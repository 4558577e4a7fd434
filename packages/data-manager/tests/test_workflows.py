"""Tests for RefreshSchemaWorkflow control flow.

workflow.execute_activity is patched so the run method executes outside a
workflow sandbox; only the branching on the throttle answer is under test.
"""

from __future__ import annotations

import uuid
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from conduit_data_manager.workflows.refresh_schema import RefreshSchemaWorkflow
from conduit_schema_refresh.activities import refresh_schema, should_refresh_schema
from conduit_shared.catalog_models import RefreshSchemaRequest, RefreshSchemaResult
from temporalio import workflow
from temporalio.exceptions import ActivityError, RetryState


@pytest.fixture
def request_body() -> RefreshSchemaRequest:
    return RefreshSchemaRequest(source_id=str(uuid.uuid4()), connection_id=str(uuid.uuid4()))


def _throttle_timeout() -> ActivityError:
    return ActivityError(
        "activity StartToClose timeout",
        scheduled_event_id=5,
        started_event_id=6,
        identity="schema-refresh-worker",
        activity_type="should_refresh_schema",
        activity_id="1",
        retry_state=RetryState.MAXIMUM_ATTEMPTS_REACHED,
    )


def _refreshed(request: RefreshSchemaRequest) -> RefreshSchemaResult:
    return RefreshSchemaResult(
        success=True,
        message="Schema refreshed",
        source_id=request.source_id,
        connection_id=request.connection_id,
        discovered=True,
    )


class TestRefreshSchemaWorkflow:
    @pytest.mark.asyncio
    async def test_not_due_skips_discovery(self, request_body):
        execute = AsyncMock(return_value=False)

        with patch.object(workflow, "execute_activity", execute):
            result = await RefreshSchemaWorkflow().run(request_body)

        assert result.discovered is False
        assert execute.await_count == 1
        assert execute.await_args.args[0] is should_refresh_schema

    @pytest.mark.asyncio
    async def test_due_runs_discovery(self, request_body):
        execute = AsyncMock(side_effect=[True, _refreshed(request_body)])

        with patch.object(workflow, "execute_activity", execute):
            result = await RefreshSchemaWorkflow().run(request_body)

        assert result.discovered is True
        assert execute.await_args_list[1].args[0] is refresh_schema

    @pytest.mark.asyncio
    async def test_throttle_failure_counts_as_due(self, request_body):
        execute = AsyncMock(side_effect=[_throttle_timeout(), _refreshed(request_body)])

        with patch.object(workflow, "execute_activity", execute), patch.object(workflow, "logger", MagicMock()):
            result = await RefreshSchemaWorkflow().run(request_body)

        assert result.discovered is True
        assert [c.args[0] for c in execute.await_args_list] == [should_refresh_schema, refresh_schema]

    @pytest.mark.asyncio
    async def test_throttle_retries_are_bounded(self, request_body):
        execute = AsyncMock(return_value=False)

        with patch.object(workflow, "execute_activity", execute):
            await RefreshSchemaWorkflow().run(request_body)

        retry_policy = execute.await_args.kwargs["retry_policy"]
        assert retry_policy.maximum_attempts > 0
