"""Component registry: maps component names to their workflows and activities.

This is the central lookup table that the runner uses to determine what to
register on a worker based on the CLI argument. Each component entry specifies:

- task_queue: Which Temporal task queue this worker polls
- workflows: Workflow classes to register (only the Data Manager has these)
- activities: Activity functions to register

Every service uses the same image; the CMD argument (e.g., "version-engine")
selects which entry from this registry to run.
"""

from dataclasses import dataclass, field
from typing import Any

from conduit_data_manager.workflows.describe_version import DescribeActorVersionWorkflow
from conduit_data_manager.workflows.refresh_schema import RefreshSchemaWorkflow
from conduit_schema_refresh.activities import refresh_schema, should_refresh_schema
from conduit_shared.task_queues import (
    DATA_MANAGER_QUEUE,
    SCHEMA_REFRESH_QUEUE,
    VERSION_ENGINE_QUEUE,
)
from conduit_version_engine.activities import get_destination_version, get_source_version


@dataclass
class ComponentConfig:
    """Configuration for a single component's worker."""

    task_queue: str
    workflows: list[Any] = field(default_factory=list)
    activities: list[Any] = field(default_factory=list)


COMPONENTS: dict[str, ComponentConfig] = {
    "data-manager": ComponentConfig(
        task_queue=DATA_MANAGER_QUEUE,
        workflows=[DescribeActorVersionWorkflow, RefreshSchemaWorkflow],
    ),
    "version-engine": ComponentConfig(
        task_queue=VERSION_ENGINE_QUEUE,
        activities=[get_source_version, get_destination_version],
    ),
    "schema-refresh": ComponentConfig(
        task_queue=SCHEMA_REFRESH_QUEUE,
        activities=[should_refresh_schema, refresh_schema],
    ),
}
