"""Task queue name constants for each component.

Every component runs on its own Temporal worker with a dedicated task queue,
so the version engine can scale independently of schema refresh traffic.

These constants are the single source of truth for queue names. Both the worker
runner (which starts workers listening on the right queue) and the workflow
definitions (which dispatch activities to the right queue) reference these.
"""

# Manager — runs workflows that orchestrate activities across other queues
DATA_MANAGER_QUEUE = "data-manager-queue"

# Engines — business logic activities
VERSION_ENGINE_QUEUE = "version-engine-queue"

# Resource Access — external control-plane API activities
SCHEMA_REFRESH_QUEUE = "schema-refresh-queue"
