"""Data Manager: Temporal Workflow definitions.

Orchestrates the control plane through two workflows:
- DescribeActorVersionWorkflow: Version Engine
- RefreshSchemaWorkflow: Schema Refresh (throttle → discover/propagate)
"""
