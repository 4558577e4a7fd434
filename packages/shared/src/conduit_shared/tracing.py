"""Span tagging helpers over the OpenTelemetry API.

Components tag whatever span is current (the Temporal interceptor's activity
span in production, a non-recording span otherwise), so these calls are safe
with no tracer provider configured.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from uuid import UUID

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

SOURCE_ID_KEY = "conduit.source_id"
CONNECTION_ID_KEY = "conduit.connection_id"
WORKSPACE_ID_KEY = "conduit.workspace_id"


def add_tags_to_trace(tags: Mapping[str, UUID | str | int | bool]) -> None:
    span = trace.get_current_span()
    for key, value in tags.items():
        span.set_attribute(key, str(value) if isinstance(value, UUID) else value)


def add_exception_to_trace(error: BaseException, attributes: Mapping[str, Any] | None = None) -> None:
    """Record a handled exception on the current span and mark it as errored."""
    span = trace.get_current_span()
    span.record_exception(error, attributes=dict(attributes) if attributes else None)
    span.set_status(Status(StatusCode.ERROR, str(error)))
