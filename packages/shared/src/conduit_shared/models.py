"""Pydantic base models shared across components.

These serve as the contract types that flow between workflows and activities.
Using Pydantic gives us automatic validation at component boundaries — if a
workflow sends bad data to an activity, it fails fast with a clear error
rather than propagating garbage downstream.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class PlatformResult(BaseModel):
    """Standard result envelope returned by orchestration activities.

    Used where "nothing to do" is an expected business outcome (e.g. a schema
    refresh skipped by a feature flag) rather than a failure.
    """

    success: bool
    message: str
    data: dict[str, str | int | float | bool | None] | None = None


class ApiModel(BaseModel):
    """Base for models that mirror the public API.

    Python attributes stay snake_case; the wire form is camelCase. Both names
    are accepted on input so Temporal payloads and API payloads validate alike.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:  # type: ignore[type-arg]
        """Serialize to the public JSON shape (camelCase, optional fields omitted)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
