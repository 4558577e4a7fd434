"""ControlPlaneApiClient — async httpx client for the control-plane API.

The schema refresh activities never touch catalogs or workspaces directly;
they ask the control plane. Every endpoint is a JSON POST, like the rest of
the public API.

Cross-cutting behaviour:
  - Retry with jittered exponential backoff via tenacity on transport errors,
    timeouts, 429 and 5xx responses.
  - HTTP failures surviving the retries are mapped onto the shared taxonomy:
    404 → ConfigNotFoundError, other 4xx → InvalidRequestError,
    everything else → ServiceUnavailableError. A 2xx body that is not JSON
    or fails validation is also a ServiceUnavailableError.

Usage:
    async with ControlPlaneApiClient.from_env() as api:
        source = await api.get_source(source_id)
"""

from __future__ import annotations

import os
from typing import Any, TypeVar
from uuid import UUID

import httpx
from conduit_shared.catalog_models import (
    ActorCatalogWithUpdatedAt,
    ConnectionIdRequestBody,
    SourceAutoPropagateChange,
    SourceDiscoverSchemaRead,
    SourceDiscoverSchemaRequestBody,
    SourceRead,
    WorkspaceRead,
)
from conduit_shared.errors import (
    ConfigNotFoundError,
    InvalidRequestError,
    ServiceUnavailableError,
)
from conduit_shared.models import ApiModel
from conduit_shared.version_models import SourceIdRequestBody
from pydantic import ValidationError
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_random_exponential,
)

DEFAULT_API_URL = "http://localhost:8001/api"

M = TypeVar("M", bound=ApiModel)


def _is_transient(error: BaseException) -> bool:
    if isinstance(error, httpx.TransportError):
        return True
    if isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
        return status == 429 or status >= 500
    return False


class ControlPlaneApiClient:
    """Thin typed wrapper over the control-plane endpoints used by schema refresh."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._token = token
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self.request_count: int = 0

    @classmethod
    def from_env(cls, timeout: float = 30.0) -> ControlPlaneApiClient:
        """Build a client from CONDUIT_API_URL and CONDUIT_API_TOKEN."""
        return cls(
            base_url=os.environ.get("CONDUIT_API_URL", DEFAULT_API_URL),
            token=os.environ.get("CONDUIT_API_TOKEN") or None,
            timeout=timeout,
        )

    async def __aenter__(self) -> ControlPlaneApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {"Accept": "application/json"}
            if self._token:
                headers["Authorization"] = f"Bearer {self._token}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @retry(
        retry=retry_if_exception(_is_transient),
        wait=wait_random_exponential(multiplier=1, max=30),
        stop=stop_after_attempt(3),
        reraise=True,
    )
    async def _post_with_retry(self, path: str, body: dict[str, Any]) -> httpx.Response:
        self.request_count += 1
        response = await self._get_client().post(path, json=body)
        response.raise_for_status()
        return response

    async def _post(
        self,
        path: str,
        body: ApiModel,
        operation: str,
        response_model: type[M] | None = None,
    ) -> M | None:
        """POST a request body and validate the JSON response into response_model.

        An empty response body validates as `{}`. A body that is not JSON, or
        does not fit response_model, is a ServiceUnavailableError: the control
        plane answered, but not with anything usable.
        """
        try:
            response = await self._post_with_retry(path, body.to_wire())
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 404:
                raise ConfigNotFoundError(operation, path) from e
            if 400 <= status < 500 and status != 429:
                raise InvalidRequestError(f"{operation} rejected ({status}): {e.response.text}") from e
            raise ServiceUnavailableError(f"{operation} failed ({status})") from e
        except httpx.TransportError as e:
            raise ServiceUnavailableError(f"{operation} failed: {e}") from e

        if response_model is None:
            return None
        try:
            data = response.json() if response.content else {}
            return response_model.model_validate(data)
        except (ValueError, ValidationError) as e:
            raise ServiceUnavailableError(f"{operation} returned an unusable response: {e}") from e

    # ========================================================================
    # Endpoints
    # ========================================================================

    async def get_most_recent_source_actor_catalog(self, source_id: UUID) -> ActorCatalogWithUpdatedAt:
        return await self._post(
            "/v1/sources/most_recent_source_actor_catalog",
            SourceIdRequestBody(source_id=str(source_id)),
            "Get the most recent source actor catalog",
            ActorCatalogWithUpdatedAt,
        )

    async def get_source(self, source_id: UUID) -> SourceRead:
        return await self._post(
            "/v1/sources/get",
            SourceIdRequestBody(source_id=str(source_id)),
            "Get source",
            SourceRead,
        )

    async def discover_schema_for_source(self, request: SourceDiscoverSchemaRequestBody) -> SourceDiscoverSchemaRead:
        return await self._post(
            "/v1/sources/discover_schema",
            request,
            "Trigger discover schema",
            SourceDiscoverSchemaRead,
        )

    async def get_workspace_by_connection_id(self, connection_id: UUID) -> WorkspaceRead:
        return await self._post(
            "/v1/workspaces/get_by_connection_id",
            ConnectionIdRequestBody(connection_id=connection_id),
            "Get the workspace by connection id",
            WorkspaceRead,
        )

    async def apply_schema_change_for_source(self, change: SourceAutoPropagateChange) -> None:
        await self._post("/v1/sources/apply_schema_changes", change, "Auto propagate the schema change")
