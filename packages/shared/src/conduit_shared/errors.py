"""Error taxonomy shared by every component.

Handlers and adapters raise these; nothing inside a component retries or
swallows them. At the Temporal activity boundary they are converted with
`to_application_error` so workflows receive a typed failure and the server
only retries the transient ones.

  ConfigNotFoundError      referenced actor/definition/version does not exist
  InvalidRequestError      malformed id, unparseable date, corrupt record
  ServiceUnavailableError  store, resolver, or API failure that may heal

Cancellation is deliberately absent: asyncio.CancelledError (and Temporal's
CancelledError) propagate untouched.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from temporalio.exceptions import ApplicationError


class PlatformError(Exception):
    """Base class for all platform errors.

    `code` is a stable snake_case identifier that callers map to their
    transport's status codes (not_found -> 404, invalid -> 400, ...).
    """

    code: str = "internal_error"
    non_retryable: bool = True

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigNotFoundError(PlatformError):
    """A referenced config object does not exist in the store."""

    code = "not_found"

    def __init__(self, config_type: str, config_id: UUID | str) -> None:
        self.config_type = config_type
        self.config_id = str(config_id)
        super().__init__(f"{config_type} not found: {config_id}")


class InvalidRequestError(PlatformError):
    """Input (or a stored record) cannot be interpreted."""

    code = "invalid"


class ServiceUnavailableError(PlatformError):
    """A transient failure in a store, resolver, or remote API."""

    code = "unavailable"
    non_retryable = False


def parse_id(raw: UUID | str, field: str) -> UUID:
    """Coerce an id to UUID, raising InvalidRequestError when malformed."""
    if isinstance(raw, UUID):
        return raw
    try:
        return UUID(str(raw))
    except ValueError as e:
        raise InvalidRequestError(f"Malformed {field}: {raw!r}") from e


def to_application_error(error: PlatformError) -> ApplicationError:
    """Convert a PlatformError into a Temporal ApplicationError.

    The error class name becomes the failure type, so workflow code can branch
    on e.g. `err.cause.type == "ConfigNotFoundError"`.
    """
    details: list[Any] = [{"code": error.code}]
    if isinstance(error, ConfigNotFoundError):
        details = [{"code": error.code, "config_type": error.config_type, "config_id": error.config_id}]
    return ApplicationError(
        error.message,
        *details,
        type=type(error).__name__,
        non_retryable=error.non_retryable,
    )
