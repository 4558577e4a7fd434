"""Feature flags: typed flag definitions, evaluation contexts, and a file-backed client.

Flags are evaluated against a context (a workspace, a connection, a connector
definition, or several of them at once via Multi). Resolution order for a flag:

  1. The flag's environment override, if it declares one and it is set
     (e.g. AUTO_DETECT_SCHEMA=false switches schema detection off globally).
  2. The first context rule in the flag file that matches the context.
  3. The flag file's top-level `serve` for that flag.
  4. The flag's built-in default.

Flag file format (JSON, path from CONDUIT_FEATURE_FLAG_PATH):

    {
      "flags": [
        {
          "name": "refresh-schema-period",
          "serve": 24,
          "context": [
            {"type": "workspace", "include": ["<workspace-uuid>"], "serve": 6}
          ]
        }
      ]
    }

Callers depend on the FeatureFlagClient protocol, so a hosted backend can be
swapped in without touching activity code.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, ClassVar, Protocol, runtime_checkable
from uuid import UUID

logger = logging.getLogger(__name__)

# ============================================================================
# Flag definitions
# ============================================================================


@dataclass(frozen=True)
class Flag:
    key: str
    default: bool | int | str
    env_var: str | None = None


AUTO_DETECT_SCHEMA = Flag("auto-detect-schema", True, env_var="AUTO_DETECT_SCHEMA")
REFRESH_SCHEMA_PERIOD = Flag("refresh-schema-period", 24)
SHOULD_RUN_REFRESH_SCHEMA = Flag("should-run-refresh-schema", True)
AUTO_PROPAGATE_SCHEMA = Flag("auto-propagate-schema", False)
CONNECTOR_VERSION_OVERRIDE = Flag("connector-version-override", "")


# ============================================================================
# Evaluation contexts
# ============================================================================


@dataclass(frozen=True)
class Context:
    kind: ClassVar[str] = "global"
    key: str

    def __init__(self, key: UUID | str) -> None:
        object.__setattr__(self, "key", str(key))


class Workspace(Context):
    kind = "workspace"


class Connection(Context):
    kind = "connection"


class Source(Context):
    kind = "source"


class Destination(Context):
    kind = "destination"


class SourceDefinition(Context):
    kind = "source-definition"


class DestinationDefinition(Context):
    kind = "destination-definition"


@dataclass(frozen=True)
class Multi:
    """Several contexts evaluated together; a rule matching any of them applies."""

    contexts: tuple[Context, ...]

    def __init__(self, contexts: list[Context] | tuple[Context, ...]) -> None:
        object.__setattr__(self, "contexts", tuple(contexts))


FlagContext = Context | Multi | None


def _expand(context: FlagContext) -> tuple[Context, ...]:
    if context is None:
        return ()
    if isinstance(context, Multi):
        return context.contexts
    return (context,)


# ============================================================================
# Client protocol
# ============================================================================


@runtime_checkable
class FeatureFlagClient(Protocol):
    def bool_variation(self, flag: Flag, context: FlagContext = None) -> bool: ...

    def int_variation(self, flag: Flag, context: FlagContext = None) -> int: ...

    def string_variation(self, flag: Flag, context: FlagContext = None) -> str: ...


_TRUTHY = ("1", "true", "yes", "on")


class ConfigFileFeatureFlagClient:
    """Evaluates flags from an optional JSON file plus environment overrides.

    With no file every flag serves its default (or its env override), which is
    the local-dev behaviour.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self._flags: dict[str, dict[str, Any]] = {}
        if path:
            raw = json.loads(Path(path).read_text())
            self._flags = {entry["name"]: entry for entry in raw.get("flags", [])}
            logger.info(f"Loaded {len(self._flags)} feature flag(s) from {path}")

    def _evaluate(self, flag: Flag, context: FlagContext) -> Any:
        if flag.env_var:
            env_value = os.environ.get(flag.env_var)
            if env_value is not None:
                return env_value

        entry = self._flags.get(flag.key)
        if entry is None:
            return flag.default

        for rule in entry.get("context", []):
            include = {str(i) for i in rule.get("include", [])}
            for ctx in _expand(context):
                if ctx.kind == rule.get("type") and ctx.key in include:
                    return rule["serve"]

        return entry.get("serve", flag.default)

    def bool_variation(self, flag: Flag, context: FlagContext = None) -> bool:
        value = self._evaluate(flag, context)
        if isinstance(value, str):
            return value.strip().lower() in _TRUTHY
        return bool(value)

    def int_variation(self, flag: Flag, context: FlagContext = None) -> int:
        return int(self._evaluate(flag, context))

    def string_variation(self, flag: Flag, context: FlagContext = None) -> str:
        value = self._evaluate(flag, context)
        return "" if value is None else str(value)


class MockFeatureFlagClient:
    """In-memory client for tests: seed values by flag key, inspect `calls` afterwards.

    Unseeded flags serve their default. Every evaluation is recorded as a
    (flag key, context) pair.
    """

    def __init__(self, values: dict[str, Any] | None = None) -> None:
        self.values: dict[str, Any] = dict(values or {})
        self.calls: list[tuple[str, FlagContext]] = []

    def _get(self, flag: Flag, context: FlagContext) -> Any:
        self.calls.append((flag.key, context))
        return self.values.get(flag.key, flag.default)

    def bool_variation(self, flag: Flag, context: FlagContext = None) -> bool:
        return bool(self._get(flag, context))

    def int_variation(self, flag: Flag, context: FlagContext = None) -> int:
        return int(self._get(flag, context))

    def string_variation(self, flag: Flag, context: FlagContext = None) -> str:
        return str(self._get(flag, context))

    def keys(self) -> list[str]:
        """Keys of the flags evaluated so far, in order."""
        return [key for key, _ in self.calls]


# ============================================================================
# Singleton management
# ============================================================================

_client: FeatureFlagClient | None = None


def get_feature_flag_client() -> FeatureFlagClient:
    """Return a lazily-initialized flag client configured from the environment."""
    global _client
    if _client is None:
        _client = ConfigFileFeatureFlagClient(os.environ.get("CONDUIT_FEATURE_FLAG_PATH"))
    return _client


def set_feature_flag_client(client: FeatureFlagClient) -> None:
    """Inject a client — used in tests."""
    global _client
    _client = client


def reset_feature_flag_client() -> None:
    global _client
    _client = None
