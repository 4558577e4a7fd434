"""Redis key patterns for Config Access.

All keys use the `cfg:` prefix. JSON strings for objects, one hash per definition for
breaking changes. Key functions are pure: they compute key names and never touch Redis.

If the store moved to PostgreSQL these would become table names; the naming
reflects domain concepts (source, definition, version), not Redis types.
"""

from uuid import UUID

# ============================================================================
# Actor keys
# ============================================================================


def source_key(source_id: UUID) -> str:
    """Source actor record."""
    return f"cfg:source:{source_id}"


def destination_key(destination_id: UUID) -> str:
    """Destination actor record."""
    return f"cfg:destination:{destination_id}"


# ============================================================================
# Definition keys
# ============================================================================


def source_definition_key(definition_id: UUID) -> str:
    return f"cfg:definition:source:{definition_id}"


def destination_definition_key(definition_id: UUID) -> str:
    return f"cfg:definition:destination:{definition_id}"


# ============================================================================
# Version keys
# ============================================================================


def version_key(version_id: UUID) -> str:
    """Immutable actor definition version record."""
    return f"cfg:adv:{version_id}"


def breaking_changes_key(definition_id: UUID) -> str:
    """Hash: semantic version → JSON breaking change for a definition."""
    return f"cfg:breaking:{definition_id}"
