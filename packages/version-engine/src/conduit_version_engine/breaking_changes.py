"""Projection of stored breaking-change records into the public read shape."""

from __future__ import annotations

import re
from collections.abc import Sequence
from datetime import date

from conduit_shared.errors import InvalidRequestError
from conduit_shared.version_models import (
    BreakingChange,
    BreakingChangeRead,
    VersionBreakingChanges,
)


_CALENDAR_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def parse_upgrade_deadline(raw: str) -> date:
    """Parse a stored deadline as an ISO-8601 calendar date (YYYY-MM-DD).

    Parsing is locale independent. Week dates (`2023-W01-1`) and the basic
    format (`20230101`) are rejected along with everything else that is not
    YYYY-MM-DD.
    """
    try:
        value = raw.strip()
        if not _CALENDAR_DATE.fullmatch(value):
            raise ValueError(value)
        return date.fromisoformat(value)
    except (AttributeError, ValueError) as e:
        raise InvalidRequestError(f"Unparseable upgrade deadline: {raw!r}") from e


def project_breaking_changes(breaking_changes: Sequence[BreakingChange]) -> VersionBreakingChanges:
    """Map breaking changes 1:1 to their public form and derive the earliest deadline.

    Input order is preserved; the config store already returns changes sorted
    by (version, deadline).
    """
    if not breaking_changes:
        raise InvalidRequestError("Cannot project an empty list of breaking changes")

    upcoming = [
        BreakingChangeRead(
            migration_documentation_url=change.migration_documentation_url,
            version=change.version,
            upgrade_deadline=parse_upgrade_deadline(change.upgrade_deadline),
            message=change.message,
        )
        for change in breaking_changes
    ]

    return VersionBreakingChanges(
        min_upgrade_deadline=min(change.upgrade_deadline for change in upcoming),
        upcoming_breaking_changes=upcoming,
    )
