"""Semantic version parsing for connector image tags and breaking changes.

Connector tags follow `major.minor.patch` with an optional pre-release suffix
(`1.2.0-rc.1`). Pre-release suffixes are ignored when ordering: a breaking change
announced for `2.0.0` applies to a `2.0.0-rc.1` image the same way.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_SEMVER = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)(?:[-+].*)?$")


@dataclass(frozen=True, order=True)
class Version:
    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, raw: str) -> Version:
        """Parse a semantic version string. Raises ValueError if it is not one."""
        match = _SEMVER.match(raw.strip())
        if not match:
            raise ValueError(f"Not a semantic version: {raw!r}")
        return cls(*(int(part) for part in match.groups()))

    @classmethod
    def try_parse(cls, raw: str) -> Version | None:
        """Like parse(), but returns None for tags such as "dev" or "latest"."""
        try:
            return cls.parse(raw)
        except ValueError:
            return None

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"
