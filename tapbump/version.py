"""
version.py

Responsibility: the (major, minor, patch) triplet parsed from the formula and
the bump arithmetic applied to it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from tapbump.errors import TapbumpError

BUMP_LEVELS: tuple[str, ...] = ("patch", "minor", "major")

_VERSION_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)$")


class VersionError(TapbumpError, ValueError):
    pass


@dataclass(frozen=True, order=True)
class Version:
    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, text: str) -> "Version":
        m = _VERSION_RE.match(text.strip())
        if m is None:
            raise VersionError(f"Not a MAJOR.MINOR.PATCH version: {text!r}")
        return cls(int(m.group(1)), int(m.group(2)), int(m.group(3)))

    def bump(self, level: str) -> "Version":
        """
        Return the next version for `level`.

        Lower components reset to zero: 0.1.1 -> patch 0.1.2, minor 0.2.0, major 1.0.0.
        """
        if level == "patch":
            return Version(self.major, self.minor, self.patch + 1)
        if level == "minor":
            return Version(self.major, self.minor + 1, 0)
        if level == "major":
            return Version(self.major + 1, 0, 0)
        raise VersionError(f"Unknown bump level: {level!r} (expected one of {', '.join(BUMP_LEVELS)})")

    def tag(self, prefix: str = "v") -> str:
        return f"{prefix}{self}"

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"
