"""Package version parsing and normalization.

Versions follow the NuGet flavour of SemVer 2.0:

    major[.minor[.patch[.revision]]][-prerelease][+metadata]

The normalized form is what the registry uses for lookups and storage paths:
`major.minor.patch`, a fourth part only when it is non-zero, the prerelease
label, and never the build metadata.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from pkgindex.errors import InvalidVersionError

_VERSION_RE = re.compile(
    r"^(?P<numbers>\d+(?:\.\d+){0,3})"
    r"(?:-(?P<release>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+(?P<metadata>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$",
    re.ASCII,
)


@dataclass(frozen=True, eq=False)
class PackageVersion:
    """A parsed package version."""
    major: int
    minor: int = 0
    patch: int = 0
    revision: int = 0
    release: str = ""
    metadata: str = ""
    original: str = ""

    @classmethod
    def parse(cls, value: str) -> "PackageVersion":
        """Parse a version string.

        Raises:
            InvalidVersionError: If the string is not a valid version
        """
        if not isinstance(value, str):
            raise InvalidVersionError(str(value))

        text = value.strip()
        match = _VERSION_RE.match(text)
        if not match:
            raise InvalidVersionError(value)

        numbers = [int(part) for part in match.group("numbers").split(".")]
        numbers += [0] * (4 - len(numbers))

        return cls(
            major=numbers[0],
            minor=numbers[1],
            patch=numbers[2],
            revision=numbers[3],
            release=match.group("release") or "",
            metadata=match.group("metadata") or "",
            original=text,
        )

    @property
    def is_prerelease(self) -> bool:
        return bool(self.release)

    @property
    def normalized(self) -> str:
        version = f"{self.major}.{self.minor}.{self.patch}"
        if self.revision:
            version += f".{self.revision}"
        if self.release:
            version += f"-{self.release}"
        return version

    def _key(self) -> tuple:
        return (self.major, self.minor, self.patch, self.revision, self.release.lower())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PackageVersion):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        return self.normalized
