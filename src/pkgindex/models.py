"""Package metadata records."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pkgindex.versioning import PackageVersion


@dataclass(frozen=True)
class PackageDependency:
    """A dependency declared in the package descriptor."""
    id: str
    version_range: str | None = None
    target_framework: str | None = None


@dataclass
class Package:
    """Metadata extracted from an uploaded package.

    Identity is (id, version). `published` is assigned once, when the
    package is extracted; assigning it a second time raises.
    """
    id: str
    version: PackageVersion
    has_readme: bool = False
    has_embedded_icon: bool = False

    # Descriptor metadata
    title: str | None = None
    authors: list[str] = field(default_factory=list)
    description: str | None = None
    summary: str | None = None
    tags: list[str] = field(default_factory=list)
    language: str | None = None
    project_url: str | None = None
    license_url: str | None = None
    icon_url: str | None = None
    release_notes: str | None = None
    require_license_acceptance: bool = False
    min_client_version: str | None = None
    repository_url: str | None = None
    repository_type: str | None = None
    dependencies: list[PackageDependency] = field(default_factory=list)
    package_types: list[str] = field(default_factory=list)

    # Archive-relative asset paths
    readme_path: str | None = None
    icon_path: str | None = None

    _published: datetime | None = field(default=None, init=False, repr=False, compare=False)

    @property
    def normalized_version(self) -> str:
        return self.version.normalized

    @property
    def is_prerelease(self) -> bool:
        return self.version.is_prerelease

    @property
    def published(self) -> datetime | None:
        return self._published

    @published.setter
    def published(self, value: datetime) -> None:
        if self._published is not None:
            raise AttributeError(f"Package {self.id} {self.normalized_version} already has a publish time")
        self._published = value

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dict."""
        return {
            "id": self.id,
            "version": self.normalized_version,
            "original_version": self.version.original,
            "is_prerelease": self.is_prerelease,
            "published": self.published.isoformat() if self.published else None,
            "has_readme": self.has_readme,
            "has_embedded_icon": self.has_embedded_icon,
            "title": self.title,
            "authors": list(self.authors),
            "description": self.description,
            "summary": self.summary,
            "tags": list(self.tags),
            "language": self.language,
            "project_url": self.project_url,
            "license_url": self.license_url,
            "icon_url": self.icon_url,
            "release_notes": self.release_notes,
            "require_license_acceptance": self.require_license_acceptance,
            "min_client_version": self.min_client_version,
            "repository_url": self.repository_url,
            "repository_type": self.repository_type,
            "dependencies": [
                {
                    "id": d.id,
                    "version_range": d.version_range,
                    "target_framework": d.target_framework,
                }
                for d in self.dependencies
            ],
            "package_types": list(self.package_types),
        }
