"""Package archive reader.

A package archive is a ZIP container with exactly one `.nuspec` XML
descriptor at its root. The descriptor may name a readme and an icon file
stored elsewhere in the archive.
"""
from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
import zipfile
from typing import BinaryIO

from pkgindex.errors import InvalidPackageError
from pkgindex.models import Package, PackageDependency
from pkgindex.versioning import PackageVersion

logger = logging.getLogger(__name__)

MAX_ID_LENGTH = 100
_ID_RE = re.compile(r"^\w+(?:[.-]\w+)*$", re.ASCII)


def _local_name(tag: str) -> str:
    """Strip the XML namespace from a tag: '{ns}id' -> 'id'."""
    return tag.rsplit("}", 1)[-1]


def _normalize_entry_path(path: str) -> str:
    path = path.replace("\\", "/").strip()
    while path.startswith("./"):
        path = path[2:]
    return path.lstrip("/").lower()


def _text(element: ET.Element | None) -> str | None:
    if element is None or element.text is None:
        return None
    value = element.text.strip()
    return value or None


class PackageArchiveReader:
    """Reads metadata and entries from a package archive.

    The caller's stream is left open; closing the reader only releases the
    ZIP directory it parsed.

    Usage:
        with PackageArchiveReader(stream) as reader:
            package = reader.get_package_metadata()
            with reader.open_nuspec() as nuspec:
                ...
    """

    def __init__(self, stream: BinaryIO):
        try:
            self._zip = zipfile.ZipFile(stream)
        except (zipfile.BadZipFile, zipfile.LargeZipFile, EOFError, ValueError) as e:
            raise InvalidPackageError(f"Package is not a valid archive: {e}") from e

        self._entries = {
            _normalize_entry_path(info.filename): info
            for info in self._zip.infolist()
            if not info.is_dir()
        }
        self._metadata: ET.Element | None = None
        self._nuspec_name = self._find_nuspec()

    def __enter__(self) -> "PackageArchiveReader":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._zip.close()

    def _find_nuspec(self) -> str:
        # Scan the raw listing; names differing only in case share one key in _entries
        names = [
            _normalize_entry_path(info.filename)
            for info in self._zip.infolist()
            if not info.is_dir()
        ]
        candidates = [name for name in names if "/" not in name and name.endswith(".nuspec")]
        if not candidates:
            raise InvalidPackageError("Package is missing a .nuspec descriptor")
        if len(candidates) > 1:
            raise InvalidPackageError(f"Package has multiple .nuspec descriptors: {sorted(candidates)}")
        return candidates[0]

    def _open_entry(self, path: str) -> BinaryIO:
        info = self._entries.get(_normalize_entry_path(path))
        if info is None:
            raise InvalidPackageError(f"Package entry not found: {path}")
        return self._zip.open(info)

    def _get_metadata_element(self) -> ET.Element:
        if self._metadata is not None:
            return self._metadata

        with self.open_nuspec() as nuspec:
            try:
                root = ET.parse(nuspec).getroot()
            except ET.ParseError as e:
                raise InvalidPackageError(f"Descriptor is not valid XML: {e}") from e

        metadata = next(
            (child for child in root if _local_name(child.tag) == "metadata"),
            None,
        )
        if metadata is None:
            raise InvalidPackageError("Descriptor is missing the <metadata> element")

        self._metadata = metadata
        return metadata

    def _child(self, name: str) -> ET.Element | None:
        for child in self._get_metadata_element():
            if _local_name(child.tag) == name:
                return child
        return None

    def _child_text(self, name: str) -> str | None:
        return _text(self._child(name))

    def get_package_metadata(self) -> Package:
        """Parse the descriptor into a Package record.

        Raises:
            InvalidPackageError: If the id or version is missing or invalid
        """
        metadata = self._get_metadata_element()

        package_id = self._child_text("id")
        if not package_id:
            raise InvalidPackageError("Descriptor is missing the package id")
        if len(package_id) > MAX_ID_LENGTH or not _ID_RE.match(package_id):
            raise InvalidPackageError(f"Invalid package id: {package_id!r}")

        raw_version = self._child_text("version")
        if not raw_version:
            raise InvalidPackageError(f"Descriptor for {package_id} is missing the version")
        try:
            version = PackageVersion.parse(raw_version)
        except ValueError as e:
            raise InvalidPackageError(str(e)) from e

        readme_path = self._child_text("readme")
        icon_path = self._child_text("icon")
        authors = self._child_text("authors") or ""
        tags = self._child_text("tags") or ""
        repository = self._child("repository")

        return Package(
            id=package_id,
            version=version,
            has_readme=readme_path is not None,
            has_embedded_icon=icon_path is not None,
            title=self._child_text("title"),
            authors=[a.strip() for a in authors.split(",") if a.strip()],
            description=self._child_text("description"),
            summary=self._child_text("summary"),
            tags=[t for t in re.split(r"[\s,;]+", tags) if t],
            language=self._child_text("language"),
            project_url=self._child_text("projectUrl"),
            license_url=self._child_text("licenseUrl"),
            icon_url=self._child_text("iconUrl"),
            release_notes=self._child_text("releaseNotes"),
            require_license_acceptance=(self._child_text("requireLicenseAcceptance") or "").lower() == "true",
            min_client_version=metadata.get("minClientVersion"),
            repository_url=repository.get("url") if repository is not None else None,
            repository_type=repository.get("type") if repository is not None else None,
            dependencies=self._get_dependencies(),
            package_types=self._get_package_types(),
            readme_path=readme_path,
            icon_path=icon_path,
        )

    def _get_dependencies(self) -> list[PackageDependency]:
        element = self._child("dependencies")
        if element is None:
            return []

        dependencies: list[PackageDependency] = []
        for child in element:
            name = _local_name(child.tag)
            if name == "dependency" and child.get("id"):
                dependencies.append(PackageDependency(id=child.get("id"), version_range=child.get("version")))
            elif name == "group":
                framework = child.get("targetFramework")
                members = [d for d in child if _local_name(d.tag) == "dependency" and d.get("id")]
                if not members:
                    # An empty group still records framework support
                    dependencies.append(PackageDependency(id="", target_framework=framework))
                for dep in members:
                    dependencies.append(
                        PackageDependency(
                            id=dep.get("id"),
                            version_range=dep.get("version"),
                            target_framework=framework,
                        )
                    )
        return dependencies

    def _get_package_types(self) -> list[str]:
        element = self._child("packageTypes")
        if element is None:
            return []
        return [
            child.get("name")
            for child in element
            if _local_name(child.tag) == "packageType" and child.get("name")
        ]

    def open_nuspec(self) -> BinaryIO:
        """Open the descriptor entry for reading."""
        return self._zip.open(self._entries[self._nuspec_name])

    def open_readme(self) -> BinaryIO:
        """Open the readme named by the descriptor.

        Raises:
            InvalidPackageError: If no readme is declared or the entry is missing
        """
        path = self._child_text("readme")
        if path is None:
            raise InvalidPackageError("Package does not declare a readme")
        return self._open_entry(path)

    def open_icon(self) -> BinaryIO:
        """Open the embedded icon named by the descriptor.

        Raises:
            InvalidPackageError: If no icon is declared or the entry is missing
        """
        path = self._child_text("icon")
        if path is None:
            raise InvalidPackageError("Package does not declare an embedded icon")
        return self._open_entry(path)
