"""Pytest fixtures and configuration for pkgindex tests"""

import io
import os
import zipfile
from datetime import datetime, timezone
from unittest.mock import AsyncMock, Mock

import pytest

# Set up test environment variables before importing modules
os.environ.setdefault("ALLOW_PACKAGE_OVERWRITES", "false")

from pkgindex.providers.base import PackageAddResult  # noqa: E402

NUSPEC_NS = "http://schemas.microsoft.com/packaging/2013/05/nuspec.xsd"


def make_nuspec(
    id: str = "Foo",
    version: str = "1.0.0",
    readme: str | None = None,
    icon: str | None = None,
    extra: str = "",
) -> str:
    """Render a minimal nuspec document."""
    parts = [
        f"<id>{id}</id>" if id is not None else "",
        f"<version>{version}</version>" if version is not None else "",
        "<authors>Jane Doe, John Roe</authors>",
        "<description>A test package.</description>",
        f"<readme>{readme}</readme>" if readme else "",
        f"<icon>{icon}</icon>" if icon else "",
        extra,
    ]
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        f'<package xmlns="{NUSPEC_NS}">\n'
        f'  <metadata>{"".join(parts)}</metadata>\n'
        '</package>\n'
    )


def make_nupkg(
    id: str = "Foo",
    version: str = "1.0.0",
    readme: bytes | None = None,
    icon: bytes | None = None,
    nuspec: str | None = None,
    files: dict[str, bytes] | None = None,
) -> bytes:
    """Build a package archive in memory.

    readme and icon, when given, are stored as README.md and images/icon.png
    and declared in the generated descriptor.
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        if nuspec is None:
            nuspec = make_nuspec(
                id=id,
                version=version,
                readme="README.md" if readme is not None else None,
                icon="images\\icon.png" if icon is not None else None,
            )
        archive.writestr(f"{id}.nuspec", nuspec)
        archive.writestr("lib/net8.0/Foo.dll", b"\x4d\x5a fake assembly")
        if readme is not None:
            archive.writestr("README.md", readme)
        if icon is not None:
            archive.writestr("images/icon.png", icon)
        for name, content in (files or {}).items():
            archive.writestr(name, content)
    return buffer.getvalue()


@pytest.fixture
def nupkg_bytes():
    """Foo 1.0.0 with no readme or icon"""
    return make_nupkg()


@pytest.fixture
def nupkg_with_assets():
    """Foo 1.0.0 with both a readme and an embedded icon"""
    return make_nupkg(readme=b"# Foo\n\nReadme text.", icon=b"\x89PNG\r\n\x1a\nicon-bytes")


@pytest.fixture
def fixed_clock():
    now = datetime(2026, 1, 11, 12, 0, tzinfo=timezone.utc)
    return lambda: now


@pytest.fixture
def mock_packages():
    """Mock package database: nothing exists yet"""
    packages = Mock()
    packages.exists = AsyncMock(return_value=False)
    packages.hard_delete = AsyncMock(return_value=True)
    packages.add = AsyncMock(return_value=PackageAddResult.SUCCESS)
    packages.get_name.return_value = "MockPackageDatabase"
    return packages


@pytest.fixture
def mock_storage():
    """Mock package storage"""
    storage = Mock()
    storage.save = AsyncMock()
    storage.delete = AsyncMock()
    storage.get_name.return_value = "MockPackageStorage"
    return storage


@pytest.fixture
def test_settings(tmp_path):
    """Settings pointing at a temporary directory"""
    from pkgindex.config import Settings

    return Settings(
        storage_path=str(tmp_path / "packages"),
        database_path=str(tmp_path / "packages.db"),
        allow_package_overwrites=False,
    )


@pytest.fixture
def nupkg_factory():
    """Build package archives with custom contents"""
    return make_nupkg


@pytest.fixture
def nuspec_factory():
    """Render custom descriptors"""
    return make_nuspec


class NonSeekableStream(io.RawIOBase):
    """Forward-only byte stream, like a socket or request body"""

    def __init__(self, data: bytes):
        self._buffer = io.BytesIO(data)

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        return self._buffer.readinto(b)


@pytest.fixture
def non_seekable():
    """Wrap bytes in a stream that cannot seek"""
    return NonSeekableStream
