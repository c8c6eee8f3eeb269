"""End-to-end tests with the local providers"""

import io

import pytest

from pkgindex.core.factory import create_indexing_service
from pkgindex.middleware.context import IndexingStatus
from pkgindex.providers.policy import StaticOverwritePolicy
from pkgindex.versioning import PackageVersion

pytestmark = pytest.mark.asyncio


async def test_index_then_duplicate(test_settings, nupkg_with_assets):
    service = create_indexing_service(test_settings, policy=StaticOverwritePolicy(False))

    first = await service.index(io.BytesIO(nupkg_with_assets))
    second = await service.index(io.BytesIO(nupkg_with_assets))

    assert first.status == IndexingStatus.SUCCESS
    assert second.status == IndexingStatus.PACKAGE_ALREADY_EXISTS
    assert second.messages == ["Package Foo 1.0.0 already exists"]

    storage_dir = service.middlewares[2]._storage.package_dir("Foo", PackageVersion.parse("1.0.0"))
    assert (storage_dir / "foo.1.0.0.nupkg").read_bytes() == nupkg_with_assets
    assert (storage_dir / "readme").read_bytes() == b"# Foo\n\nReadme text."
    assert (storage_dir / "icon").exists()


async def test_overwrite_replaces_content(test_settings, nupkg_factory):
    service = create_indexing_service(test_settings, policy=StaticOverwritePolicy(True))

    original = nupkg_factory(readme=b"old readme")
    replacement = nupkg_factory()

    assert (await service.index(io.BytesIO(original))).succeeded
    result = await service.index(io.BytesIO(replacement))

    assert result.status == IndexingStatus.SUCCESS
    storage_dir = service.middlewares[2]._storage.package_dir("Foo", PackageVersion.parse("1.0.0"))
    assert (storage_dir / "foo.1.0.0.nupkg").read_bytes() == replacement
    assert not (storage_dir / "readme").exists()


async def test_size_limit_from_settings(test_settings, nupkg_bytes):
    test_settings.max_package_size_bytes = 10
    service = create_indexing_service(test_settings)

    result = await service.index(io.BytesIO(nupkg_bytes))

    assert result.status == "PackageTooLarge"


async def test_invalid_upload(test_settings):
    service = create_indexing_service(test_settings)

    result = await service.index(io.BytesIO(b"nope"))

    assert result.status == IndexingStatus.INVALID_PACKAGE
    assert result.to_dict() == {"status": "InvalidPackage", "messages": [], "package": None}
