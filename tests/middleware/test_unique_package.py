"""Tests for UniquePackageMiddleware."""
import io
from unittest.mock import AsyncMock, Mock

import pytest

from pkgindex.middleware.chain import build_indexer
from pkgindex.middleware.context import IndexingContext, IndexingStatus
from pkgindex.middleware.guards.uniqueness import UniquePackageMiddleware
from pkgindex.middleware.testing import RecordingMiddleware
from pkgindex.models import Package
from pkgindex.providers.policy import StaticOverwritePolicy
from pkgindex.versioning import PackageVersion


@pytest.fixture
def context():
    """Create indexing context for Foo 1.0.0."""
    ctx = IndexingContext(
        package=Package(id="Foo", version=PackageVersion.parse("1.0.0")),
        package_stream=io.BytesIO(b"package"),
        nuspec_stream=io.BytesIO(b"<package />"),
    )
    yield ctx
    ctx.close()


@pytest.mark.asyncio
async def test_new_package_continues(context, mock_packages, mock_storage):
    """Test middleware continues when the package is not recorded."""
    persist = RecordingMiddleware("persist")
    guard = UniquePackageMiddleware(mock_packages, mock_storage, StaticOverwritePolicy(False))

    await build_indexer([guard, persist], context)()

    assert persist.call_count == 1
    assert context.status == IndexingStatus.SUCCESS
    assert context.messages == []
    mock_packages.exists.assert_awaited_once_with("Foo", PackageVersion.parse("1.0.0"))
    mock_packages.hard_delete.assert_not_called()
    mock_storage.delete.assert_not_called()


@pytest.mark.asyncio
async def test_existing_package_rejected_when_overwrites_disabled(context, mock_packages, mock_storage, caplog):
    """Test duplicate is rejected and later stages never run."""
    mock_packages.exists.return_value = True
    persist = RecordingMiddleware("persist")
    guard = UniquePackageMiddleware(mock_packages, mock_storage, StaticOverwritePolicy(False))

    with caplog.at_level("WARNING"):
        await build_indexer([guard, persist], context)()

    assert context.status == IndexingStatus.PACKAGE_ALREADY_EXISTS
    assert context.status == "PackageAlreadyExists"
    assert context.messages == ["Package Foo 1.0.0 already exists"]
    assert persist.call_count == 0
    mock_packages.hard_delete.assert_not_called()
    mock_storage.delete.assert_not_called()
    assert "already exists and overwrites are disabled" in caplog.text


@pytest.mark.asyncio
async def test_existing_package_deleted_when_overwrites_enabled(context, mock_packages, mock_storage):
    """Test both deletes happen once, in order, before the continuation."""
    mock_packages.exists.return_value = True
    events = []
    mock_packages.hard_delete.side_effect = lambda id, version: events.append(("hard_delete", id, version.normalized))
    mock_storage.delete.side_effect = lambda id, version: events.append(("delete", id, version.normalized))

    async def record_continue():
        events.append(("next",))

    guard = UniquePackageMiddleware(mock_packages, mock_storage, StaticOverwritePolicy(True))
    await guard.process(context, record_continue)

    assert events == [
        ("hard_delete", "Foo", "1.0.0"),
        ("delete", "Foo", "1.0.0"),
        ("next",),
    ]
    mock_packages.hard_delete.assert_awaited_once()
    mock_storage.delete.assert_awaited_once()
    assert context.status == IndexingStatus.SUCCESS


@pytest.mark.asyncio
async def test_policy_read_per_invocation(context, mock_packages, mock_storage):
    """Test the overwrite policy is consulted on every call, not cached."""
    mock_packages.exists.return_value = True
    policy = StaticOverwritePolicy(False)
    guard = UniquePackageMiddleware(mock_packages, mock_storage, policy)

    await guard.process(context, AsyncMock())
    assert context.status == IndexingStatus.PACKAGE_ALREADY_EXISTS

    policy.allow = True
    context.status = IndexingStatus.SUCCESS
    proceed = AsyncMock()
    await guard.process(context, proceed)

    proceed.assert_awaited_once()
    mock_storage.delete.assert_awaited_once()


@pytest.mark.asyncio
async def test_policy_not_consulted_for_new_package(context, mock_packages, mock_storage):
    policy = Mock()
    guard = UniquePackageMiddleware(mock_packages, mock_storage, policy)

    await guard.process(context, AsyncMock())

    policy.allow_overwrite.assert_not_called()


@pytest.mark.asyncio
async def test_delete_failure_propagates(context, mock_packages, mock_storage):
    """Test collaborator failures are not caught and the chain stops."""
    mock_packages.exists.return_value = True
    mock_storage.delete.side_effect = OSError("storage unavailable")
    proceed = AsyncMock()
    guard = UniquePackageMiddleware(mock_packages, mock_storage, StaticOverwritePolicy(True))

    with pytest.raises(OSError, match="storage unavailable"):
        await guard.process(context, proceed)

    mock_packages.hard_delete.assert_awaited_once()
    proceed.assert_not_called()


@pytest.mark.asyncio
async def test_exists_failure_propagates(context, mock_packages, mock_storage):
    mock_packages.exists.side_effect = ConnectionError("db down")
    guard = UniquePackageMiddleware(mock_packages, mock_storage, StaticOverwritePolicy(True))

    with pytest.raises(ConnectionError):
        await guard.process(context, AsyncMock())

    mock_packages.hard_delete.assert_not_called()
