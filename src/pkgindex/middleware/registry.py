"""Default middleware registration."""
from __future__ import annotations

from typing import TYPE_CHECKING

from .base import IndexingMiddleware
from .guards import PackageSizeGuard, UniquePackageMiddleware
from .persistence import IndexMetadataMiddleware, StorePackageMiddleware

if TYPE_CHECKING:
    from pkgindex.providers.base import OverwritePolicy, PackageDatabase, PackageStorage


def default_middlewares(
    packages: "PackageDatabase",
    storage: "PackageStorage",
    policy: "OverwritePolicy",
    max_package_size_bytes: int = 0,
) -> list[IndexingMiddleware]:
    """Build the standard indexing pipeline, in execution order.

    Order matters: an existing package must be deleted before the new one
    is stored, and content must be stored before the record that points
    at it is indexed.
    """
    return [
        PackageSizeGuard(max_package_size_bytes),
        UniquePackageMiddleware(packages, storage, policy),
        StorePackageMiddleware(storage),
        IndexMetadataMiddleware(packages),
    ]
