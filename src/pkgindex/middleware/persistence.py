"""Stages that persist an accepted package."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pkgindex.middleware.base import IndexingMiddleware, IndexingDelegate
from pkgindex.middleware.context import IndexingStatus
from pkgindex.providers.base import PackageAddResult

if TYPE_CHECKING:
    from pkgindex.middleware.context import IndexingContext
    from pkgindex.providers.base import PackageDatabase, PackageStorage

logger = logging.getLogger(__name__)


class StorePackageMiddleware(IndexingMiddleware):
    """Saves the archive and its extracted assets to package storage."""

    def __init__(self, storage: "PackageStorage"):
        self._storage = storage

    async def process(self, context: "IndexingContext", next: IndexingDelegate) -> None:
        package = context.package
        await self._storage.save(
            package,
            context.package_stream,
            context.nuspec_stream,
            readme_stream=context.readme_stream,
            icon_stream=context.icon_stream,
        )
        logger.info(
            "Stored package %s %s",
            package.id,
            package.normalized_version,
            extra={"storage": self._storage.get_name(), "package_id": package.id}
        )
        await next()


class IndexMetadataMiddleware(IndexingMiddleware):
    """Adds the package record to the metadata database.

    A concurrent upload can win the race between the uniqueness check and
    this insert; that case is reported as PackageAlreadyExists.
    """

    def __init__(self, packages: "PackageDatabase"):
        self._packages = packages

    async def process(self, context: "IndexingContext", next: IndexingDelegate) -> None:
        package = context.package
        result = await self._packages.add(package)

        if result == PackageAddResult.PACKAGE_ALREADY_EXISTS:
            logger.warning(
                "Package %s %s was added by another request",
                package.id,
                package.normalized_version,
            )
            context.status = IndexingStatus.PACKAGE_ALREADY_EXISTS
            context.messages.append(f"Package {package.id} {package.normalized_version} already exists")
            return

        logger.info(
            "Indexed package %s %s",
            package.id,
            package.normalized_version,
            extra={"database": self._packages.get_name(), "package_id": package.id}
        )
        await next()
