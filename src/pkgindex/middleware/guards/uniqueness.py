"""Uniqueness guard for duplicate package versions."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pkgindex.middleware.base import IndexingMiddleware, IndexingDelegate
from pkgindex.middleware.context import IndexingStatus

if TYPE_CHECKING:
    from pkgindex.middleware.context import IndexingContext
    from pkgindex.providers.base import OverwritePolicy, PackageDatabase, PackageStorage

logger = logging.getLogger(__name__)


class UniquePackageMiddleware(IndexingMiddleware):
    """Validates that the new package doesn't already exist.

    When the same id and version is already recorded:
    - overwrites disabled: status becomes PackageAlreadyExists and the
      pipeline stops here
    - overwrites enabled: the existing record and its stored content are
      deleted, then later stages re-persist the upload

    The delete-then-continue sequence is not atomic. A request that fails
    or is cancelled after the delete leaves no package behind and can be
    retried by uploading again.
    """

    def __init__(
        self,
        packages: "PackageDatabase",
        storage: "PackageStorage",
        policy: "OverwritePolicy",
    ):
        self._packages = packages
        self._storage = storage
        self._policy = policy

    async def process(self, context: "IndexingContext", next: IndexingDelegate) -> None:
        package = context.package

        if await self._packages.exists(package.id, package.version):
            if not self._policy.allow_overwrite():
                logger.warning(
                    "Failed to index package %s %s as it already exists and overwrites are disabled.",
                    package.id,
                    package.normalized_version,
                    extra={
                        "guard": "UniquePackageMiddleware",
                        "action": "reject",
                        "package_id": package.id,
                        "package_version": package.normalized_version,
                    }
                )
                context.status = IndexingStatus.PACKAGE_ALREADY_EXISTS
                context.messages.append(
                    f"Package {package.id} {package.normalized_version} already exists"
                )
                return

            logger.info(
                "Package %s %s already exists. Deleting the package...",
                package.id,
                package.normalized_version,
                extra={
                    "guard": "UniquePackageMiddleware",
                    "action": "overwrite",
                    "package_id": package.id,
                    "package_version": package.normalized_version,
                }
            )

            await self._packages.hard_delete(package.id, package.version)
            context.raise_if_cancelled()
            await self._storage.delete(package.id, package.version)

        await next()
