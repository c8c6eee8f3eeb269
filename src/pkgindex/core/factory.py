"""Builds a ready-to-use indexing service from settings"""

import logging

from pkgindex.archive.extractor import PackageExtractor
from pkgindex.config import Settings
from pkgindex.core.indexing import PackageIndexingService
from pkgindex.middleware.registry import default_middlewares
from pkgindex.providers.base import OverwritePolicy
from pkgindex.providers.filesystem import FileSystemPackageStorage
from pkgindex.providers.policy import SettingsOverwritePolicy
from pkgindex.providers.sqlite import SQLitePackageDatabase

logger = logging.getLogger(__name__)


def create_indexing_service(
    settings: Settings,
    policy: OverwritePolicy | None = None,
) -> PackageIndexingService:
    """Wire the local providers and default middleware into a service

    Args:
        settings: Application settings (storage and database paths, limits)
        policy: Overwrite policy; defaults to re-reading settings per upload

    Returns:
        PackageIndexingService with the default pipeline
    """
    packages = SQLitePackageDatabase(settings)
    storage = FileSystemPackageStorage(settings)
    middlewares = default_middlewares(
        packages,
        storage,
        policy or SettingsOverwritePolicy(),
        max_package_size_bytes=settings.max_package_size_bytes,
    )
    logger.debug(
        "Indexing pipeline: %s",
        [m.__class__.__name__ for m in middlewares],
    )
    return PackageIndexingService(
        middlewares,
        extractor=PackageExtractor(temp_dir=settings.temp_dir),
    )
