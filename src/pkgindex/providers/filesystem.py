"""Filesystem package storage"""

import asyncio
import logging
import shutil
from pathlib import Path
from typing import BinaryIO

from pkgindex.config import Settings
from pkgindex.models import Package
from pkgindex.providers.base import PackageStorage
from pkgindex.versioning import PackageVersion

logger = logging.getLogger(__name__)


class FileSystemPackageStorage(PackageStorage):
    """Stores package content under a root directory

    Layout (all lower-case):
        {root}/packages/{id}/{version}/{id}.{version}.nupkg
        {root}/packages/{id}/{version}/{id}.nuspec
        {root}/packages/{id}/{version}/readme
        {root}/packages/{id}/{version}/icon
    """

    def __init__(self, settings: Settings):
        self.root = Path(settings.storage_path)
        self.root.mkdir(parents=True, exist_ok=True)
        logger.info(f"Filesystem package storage initialized: {self.root}")

    def package_dir(self, id: str, version: PackageVersion) -> Path:
        return self.root / "packages" / id.lower() / version.normalized.lower()

    def package_path(self, id: str, version: PackageVersion) -> Path:
        lower_id = id.lower()
        return self.package_dir(id, version) / f"{lower_id}.{version.normalized.lower()}.nupkg"

    def nuspec_path(self, id: str, version: PackageVersion) -> Path:
        return self.package_dir(id, version) / f"{id.lower()}.nuspec"

    def readme_path(self, id: str, version: PackageVersion) -> Path:
        return self.package_dir(id, version) / "readme"

    def icon_path(self, id: str, version: PackageVersion) -> Path:
        return self.package_dir(id, version) / "icon"

    @staticmethod
    def _write(path: Path, stream: BinaryIO) -> None:
        with open(path, "wb") as target:
            shutil.copyfileobj(stream, target)

    def _save_sync(
        self,
        package: Package,
        package_stream: BinaryIO,
        nuspec_stream: BinaryIO,
        readme_stream: BinaryIO | None,
        icon_stream: BinaryIO | None,
    ) -> None:
        self.package_dir(package.id, package.version).mkdir(parents=True, exist_ok=True)
        self._write(self.package_path(package.id, package.version), package_stream)
        self._write(self.nuspec_path(package.id, package.version), nuspec_stream)
        if readme_stream is not None:
            self._write(self.readme_path(package.id, package.version), readme_stream)
        if icon_stream is not None:
            self._write(self.icon_path(package.id, package.version), icon_stream)

    async def save(
        self,
        package: Package,
        package_stream: BinaryIO,
        nuspec_stream: BinaryIO,
        readme_stream: BinaryIO | None = None,
        icon_stream: BinaryIO | None = None,
    ) -> None:
        await asyncio.to_thread(
            self._save_sync, package, package_stream, nuspec_stream, readme_stream, icon_stream
        )

    async def delete(self, id: str, version: PackageVersion) -> None:
        path = self.package_dir(id, version)
        if not path.exists():
            return
        await asyncio.to_thread(shutil.rmtree, path)
        logger.info(f"Deleted package content: {id} {version.normalized}")
