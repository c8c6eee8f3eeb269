"""Base provider interfaces - Abstract base classes for indexing collaborators"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import BinaryIO

from pkgindex.models import Package
from pkgindex.versioning import PackageVersion


class PackageAddResult(str, Enum):
    """Outcome of adding a package record."""
    SUCCESS = "success"
    PACKAGE_ALREADY_EXISTS = "package_already_exists"


class PackageDatabase(ABC):
    """Abstract base class for package metadata stores"""

    @abstractmethod
    async def exists(self, id: str, version: PackageVersion) -> bool:
        """
        Check whether a package record exists

        Args:
            id: Package id (case-insensitive)
            version: Package version

        Returns:
            True if a record for (id, version) exists
        """
        pass

    @abstractmethod
    async def hard_delete(self, id: str, version: PackageVersion) -> bool:
        """
        Permanently remove a package record

        Returns:
            True if a record was removed
        """
        pass

    @abstractmethod
    async def add(self, package: Package) -> PackageAddResult:
        """
        Insert a package record

        Returns:
            PackageAddResult.PACKAGE_ALREADY_EXISTS if (id, version) is taken
        """
        pass

    def get_name(self) -> str:
        """Get provider name"""
        return self.__class__.__name__


class PackageStorage(ABC):
    """Abstract base class for package content stores"""

    @abstractmethod
    async def save(
        self,
        package: Package,
        package_stream: BinaryIO,
        nuspec_stream: BinaryIO,
        readme_stream: BinaryIO | None = None,
        icon_stream: BinaryIO | None = None,
    ) -> None:
        """
        Persist a package's archive and extracted assets

        Streams are read from their current position to the end.
        """
        pass

    @abstractmethod
    async def delete(self, id: str, version: PackageVersion) -> None:
        """
        Remove all content stored for a package. Missing content is not an error.
        """
        pass

    def get_name(self) -> str:
        """Get provider name"""
        return self.__class__.__name__


class OverwritePolicy(ABC):
    """Decides whether an existing package may be replaced"""

    @abstractmethod
    def allow_overwrite(self) -> bool:
        """Return the current policy. Called once per indexing attempt."""
        pass
