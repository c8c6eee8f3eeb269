"""Collaborators used by the indexing pipeline."""

from .base import (
    OverwritePolicy,
    PackageAddResult,
    PackageDatabase,
    PackageStorage,
)
from .filesystem import FileSystemPackageStorage
from .policy import SettingsOverwritePolicy, StaticOverwritePolicy
from .sqlite import SQLitePackageDatabase

__all__ = [
    "OverwritePolicy",
    "PackageAddResult",
    "PackageDatabase",
    "PackageStorage",
    "FileSystemPackageStorage",
    "SettingsOverwritePolicy",
    "StaticOverwritePolicy",
    "SQLitePackageDatabase",
]
