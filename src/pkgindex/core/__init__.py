"""Indexing service and its wiring."""

from .indexing import PackageIndexingService
from .locks import IdentityLocks

__all__ = [
    "IdentityLocks",
    "PackageIndexingService",
]
