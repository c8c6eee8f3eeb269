"""Indexing middleware for pkgindex.

An upload passes through an ordered chain of stages. Each stage receives
the shared IndexingContext and a continuation; it either continues the
chain or stops it by setting a terminal status.
"""

from .context import (
    IndexingContext,
    IndexingResult,
    IndexingStatus,
)
from .base import (
    IndexingDelegate,
    IndexingMiddleware,
)
from .chain import build_indexer
from .guards import (
    PACKAGE_TOO_LARGE,
    PackageSizeGuard,
    UniquePackageMiddleware,
)
from .persistence import (
    IndexMetadataMiddleware,
    StorePackageMiddleware,
)
from .registry import default_middlewares

__all__ = [
    # Context
    "IndexingContext",
    "IndexingResult",
    "IndexingStatus",
    # Base classes
    "IndexingDelegate",
    "IndexingMiddleware",
    # Chain builder
    "build_indexer",
    # Stages
    "PACKAGE_TOO_LARGE",
    "PackageSizeGuard",
    "UniquePackageMiddleware",
    "IndexMetadataMiddleware",
    "StorePackageMiddleware",
    "default_middlewares",
]
