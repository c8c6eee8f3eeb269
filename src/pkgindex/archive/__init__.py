"""Package archive reading and extraction."""

from .reader import PackageArchiveReader
from .extractor import PackageExtractor

__all__ = [
    "PackageArchiveReader",
    "PackageExtractor",
]
