from .size import PACKAGE_TOO_LARGE, PackageSizeGuard
from .uniqueness import UniquePackageMiddleware

__all__ = [
    "PACKAGE_TOO_LARGE",
    "PackageSizeGuard",
    "UniquePackageMiddleware",
]
