"""Upload size guard."""
from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from pkgindex.middleware.base import IndexingMiddleware, IndexingDelegate

if TYPE_CHECKING:
    from pkgindex.middleware.context import IndexingContext

logger = logging.getLogger(__name__)

PACKAGE_TOO_LARGE = "PackageTooLarge"


class PackageSizeGuard(IndexingMiddleware):
    """Rejects archives larger than a byte limit.

    Reports the status "PackageTooLarge", which is not one of the built-in
    IndexingStatus values. A limit of 0 disables the check.
    """

    def __init__(self, max_bytes: int):
        self.max_bytes = max_bytes

    async def process(self, context: "IndexingContext", next: IndexingDelegate) -> None:
        if self.max_bytes:
            size = context.package_stream.seek(0, os.SEEK_END)
            context.package_stream.seek(0)

            if size > self.max_bytes:
                logger.warning(
                    "Rejecting package %s %s: %d bytes exceeds limit of %d",
                    context.package.id,
                    context.package.normalized_version,
                    size,
                    self.max_bytes,
                    extra={"guard": "PackageSizeGuard", "action": "reject", "size_bytes": size}
                )
                context.status = PACKAGE_TOO_LARGE
                context.messages.append(
                    f"Package is {size} bytes, the maximum allowed is {self.max_bytes} bytes"
                )
                return

        await next()
