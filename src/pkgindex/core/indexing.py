"""Package indexing entry point"""

import asyncio
import logging
from typing import BinaryIO, Sequence

from pkgindex.archive.extractor import PackageExtractor
from pkgindex.core.locks import IdentityLocks
from pkgindex.middleware.base import IndexingMiddleware
from pkgindex.middleware.chain import build_indexer
from pkgindex.middleware.context import IndexingResult, IndexingStatus

logger = logging.getLogger(__name__)


class PackageIndexingService:
    """Indexes uploaded packages through a middleware pipeline.

    Args:
        middlewares: Stages in execution order, fixed at construction
        extractor: Builds the indexing context from an upload
        locks: Per-identity locks shared by every call on this service
    """

    def __init__(
        self,
        middlewares: Sequence[IndexingMiddleware],
        extractor: PackageExtractor | None = None,
        locks: IdentityLocks | None = None,
    ):
        self.middlewares = list(middlewares)
        self.extractor = extractor or PackageExtractor()
        self.locks = locks or IdentityLocks()

    async def index(
        self,
        package_stream: BinaryIO,
        cancel_event: asyncio.Event | None = None,
    ) -> IndexingResult:
        """Index an uploaded package.

        Args:
            package_stream: Seekable stream holding the package archive. The
                service takes ownership and closes it before returning.
            cancel_event: Optional event; when set, the next stage boundary
                or collaborator call raises asyncio.CancelledError

        Returns:
            IndexingResult. Status is InvalidPackage when the archive cannot
            be read, Success when no stage objected, or whatever terminal
            status the stopping stage set.

        Raises:
            Exception: Any collaborator failure raised inside a stage
        """
        context = await self.extractor.extract(package_stream, cancel_event)
        if context is None:
            return IndexingResult(status=IndexingStatus.INVALID_PACKAGE, messages=[])

        with context:
            package = context.package
            async with self.locks.hold(package.id, package.normalized_version):
                indexer = build_indexer(self.middlewares, context)
                await indexer()

            logger.info(
                "Indexing finished for %s %s",
                package.id,
                package.normalized_version,
                extra={
                    "package_id": package.id,
                    "package_version": package.normalized_version,
                    "status": str(getattr(context.status, "value", context.status)),
                }
            )
            return context.to_result()
