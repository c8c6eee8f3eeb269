from __future__ import annotations

import logging
import time
from typing import Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from .base import IndexingDelegate, IndexingMiddleware
    from .context import IndexingContext

logger = logging.getLogger(__name__)


async def _noop() -> None:
    return None


def _wrap(
    middleware: "IndexingMiddleware",
    context: "IndexingContext",
    next: "IndexingDelegate",
) -> "IndexingDelegate":
    name = middleware.__class__.__name__

    async def invoke() -> None:
        # Every stage sees all streams from the start, whatever earlier
        # stages read.
        context.rewind_streams()
        context.raise_if_cancelled()

        start_time = time.monotonic()
        try:
            await middleware.process(context, next)
        finally:
            logger.debug(
                "middleware_executed",
                extra={
                    "middleware": name,
                    "status": str(getattr(context.status, "value", context.status)),
                    "duration_ms": round((time.monotonic() - start_time) * 1000, 2),
                    "package_id": context.package.id,
                },
            )

    return invoke


def build_indexer(
    middlewares: Sequence["IndexingMiddleware"],
    context: "IndexingContext",
) -> "IndexingDelegate":
    """Compose middleware into a single continuation.

    Stages run in the order given. The chain is built back to front: the
    last stage wraps a no-op terminal, and each earlier stage wraps the
    continuation built so far. Durations logged for a stage include the
    stages it called through `next`.

    Args:
        middlewares: Stages in registration order
        context: Context passed to every stage

    Returns:
        Coroutine function that runs the whole chain
    """
    indexer: "IndexingDelegate" = _noop
    for middleware in reversed(middlewares):
        indexer = _wrap(middleware, context, indexer)
    return indexer
