from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, TYPE_CHECKING

if TYPE_CHECKING:
    from .context import IndexingContext

IndexingDelegate = Callable[[], Awaitable[None]]
"""Continuation that runs the rest of the chain."""


class IndexingMiddleware(ABC):
    """Base class for indexing pipeline stages.

    A stage either awaits `next()` to let later stages run, or sets a
    terminal status on the context and returns without calling it, which
    ends the pipeline for this upload.

    Exceptions raised by a stage are not handled by the chain; they reach
    the caller of `PackageIndexingService.index`.
    """

    @abstractmethod
    async def process(self, context: "IndexingContext", next: IndexingDelegate) -> None:
        """Run this stage.

        Args:
            context: Shared indexing context; every stream is at position 0
            next: Continuation for the remaining stages
        """
        pass
