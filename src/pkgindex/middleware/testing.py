from __future__ import annotations

from .base import IndexingDelegate, IndexingMiddleware
from .context import IndexingContext


class RecordingMiddleware(IndexingMiddleware):
    """Records calls for assertion in tests.

    Appends its name to `calls` (shared between instances to check order)
    and the stream positions it saw on entry. Set `stop_with` to a status
    to end the chain instead of continuing; set `consume_streams` to read
    every stream to its end before continuing.
    """

    def __init__(
        self,
        name: str = "RecordingMiddleware",
        calls: list[str] | None = None,
        stop_with: str | None = None,
        consume_streams: bool = False,
        should_raise: Exception | None = None,
    ):
        self.name = name
        self.calls = calls if calls is not None else []
        self.stop_with = stop_with
        self.consume_streams = consume_streams
        self.should_raise = should_raise
        self.call_count = 0
        self.positions: list[list[int]] = []

    async def process(self, context: IndexingContext, next: IndexingDelegate) -> None:
        self.call_count += 1
        self.calls.append(self.name)
        self.positions.append([s.tell() for s in context.streams])

        if self.should_raise:
            raise self.should_raise

        if self.consume_streams:
            for stream in context.streams:
                stream.read()

        if self.stop_with is not None:
            context.status = self.stop_with
            context.messages.append(f"Stopped by {self.name}")
            return

        await next()
