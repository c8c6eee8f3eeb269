from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import BinaryIO

from pkgindex.models import Package
from pkgindex.utils.streams import close_quietly


class IndexingStatus(str, Enum):
    """Known indexing outcomes.

    The set is open: `IndexingContext.status` is a plain string, so a stage
    may report its own terminal value (e.g. "PackageTooLarge"). Members
    compare equal to their string values.
    """
    SUCCESS = "Success"
    INVALID_PACKAGE = "InvalidPackage"
    PACKAGE_ALREADY_EXISTS = "PackageAlreadyExists"


@dataclass
class IndexingResult:
    """Outcome of one indexing attempt."""
    status: str
    messages: list[str] = field(default_factory=list)
    package: Package | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == IndexingStatus.SUCCESS

    def to_dict(self) -> dict:
        return {
            "status": str(getattr(self.status, "value", self.status)),
            "messages": list(self.messages),
            "package": self.package.to_dict() if self.package else None,
        }


@dataclass
class IndexingContext:
    """Mutable state that flows through the indexing pipeline.

    The context owns every stream it holds. All of them are backed by
    temporary files except `package_stream`, which is the upload itself;
    all are seekable and get rewound before each stage runs.
    """
    package: Package
    package_stream: BinaryIO
    nuspec_stream: BinaryIO
    readme_stream: BinaryIO | None = None
    icon_stream: BinaryIO | None = None
    messages: list[str] = field(default_factory=list)
    status: str = IndexingStatus.SUCCESS
    cancel_event: asyncio.Event | None = None

    _closed: bool = field(default=False, init=False, repr=False)

    @property
    def streams(self) -> list[BinaryIO]:
        """Every non-null stream owned by the context."""
        return [
            s for s in (self.package_stream, self.nuspec_stream, self.readme_stream, self.icon_stream)
            if s is not None
        ]

    @property
    def closed(self) -> bool:
        return self._closed

    def rewind_streams(self) -> None:
        for stream in self.streams:
            stream.seek(0)

    def raise_if_cancelled(self) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise asyncio.CancelledError("Indexing cancelled")

    def close(self) -> None:
        """Release all owned streams. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        close_quietly(self.package_stream, self.nuspec_stream, self.readme_stream, self.icon_stream)

    def __enter__(self) -> "IndexingContext":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def to_result(self) -> IndexingResult:
        return IndexingResult(status=self.status, messages=list(self.messages), package=self.package)
