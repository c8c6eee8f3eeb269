"""Builds an IndexingContext from an uploaded package archive."""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import BinaryIO, Callable

from pkgindex.archive.reader import PackageArchiveReader
from pkgindex.middleware.context import IndexingContext, IndexingStatus
from pkgindex.models import Package
from pkgindex.utils.streams import as_temporary_file_stream, close_quietly

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PackageExtractor:
    """Extracts package metadata and asset streams from an upload.

    Each extracted entry (descriptor, readme, icon) is copied into its own
    temporary file so later stages can re-read it from the start in any
    order. A seekable upload is used in place; anything else (a socket or
    request body) is spooled to a temporary file first and the original
    is closed.
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = utc_now,
        temp_dir: str | None = None,
    ):
        self._clock = clock
        self._temp_dir = temp_dir

    async def extract(
        self,
        package_stream: BinaryIO,
        cancel_event: asyncio.Event | None = None,
    ) -> IndexingContext | None:
        """Extract an indexing context, or None if the upload is not a valid package.

        Never raises for a bad or unreadable archive: the error is logged
        and every stream created so far is closed, along with the upload
        stream. Cancellation still propagates after the same cleanup.
        """
        nuspec_stream: BinaryIO | None = None
        readme_stream: BinaryIO | None = None
        icon_stream: BinaryIO | None = None

        try:
            if not package_stream.seekable():
                upload = package_stream
                package_stream = await as_temporary_file_stream(upload, self._temp_dir)
                upload.close()
                _check_cancelled(cancel_event)

            reader = await asyncio.to_thread(PackageArchiveReader, package_stream)
            with reader:
                package: Package = await asyncio.to_thread(reader.get_package_metadata)
                package.published = self._clock()
                _check_cancelled(cancel_event)

                nuspec_stream = await self._copy_entry(reader.open_nuspec)
                _check_cancelled(cancel_event)

                if package.has_readme:
                    readme_stream = await self._copy_entry(reader.open_readme)
                    _check_cancelled(cancel_event)

                if package.has_embedded_icon:
                    icon_stream = await self._copy_entry(reader.open_icon)
                    _check_cancelled(cancel_event)

            return IndexingContext(
                package=package,
                package_stream=package_stream,
                nuspec_stream=nuspec_stream,
                readme_stream=readme_stream,
                icon_stream=icon_stream,
                messages=[],
                status=IndexingStatus.SUCCESS,
                cancel_event=cancel_event,
            )
        except asyncio.CancelledError:
            close_quietly(package_stream, nuspec_stream, readme_stream, icon_stream)
            raise
        except Exception:
            logger.exception("Uploaded package is invalid")
            close_quietly(package_stream, nuspec_stream, readme_stream, icon_stream)
            return None

    async def _copy_entry(self, open_entry: Callable[[], BinaryIO]) -> BinaryIO:
        entry = await asyncio.to_thread(open_entry)
        try:
            return await as_temporary_file_stream(entry, self._temp_dir)
        finally:
            entry.close()


def _check_cancelled(cancel_event: asyncio.Event | None) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise asyncio.CancelledError("Indexing cancelled")
