"""Temporary-file stream helpers."""
import asyncio
import logging
import shutil
import tempfile
from typing import BinaryIO

logger = logging.getLogger(__name__)

COPY_BUFFER_SIZE = 81920


def copy_to_temporary_file(
    source: BinaryIO,
    temp_dir: str | None = None,
    chunk_size: int = COPY_BUFFER_SIZE,
) -> BinaryIO:
    """Copy a stream into an anonymous temporary file positioned at 0.

    The temporary file is deleted by the OS when closed. The source
    stream is read to its end but not closed.
    """
    target = tempfile.TemporaryFile(dir=temp_dir)
    try:
        shutil.copyfileobj(source, target, chunk_size)
        target.seek(0)
    except BaseException:
        target.close()
        raise
    return target


async def as_temporary_file_stream(
    source: BinaryIO,
    temp_dir: str | None = None,
) -> BinaryIO:
    """Copy a stream into a temporary file without blocking the event loop."""
    return await asyncio.to_thread(copy_to_temporary_file, source, temp_dir)


def close_quietly(*streams: BinaryIO | None) -> None:
    """Close every non-null stream, continuing past close errors."""
    for stream in streams:
        if stream is None:
            continue
        try:
            stream.close()
        except OSError as e:
            logger.warning(f"Failed to close stream: {e}")
