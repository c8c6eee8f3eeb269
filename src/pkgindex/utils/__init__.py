"""Utility modules for pkgindex."""

from .streams import (
    as_temporary_file_stream,
    close_quietly,
    copy_to_temporary_file,
)

__all__ = [
    "as_temporary_file_stream",
    "close_quietly",
    "copy_to_temporary_file",
]
