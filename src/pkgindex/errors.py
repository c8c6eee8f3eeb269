"""Exception types raised by pkgindex."""


class PkgIndexError(Exception):
    """Base class for all pkgindex errors."""


class InvalidPackageError(PkgIndexError):
    """Raised when an uploaded archive cannot be read as a package."""


class InvalidVersionError(PkgIndexError, ValueError):
    """Raised when a version string cannot be parsed."""
    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid package version: {value!r}")
