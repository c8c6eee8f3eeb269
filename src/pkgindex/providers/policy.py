"""Overwrite policies"""

from typing import Callable

from pkgindex.config import Settings
from pkgindex.providers.base import OverwritePolicy


class SettingsOverwritePolicy(OverwritePolicy):
    """Reads `allow_package_overwrites` from freshly loaded settings.

    Settings are rebuilt on every call so a changed environment or `.env`
    takes effect on the next upload without a restart.
    """

    def __init__(self, settings_factory: Callable[[], Settings] = Settings):
        self._settings_factory = settings_factory

    def allow_overwrite(self) -> bool:
        return self._settings_factory().allow_package_overwrites


class StaticOverwritePolicy(OverwritePolicy):
    """Fixed policy, for tests and command-line overrides"""

    def __init__(self, allow: bool):
        self.allow = allow

    def allow_overwrite(self) -> bool:
        return self.allow
