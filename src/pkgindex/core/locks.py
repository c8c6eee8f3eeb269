"""Per-identity locks for indexing."""
from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator


class IdentityLocks:
    """Async locks keyed by package identity.

    Holding the lock for (id, version) across a whole pipeline run keeps
    two overwrites of the same package from interleaving their delete and
    re-insert steps. Only coordinates tasks within one process and one
    event loop. Locks are dropped once no task holds or waits on them.
    """

    def __init__(self):
        self._locks: dict[tuple[str, str], asyncio.Lock] = {}
        self._users: dict[tuple[str, str], int] = {}

    @staticmethod
    def key(id: str, normalized_version: str) -> tuple[str, str]:
        return id.lower(), normalized_version.lower()

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, id: str, normalized_version: str) -> AsyncIterator[None]:
        key = self.key(id, normalized_version)
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                del self._locks[key]
