"""SQLite package database - Lightweight metadata store using SQLite"""

import asyncio
import json
import logging
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Any

from pkgindex.config import Settings
from pkgindex.models import Package
from pkgindex.providers.base import PackageAddResult, PackageDatabase
from pkgindex.versioning import PackageVersion

logger = logging.getLogger(__name__)


class SQLitePackageDatabase(PackageDatabase):
    """SQLite-based package metadata store

    Lookups are case-insensitive on id and use the normalized version.
    Queries run in a worker thread so the event loop is never blocked.
    """

    def __init__(self, settings: Settings):
        self.db_path = Path(settings.database_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()
        logger.info(f"SQLite package database initialized: {self.db_path}")

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection with row factory"""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self):
        """Initialize database schema"""
        with closing(self._get_connection()) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS packages (
                    id_key TEXT NOT NULL,
                    version_key TEXT NOT NULL,
                    id TEXT NOT NULL,
                    version TEXT NOT NULL,
                    original_version TEXT NOT NULL,
                    is_prerelease INTEGER NOT NULL DEFAULT 0,
                    published TEXT,
                    metadata TEXT DEFAULT '{}',
                    PRIMARY KEY (id_key, version_key)
                )
            """)
            conn.commit()

    @staticmethod
    def _keys(id: str, version: PackageVersion) -> tuple[str, str]:
        return id.lower(), version.normalized.lower()

    def _row_to_dict(self, row: sqlite3.Row) -> dict[str, Any]:
        """Convert a database row to a dictionary"""
        return {
            "id": row["id"],
            "version": row["version"],
            "original_version": row["original_version"],
            "is_prerelease": bool(row["is_prerelease"]),
            "published": row["published"],
            "metadata": json.loads(row["metadata"]) if row["metadata"] else {},
        }

    def _exists_sync(self, id: str, version: PackageVersion) -> bool:
        with closing(self._get_connection()) as conn:
            cursor = conn.execute(
                "SELECT 1 FROM packages WHERE id_key = ? AND version_key = ?",
                self._keys(id, version)
            )
            return cursor.fetchone() is not None

    def _hard_delete_sync(self, id: str, version: PackageVersion) -> bool:
        with closing(self._get_connection()) as conn:
            cursor = conn.execute(
                "DELETE FROM packages WHERE id_key = ? AND version_key = ?",
                self._keys(id, version)
            )
            conn.commit()
            return cursor.rowcount > 0

    def _add_sync(self, package: Package) -> PackageAddResult:
        id_key, version_key = self._keys(package.id, package.version)
        with closing(self._get_connection()) as conn:
            try:
                conn.execute(
                    """
                    INSERT INTO packages (id_key, version_key, id, version, original_version,
                                          is_prerelease, published, metadata)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        id_key,
                        version_key,
                        package.id,
                        package.normalized_version,
                        package.version.original or package.normalized_version,
                        int(package.is_prerelease),
                        package.published.isoformat() if package.published else None,
                        json.dumps(package.to_dict()),
                    )
                )
                conn.commit()
            except sqlite3.IntegrityError:
                return PackageAddResult.PACKAGE_ALREADY_EXISTS
        return PackageAddResult.SUCCESS

    def _get_sync(self, id: str, version: PackageVersion) -> dict[str, Any] | None:
        with closing(self._get_connection()) as conn:
            cursor = conn.execute(
                "SELECT * FROM packages WHERE id_key = ? AND version_key = ?",
                self._keys(id, version)
            )
            row = cursor.fetchone()
            return self._row_to_dict(row) if row else None

    async def exists(self, id: str, version: PackageVersion) -> bool:
        return await asyncio.to_thread(self._exists_sync, id, version)

    async def hard_delete(self, id: str, version: PackageVersion) -> bool:
        deleted = await asyncio.to_thread(self._hard_delete_sync, id, version)
        if deleted:
            logger.info(f"Hard deleted package record: {id} {version.normalized}")
        return deleted

    async def add(self, package: Package) -> PackageAddResult:
        return await asyncio.to_thread(self._add_sync, package)

    async def get(self, id: str, version: PackageVersion) -> dict[str, Any] | None:
        """Get a package record, or None if it doesn't exist"""
        return await asyncio.to_thread(self._get_sync, id, version)
