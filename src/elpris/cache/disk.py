"""Persistent cache tier: protocol, file and SQLite implementations, factory.

The disk tier stores the raw feed payload per CacheKey. It is a best-effort
accelerator: read failures are misses and write failures are logged, so a
broken or missing cache never changes which prices are returned.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

import aiosqlite

from elpris.core.config import CacheConfig
from elpris.core.exceptions import CacheError
from elpris.core.models import CacheKey, DiskCacheBackend

logger = logging.getLogger(__name__)


@runtime_checkable
class DiskCache(Protocol):
    """Keyed storage for raw day payloads."""

    async def read(self, key: CacheKey) -> str | None:
        """Return the stored payload for ``key``, or None."""
        ...

    async def write(self, key: CacheKey, payload: str) -> None:
        """Store ``payload`` under ``key``. Never raises."""
        ...

    async def clear(self) -> int:
        """Remove every stored payload. Returns the number removed."""
        ...


class NullDiskCache:
    """Disk tier that stores nothing. Every read misses."""

    async def read(self, key: CacheKey) -> str | None:
        return None

    async def write(self, key: CacheKey, payload: str) -> None:
        return None

    async def clear(self) -> int:
        return 0


class FileDiskCache:
    """One JSON file per key under ``cache_dir`` (``2025-09-04_SE3.json``).

    Parameters
    ----------
    cache_dir : str | Path
        Directory holding the payload files. ``~`` is expanded. Created on
        first write.
    """

    def __init__(self, cache_dir: str | Path) -> None:
        self._cache_dir = Path(cache_dir).expanduser()

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def _cache_path(self, key: CacheKey) -> Path:
        return self._cache_dir / f"{key}.json"

    async def read(self, key: CacheKey) -> str | None:
        path = self._cache_path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read disk cache file %s: %s", path, e)
            return None

    async def write(self, key: CacheKey, payload: str) -> None:
        path = self._cache_path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(payload, encoding="utf-8")
        except OSError as e:
            logger.warning("Could not write disk cache file %s: %s", path, e)

    async def clear(self) -> int:
        if not self._cache_dir.exists():
            return 0
        removed = 0
        for path in self._cache_dir.glob("*.json"):
            try:
                path.unlink()
                removed += 1
            except OSError as e:
                logger.warning("Could not remove disk cache file %s: %s", path, e)
        return removed


class SqliteDiskCache:
    """SQLite-backed disk tier, one row per key.

    Parameters
    ----------
    db_path : str
        Path to the SQLite database file. ``~`` is expanded.
        Created automatically if it doesn't exist.
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = str(Path(db_path).expanduser())
        self._initialized = False

    async def _ensure_table(self) -> None:
        """Create the payload table if it doesn't exist."""
        if self._initialized:
            return

        Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
        async with aiosqlite.connect(self._db_path) as db:
            await db.execute(
                """CREATE TABLE IF NOT EXISTS feed_payloads (
                    cache_key TEXT PRIMARY KEY,
                    payload TEXT NOT NULL,
                    stored_at TEXT DEFAULT (datetime('now'))
                )"""
            )
            await db.commit()
        self._initialized = True

    async def read(self, key: CacheKey) -> str | None:
        try:
            await self._ensure_table()
            async with aiosqlite.connect(self._db_path) as db:
                cursor = await db.execute(
                    "SELECT payload FROM feed_payloads WHERE cache_key = ?",
                    (str(key),),
                )
                row = await cursor.fetchone()
        except (aiosqlite.Error, OSError) as e:
            logger.warning("Could not read %s from SQLite cache: %s", key, e)
            return None
        return row[0] if row is not None else None

    async def write(self, key: CacheKey, payload: str) -> None:
        try:
            await self._ensure_table()
            async with aiosqlite.connect(self._db_path) as db:
                await db.execute(
                    """INSERT OR REPLACE INTO feed_payloads (cache_key, payload)
                       VALUES (?, ?)""",
                    (str(key), payload),
                )
                await db.commit()
        except (aiosqlite.Error, OSError) as e:
            logger.warning("Could not write %s to SQLite cache: %s", key, e)

    async def clear(self) -> int:
        try:
            await self._ensure_table()
            async with aiosqlite.connect(self._db_path) as db:
                cursor = await db.execute("DELETE FROM feed_payloads")
                await db.commit()
                return cursor.rowcount
        except (aiosqlite.Error, OSError) as e:
            logger.warning("Could not clear SQLite cache: %s", e)
            return 0


def create_disk_cache(config: CacheConfig) -> DiskCache:
    """Create the disk tier selected by configuration."""
    if config.backend == DiskCacheBackend.NONE:
        return NullDiskCache()
    if config.backend == DiskCacheBackend.FILE:
        return FileDiskCache(config.cache_dir)
    if config.backend == DiskCacheBackend.SQLITE:
        return SqliteDiskCache(config.sqlite_path)
    raise CacheError(
        f"Unsupported disk cache backend: {config.backend}",
        context={"backend": str(config.backend)},
    )
