"""Two-tier read-through price cache: memory first, then disk."""

from __future__ import annotations

import logging
import threading

from elpris.cache.disk import DiskCache, NullDiskCache
from elpris.core.models import CacheKey, PriceRecord
from elpris.feed.parser import FeedParser

logger = logging.getLogger(__name__)


class CacheStore:
    """Read-through cache keyed by (zone, day).

    Tier 1 is an in-process dict, safe for concurrent readers and writers.
    Tier 2 is a pluggable DiskCache holding raw payloads; a disk hit is
    parsed and promoted to memory so the same key never reads disk twice.

    Prices for a published day never change, so nothing is evicted.

    With ``enabled=False`` the store is a pure pass-through: ``get`` always
    misses and ``put`` does nothing.
    """

    def __init__(
        self,
        disk: DiskCache | None = None,
        parser: FeedParser | None = None,
        enabled: bool = True,
    ) -> None:
        self._disk = disk or NullDiskCache()
        self._parser = parser or FeedParser()
        self._enabled = enabled
        self._memory: dict[CacheKey, list[PriceRecord]] = {}
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self._enabled

    def __contains__(self, key: CacheKey) -> bool:
        with self._lock:
            return key in self._memory

    def __len__(self) -> int:
        with self._lock:
            return len(self._memory)

    async def get(self, key: CacheKey) -> list[PriceRecord] | None:
        """Return cached records for ``key``, or None on a miss in both tiers."""
        if not self._enabled:
            return None

        with self._lock:
            cached = self._memory.get(key)
        if cached is not None:
            logger.debug("Memory cache hit for %s", key)
            return list(cached)

        payload = await self._disk.read(key)
        if payload is None:
            return None

        records = self._parser.parse(payload)
        if not records:
            logger.warning("Ignoring unusable disk cache entry for %s", key)
            return None

        logger.debug("Disk cache hit for %s", key)
        return list(self._remember(key, records))

    async def put(
        self,
        key: CacheKey,
        records: list[PriceRecord],
        payload: str | None = None,
    ) -> None:
        """Store ``records`` in memory and, if given, the raw ``payload`` on disk."""
        if not self._enabled or not records:
            return

        self._remember(key, records)
        if payload is not None:
            await self._disk.write(key, payload)

    async def clear(self, disk: bool = False) -> int:
        """Empty the memory tier, and optionally the disk tier.

        Returns the number of disk entries removed.
        """
        with self._lock:
            self._memory.clear()
        if disk:
            return await self._disk.clear()
        return 0

    def _remember(self, key: CacheKey, records: list[PriceRecord]) -> list[PriceRecord]:
        # insert-if-absent: the first writer for a key wins
        with self._lock:
            return self._memory.setdefault(key, list(records))
