"""Price repository: the single entry point for obtaining a day's prices.

Resolution order for one (zone, day):

    overrides (if active) -> memory cache -> disk cache -> remote feed -> parse

A successful, non-empty parse of a remote payload populates both cache
tiers. Every path that cannot produce prices ends in an empty list; callers
treat that as a normal outcome.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, timedelta

from elpris.cache.store import CacheStore
from elpris.core.exceptions import FeedError
from elpris.core.models import CacheKey, PriceRecord, PriceZone
from elpris.feed.client import PriceFetcher
from elpris.feed.overrides import PayloadOverrides
from elpris.feed.parser import FeedParser

logger = logging.getLogger(__name__)


class PriceRepository:
    """Resolves a zone's prices for a day through the cache tiers and the feed.

    Parameters
    ----------
    fetcher : PriceFetcher
        Remote source of raw day payloads (normally a FeedClient).
    cache : CacheStore | None
        Shared cache. A fresh, disk-less store is created if None.
    parser : FeedParser | None
        Payload parser. Uses the default parser if None.
    overrides : PayloadOverrides | None
        Canned payloads that, when active, replace caches and feed entirely.
    timeout : float | None
        Default upper bound in seconds for one remote fetch.
    """

    def __init__(
        self,
        fetcher: PriceFetcher,
        cache: CacheStore | None = None,
        parser: FeedParser | None = None,
        overrides: PayloadOverrides | None = None,
        timeout: float | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._parser = parser or FeedParser()
        self._cache = cache if cache is not None else CacheStore(parser=self._parser)
        self._overrides = overrides
        self._timeout = timeout

    @property
    def cache(self) -> CacheStore:
        return self._cache

    async def get_prices(
        self,
        zone: PriceZone | str,
        day: date | str,
        timeout: float | None = None,
    ) -> list[PriceRecord]:
        """Return the zone's price records for one day, in feed order.

        Args:
            zone: Price zone (SE1-SE4).
            day: Calendar day, as a date or an ISO ``YYYY-MM-DD`` string.
            timeout: Seconds allowed for the remote fetch. Falls back to the
                repository default.

        Returns:
            The day's records, or an empty list if none could be obtained.
        """
        try:
            zone = PriceZone(str(zone).upper())
        except ValueError:
            logger.error("Unknown price zone %r", zone)
            return []

        if isinstance(day, str):
            try:
                day = date.fromisoformat(day)
            except ValueError:
                logger.error("Invalid date %r, expected YYYY-MM-DD", day)
                return []

        if self._overrides is not None and self._overrides.active:
            return self._from_override(zone, day)

        key = CacheKey(zone=zone, day=day)
        cached = await self._cache.get(key)
        if cached is not None:
            return cached

        logger.info("Fetching prices for %s from the feed", key)
        payload = await self._fetch(zone, day, timeout if timeout is not None else self._timeout)
        if payload is None:
            return []

        records = self._parser.parse(payload)
        if not records:
            logger.warning("Feed payload for %s contained no usable prices", key)
            return []

        await self._cache.put(key, records, payload=payload)
        return records

    async def get_prices_for_range(
        self,
        zone: PriceZone | str,
        start: date,
        end: date,
        timeout: float | None = None,
    ) -> list[PriceRecord]:
        """Concatenate the prices of every day in ``[start, end]`` chronologically.

        Each day is resolved independently; missing days contribute nothing.
        """
        records: list[PriceRecord] = []
        day = start
        while day <= end:
            records.extend(await self.get_prices(zone, day, timeout=timeout))
            day += timedelta(days=1)
        return records

    async def get_prices_with_next_day(
        self,
        zone: PriceZone | str,
        day: date,
        timeout: float | None = None,
    ) -> list[PriceRecord]:
        """Prices for ``day`` followed by the next day's, when published."""
        return await self.get_prices_for_range(
            zone, day, day + timedelta(days=1), timeout=timeout
        )

    def _from_override(self, zone: PriceZone, day: date) -> list[PriceRecord]:
        payload = self._overrides.payload_for(day)
        logger.info("Using overridden payload for %s %s", day, zone)
        if payload is None or not payload.strip():
            return []
        return self._parser.parse(payload)

    async def _fetch(
        self, zone: PriceZone, day: date, timeout: float | None
    ) -> str | None:
        """Fetch one payload, mapping every failure to None.

        Not-found is reported by the fetcher at INFO; faults are logged here
        at ERROR so they stand apart from ordinary unavailability.
        """
        try:
            async with asyncio.timeout(timeout):
                return await self._fetcher.fetch_day(zone, day)
        except TimeoutError:
            logger.error(
                "Fetching prices for %s %s timed out after %ss", zone, day, timeout
            )
        except (FeedError, OSError) as e:
            logger.error("Fetching prices for %s %s failed: %s", zone, day, e)
        return None
