"""Rate-limited async HTTP client for the elprisetjustnu.se price feed."""

from __future__ import annotations

import logging
from datetime import date
from typing import Protocol, runtime_checkable

import httpx
from aiolimiter import AsyncLimiter

from elpris.core.config import FeedConfig
from elpris.core.exceptions import FeedError
from elpris.core.models import PriceZone

logger = logging.getLogger(__name__)


@runtime_checkable
class PriceFetcher(Protocol):
    """Source of raw day payloads.

    ``fetch_day`` returns the payload text, or None when the source has no
    prices for that day (e.g. tomorrow before publication). Any other failure
    raises FeedError.
    """

    async def fetch_day(self, zone: PriceZone, day: date) -> str | None: ...


class FeedClient:
    """Fetches one zone's prices for one day per request.

    URL layout: ``{base_url}/{YYYY}/{MM-DD}_{ZONE}.json``.

    A 404 means the day is not published yet and is returned as None. Other
    non-200 statuses and transport errors (including timeouts) raise
    FeedError; nothing is retried here.

    Use via ``async with FeedClient(config) as client:``.
    """

    def __init__(
        self,
        config: FeedConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._limiter = AsyncLimiter(max_rate=config.rate_limit, time_period=1.0)
        self._client = http_client or httpx.AsyncClient(
            headers={"User-Agent": config.user_agent},
            timeout=httpx.Timeout(config.request_timeout),
            follow_redirects=True,
        )

    async def __aenter__(self) -> FeedClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client. Called automatically by __aexit__."""
        await self._client.aclose()

    def build_url(self, zone: PriceZone, day: date) -> str:
        """Return the feed URL for a zone and day."""
        return f"{self._config.base_url}/{day:%Y}/{day:%m-%d}_{PriceZone(zone).value}.json"

    async def fetch_day(self, zone: PriceZone, day: date) -> str | None:
        """Download the raw payload for one zone and day.

        Returns:
            Payload text, or None if the feed answers 404.

        Raises:
            FeedError: Transport error, timeout, or unexpected HTTP status.
        """
        url = self.build_url(zone, day)
        context = {"url": url, "zone": str(zone), "day": day.isoformat()}

        try:
            await self._limiter.acquire()
            response = await self._client.get(url)
        except httpx.TimeoutException as e:
            raise FeedError(
                f"Timed out fetching {url}",
                context={**context, "error": str(e)},
            ) from e
        except httpx.RequestError as e:
            raise FeedError(
                f"Request failed for {url}: {e}",
                context={**context, "error": str(e)},
            ) from e

        if response.status_code == 404:
            logger.info("No prices published for %s %s (HTTP 404)", zone, day)
            return None

        if response.status_code != 200:
            raise FeedError(
                f"HTTP {response.status_code} from {url}",
                context={**context, "status_code": response.status_code},
            )

        return response.text
