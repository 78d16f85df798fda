"""Descriptive price statistics grouped by hour of day."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable
from decimal import Decimal

from elpris.core.models import HourlyPrice, PriceRecord, PriceSummary

logger = logging.getLogger(__name__)


class StatisticsEngine:
    """Summarizes a price sequence per hour of day.

    Records are grouped by the local hour their interval starts in. Several
    records in one hour (quarter-hour feeds, or the same hour on two merged
    days) are averaged first, and those hourly averages are what min and max
    compare. Hours are visited in ascending order and only a strictly better
    average replaces the current one, so ties go to the earliest hour.

    The mean is taken over the individual records, not over the hourly
    averages.

    Usage:
        summary = StatisticsEngine().summarize(records)
        summary.min_hourly.hour, summary.min_hourly.price, summary.mean
    """

    def hourly_averages(self, records: Iterable[PriceRecord]) -> dict[int, Decimal]:
        """Average SEK/kWh per hour of day, ordered by hour."""
        groups: dict[int, list[Decimal]] = defaultdict(list)
        for record in records:
            groups[record.hour].append(record.sek_per_kwh)
        return {
            hour: sum(prices, Decimal(0)) / len(prices)
            for hour, prices in sorted(groups.items())
        }

    def summarize(self, records: Iterable[PriceRecord]) -> PriceSummary | None:
        """Compute hourly min/max and the record-weighted mean.

        Returns None for an empty sequence.
        """
        records = list(records)
        if not records:
            return None

        averages = self.hourly_averages(records)

        min_hour = max_hour = next(iter(averages))
        for hour, price in averages.items():
            if price < averages[min_hour]:
                min_hour = hour
            if price > averages[max_hour]:
                max_hour = hour

        total = sum((r.sek_per_kwh for r in records), Decimal(0))
        mean = total / len(records)

        logger.debug(
            "Summarized %d records over %d hours", len(records), len(averages)
        )
        return PriceSummary(
            min_hourly=HourlyPrice(hour=min_hour, price=averages[min_hour]),
            max_hourly=HourlyPrice(hour=max_hour, price=averages[max_hour]),
            mean=mean,
            record_count=len(records),
        )
