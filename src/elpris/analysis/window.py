"""Cheapest contiguous charging window over a circular price sequence."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from decimal import Decimal

from elpris.core.models import ChargingWindow, PriceRecord

logger = logging.getLogger(__name__)


class WindowOptimizer:
    """Finds the contiguous block of ``hours`` records with the lowest total.

    Records are sorted by start time and, when wrapping is allowed, treated
    as circular: a window may run past the last record and continue from the
    first. With only one day of data that continuation reuses the same day's
    early hours as a stand-in for the next day, which need not match real
    next-day prices. Pass ``allow_wrap=False`` to keep every window inside
    the sequence; supply two days of records to get true midnight continuity.

    Ties resolve to the earliest start.

    Usage:
        optimizer = WindowOptimizer(allow_wrap=True)
        block = optimizer.find_cheapest_window(records, hours=4)
    """

    def __init__(self, allow_wrap: bool = True) -> None:
        self._allow_wrap = allow_wrap

    @property
    def allow_wrap(self) -> bool:
        return self._allow_wrap

    def find_cheapest_window(
        self, records: Sequence[PriceRecord], hours: int
    ) -> list[PriceRecord]:
        """Return the ``hours`` records of the cheapest window, in window order.

        Returns an empty list if fewer than ``hours`` records are available.

        Raises:
            ValueError: If ``hours`` is less than 1.
        """
        if hours < 1:
            raise ValueError(f"hours must be >= 1, got {hours}")

        n = len(records)
        if n < hours:
            return []

        ordered = sorted(records, key=lambda r: r.time_start)
        prices = [r.sek_per_kwh for r in ordered]
        last_start = n - 1 if self._allow_wrap else n - hours

        window_sum = sum(prices[:hours], Decimal(0))
        best_sum = window_sum
        best_start = 0
        for start in range(1, last_start + 1):
            # slide by one: drop the record leaving, add the one entering
            window_sum += prices[(start + hours - 1) % n] - prices[start - 1]
            if window_sum < best_sum:
                best_sum = window_sum
                best_start = start

        logger.debug(
            "Cheapest %d-record window starts at index %d (sum %s)",
            hours,
            best_start,
            best_sum,
        )
        return [ordered[(best_start + i) % n] for i in range(hours)]

    def plan(self, records: Sequence[PriceRecord], hours: int) -> ChargingWindow | None:
        """Like find_cheapest_window, but returns totals alongside the records.

        Returns None if fewer than ``hours`` records are available.
        """
        block = self.find_cheapest_window(records, hours)
        if not block:
            return None
        return ChargingWindow(
            records=tuple(block),
            total=sum((r.sek_per_kwh for r in block), Decimal(0)),
        )
