"""Ordering and filtering helpers for price listings."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from elpris.core.models import PriceRecord


def sort_chronologically(records: Iterable[PriceRecord]) -> list[PriceRecord]:
    """Earliest interval first."""
    return sorted(records, key=lambda r: r.time_start)


def sort_by_price(records: Iterable[PriceRecord]) -> list[PriceRecord]:
    """Most expensive first; equal prices stay in chronological order."""
    return sorted(records, key=lambda r: (-r.sek_per_kwh, r.time_start))


def drop_elapsed(records: Iterable[PriceRecord], now: datetime) -> list[PriceRecord]:
    """Keep records whose interval starts at or after ``now``.

    ``now`` must be offset-aware so it compares against the feed timestamps.
    """
    if now.tzinfo is None:
        raise ValueError("now must be timezone-aware")
    return [r for r in records if r.time_start >= now]
