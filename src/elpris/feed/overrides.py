"""Canned payloads that stand in for the remote feed.

Lets tests and demos pin the payload for a given day. When active, the
repository uses these payloads instead of any cache tier or the network.
"""

from __future__ import annotations

from datetime import date


class PayloadOverrides:
    """Per-day payload substitutions plus an optional fallback payload.

    Usage:
        overrides = PayloadOverrides()
        overrides.set_for_date(date(2025, 9, 4), payload)
        repo = PriceRepository(fetcher, cache, overrides=overrides)
    """

    def __init__(self) -> None:
        self._by_date: dict[date, str] = {}
        self._default: str | None = None
        self._default_set = False

    @property
    def active(self) -> bool:
        """True once any payload (even an empty default) has been set."""
        return self._default_set or bool(self._by_date)

    def set_default(self, payload: str | None) -> None:
        """Use ``payload`` for every day without a dated override.

        Setting None still activates the hook: every day then resolves to
        "no data".
        """
        self._default = payload
        self._default_set = True

    def set_for_date(self, day: date, payload: str | None) -> None:
        """Pin the payload for one day; None removes that day's override."""
        if payload is None:
            self._by_date.pop(day, None)
        else:
            self._by_date[day] = payload

    def payload_for(self, day: date) -> str | None:
        return self._by_date.get(day, self._default)

    def clear(self) -> None:
        """Drop all overrides; the repository goes back to caches and the feed."""
        self._by_date.clear()
        self._default = None
        self._default_set = False
