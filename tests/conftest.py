"""Shared pytest fixtures for elpris."""

from __future__ import annotations

import json
from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from elpris.core.models import PriceRecord, PriceZone

CEST = datetime.fromisoformat("2025-09-04T00:00:00+02:00").tzinfo

# One real day from the feed (SE3, 2025-09-04), as served.
SE3_2025_09_04 = (
    '[{"SEK_per_kWh":0.12229,"EUR_per_kWh":0.01112,"EXR":10.997148,'
    '"time_start":"2025-09-04T00:00:00+02:00","time_end":"2025-09-04T01:00:00+02:00"},'
    '{"SEK_per_kWh":0.09886,"EUR_per_kWh":0.00899,"EXR":10.997148,'
    '"time_start":"2025-09-04T01:00:00+02:00","time_end":"2025-09-04T02:00:00+02:00"},'
    '{"SEK_per_kWh":0.09095,"EUR_per_kWh":0.00827,"EXR":10.997148,'
    '"time_start":"2025-09-04T02:00:00+02:00","time_end":"2025-09-04T03:00:00+02:00"},'
    '{"SEK_per_kWh":0.04201,"EUR_per_kWh":0.00382,"EXR":10.997148,'
    '"time_start":"2025-09-04T03:00:00+02:00","time_end":"2025-09-04T04:00:00+02:00"},'
    '{"SEK_per_kWh":0.04146,"EUR_per_kWh":0.00377,"EXR":10.997148,'
    '"time_start":"2025-09-04T04:00:00+02:00","time_end":"2025-09-04T05:00:00+02:00"},'
    '{"SEK_per_kWh":0.04465,"EUR_per_kWh":0.00406,"EXR":10.997148,'
    '"time_start":"2025-09-04T05:00:00+02:00","time_end":"2025-09-04T06:00:00+02:00"},'
    '{"SEK_per_kWh":0.32991,"EUR_per_kWh":0.03,"EXR":10.997148,'
    '"time_start":"2025-09-04T06:00:00+02:00","time_end":"2025-09-04T07:00:00+02:00"},'
    '{"SEK_per_kWh":0.47123,"EUR_per_kWh":0.04285,"EXR":10.997148,'
    '"time_start":"2025-09-04T07:00:00+02:00","time_end":"2025-09-04T08:00:00+02:00"},'
    '{"SEK_per_kWh":0.68182,"EUR_per_kWh":0.062,"EXR":10.997148,'
    '"time_start":"2025-09-04T08:00:00+02:00","time_end":"2025-09-04T09:00:00+02:00"},'
    '{"SEK_per_kWh":0.4125,"EUR_per_kWh":0.03751,"EXR":10.997148,'
    '"time_start":"2025-09-04T09:00:00+02:00","time_end":"2025-09-04T10:00:00+02:00"},'
    '{"SEK_per_kWh":0.29571,"EUR_per_kWh":0.02689,"EXR":10.997148,'
    '"time_start":"2025-09-04T10:00:00+02:00","time_end":"2025-09-04T11:00:00+02:00"},'
    '{"SEK_per_kWh":0.06136,"EUR_per_kWh":0.00558,"EXR":10.997148,'
    '"time_start":"2025-09-04T11:00:00+02:00","time_end":"2025-09-04T12:00:00+02:00"},'
    '{"SEK_per_kWh":0.03662,"EUR_per_kWh":0.00333,"EXR":10.997148,'
    '"time_start":"2025-09-04T12:00:00+02:00","time_end":"2025-09-04T13:00:00+02:00"},'
    '{"SEK_per_kWh":0.0375,"EUR_per_kWh":0.00341,"EXR":10.997148,'
    '"time_start":"2025-09-04T13:00:00+02:00","time_end":"2025-09-04T14:00:00+02:00"},'
    '{"SEK_per_kWh":0.26822,"EUR_per_kWh":0.02439,"EXR":10.997148,'
    '"time_start":"2025-09-04T14:00:00+02:00","time_end":"2025-09-04T15:00:00+02:00"},'
    '{"SEK_per_kWh":0.30429,"EUR_per_kWh":0.02767,"EXR":10.997148,'
    '"time_start":"2025-09-04T15:00:00+02:00","time_end":"2025-09-04T16:00:00+02:00"},'
    '{"SEK_per_kWh":0.36675,"EUR_per_kWh":0.03335,"EXR":10.997148,'
    '"time_start":"2025-09-04T16:00:00+02:00","time_end":"2025-09-04T17:00:00+02:00"},'
    '{"SEK_per_kWh":0.58296,"EUR_per_kWh":0.05301,"EXR":10.997148,'
    '"time_start":"2025-09-04T17:00:00+02:00","time_end":"2025-09-04T18:00:00+02:00"},'
    '{"SEK_per_kWh":0.92145,"EUR_per_kWh":0.08379,"EXR":10.997148,'
    '"time_start":"2025-09-04T18:00:00+02:00","time_end":"2025-09-04T19:00:00+02:00"},'
    '{"SEK_per_kWh":1.5054,"EUR_per_kWh":0.13689,"EXR":10.997148,'
    '"time_start":"2025-09-04T19:00:00+02:00","time_end":"2025-09-04T20:00:00+02:00"},'
    '{"SEK_per_kWh":1.00888,"EUR_per_kWh":0.09174,"EXR":10.997148,'
    '"time_start":"2025-09-04T20:00:00+02:00","time_end":"2025-09-04T21:00:00+02:00"},'
    '{"SEK_per_kWh":0.63179,"EUR_per_kWh":0.05745,"EXR":10.997148,'
    '"time_start":"2025-09-04T21:00:00+02:00","time_end":"2025-09-04T22:00:00+02:00"},'
    '{"SEK_per_kWh":0.56382,"EUR_per_kWh":0.05127,"EXR":10.997148,'
    '"time_start":"2025-09-04T22:00:00+02:00","time_end":"2025-09-04T23:00:00+02:00"},'
    '{"SEK_per_kWh":0.52951,"EUR_per_kWh":0.04815,"EXR":10.997148,'
    '"time_start":"2025-09-04T23:00:00+02:00","time_end":"2025-09-05T00:00:00+02:00"}]'
)


def make_payload(prices, day: date = date(2025, 9, 4), minutes: int = 60) -> str:
    """Build a feed payload with one entry per price, back to back from midnight."""
    start = datetime(day.year, day.month, day.day, tzinfo=CEST)
    step = timedelta(minutes=minutes)
    entries = []
    for i, price in enumerate(prices):
        entries.append(
            {
                "SEK_per_kWh": float(price),
                "EUR_per_kWh": round(float(price) / 11, 5),
                "EXR": 11.0,
                "time_start": (start + i * step).isoformat(),
                "time_end": (start + (i + 1) * step).isoformat(),
            }
        )
    return json.dumps(entries, separators=(",", ":"))


def make_records(prices, day: date = date(2025, 9, 4), minutes: int = 60) -> list[PriceRecord]:
    """PriceRecords with the given SEK/kWh prices, back to back from midnight."""
    start = datetime(day.year, day.month, day.day, tzinfo=CEST)
    step = timedelta(minutes=minutes)
    return [
        PriceRecord(
            sek_per_kwh=Decimal(str(price)),
            eur_per_kwh=Decimal("0.01"),
            exchange_rate=Decimal("11"),
            time_start=start + i * step,
            time_end=start + (i + 1) * step,
        )
        for i, price in enumerate(prices)
    ]


class FakeFetcher:
    """PriceFetcher double serving canned payloads and counting calls.

    ``payloads`` maps (zone, day) to payload text; a missing entry behaves
    like a 404. An Exception value is raised instead of returned.
    """

    def __init__(self, payloads: dict | None = None) -> None:
        self.payloads = payloads or {}
        self.calls: list[tuple[PriceZone, date]] = []

    async def fetch_day(self, zone: PriceZone, day: date) -> str | None:
        self.calls.append((zone, day))
        payload = self.payloads.get((zone, day))
        if isinstance(payload, Exception):
            raise payload
        return payload


@pytest.fixture
def se3_payload() -> str:
    return SE3_2025_09_04


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher({(PriceZone.SE3, date(2025, 9, 4)): SE3_2025_09_04})


@pytest.fixture
def record_factory():
    return make_records


@pytest.fixture
def payload_factory():
    return make_payload


@pytest.fixture
def fetcher_factory():
    return FakeFetcher
