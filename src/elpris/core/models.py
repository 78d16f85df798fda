"""Pydantic data models: the type contracts shared by every layer."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

# --- Enumerations ---


class PriceZone(StrEnum):
    """Swedish electricity market areas served by the feed."""

    SE1 = "SE1"
    SE2 = "SE2"
    SE3 = "SE3"
    SE4 = "SE4"


class DiskCacheBackend(StrEnum):
    """Supported persistent cache backends."""

    NONE = "none"
    FILE = "file"
    SQLITE = "sqlite"


# --- Price Models ---


class PriceRecord(BaseModel):
    """Spot price for one interval of one zone.

    Prices are kept as Decimal so that values read from the feed compare
    exactly against their source text.
    """

    model_config = ConfigDict(frozen=True)

    sek_per_kwh: Decimal
    eur_per_kwh: Decimal
    exchange_rate: Decimal
    time_start: datetime
    time_end: datetime

    @field_validator("time_start", "time_end")
    @classmethod
    def must_have_offset(cls, v: datetime) -> datetime:
        if v.tzinfo is None or v.utcoffset() is None:
            raise ValueError(f"timestamp must carry a UTC offset, got {v.isoformat()}")
        return v

    @model_validator(mode="after")
    def end_after_start(self) -> PriceRecord:
        if self.time_end <= self.time_start:
            raise ValueError(
                f"time_end ({self.time_end.isoformat()}) must be after "
                f"time_start ({self.time_start.isoformat()})"
            )
        return self

    @property
    def hour(self) -> int:
        """Local hour of day (0-23) the interval starts in."""
        return self.time_start.hour

    @property
    def ore_per_kwh(self) -> Decimal:
        return self.sek_per_kwh * 100


class CacheKey(BaseModel):
    """Address of one zone's prices for one calendar day, in every cache tier."""

    model_config = ConfigDict(frozen=True)

    zone: PriceZone
    day: date

    def __str__(self) -> str:
        return f"{self.day.isoformat()}_{self.zone.value}"


# --- Analysis Models ---


class HourlyPrice(BaseModel):
    """Average price of all records starting within one hour of the day."""

    model_config = ConfigDict(frozen=True)

    hour: int
    price: Decimal

    @field_validator("hour")
    @classmethod
    def hour_of_day(cls, v: int) -> int:
        if not 0 <= v <= 23:
            raise ValueError(f"hour must be between 0 and 23, got {v}")
        return v

    @property
    def label(self) -> str:
        """Hour range such as ``"01-02"`` (``"23-00"`` for the last hour)."""
        return f"{self.hour:02d}-{(self.hour + 1) % 24:02d}"


class PriceSummary(BaseModel):
    """Descriptive statistics over a price sequence."""

    model_config = ConfigDict(frozen=True)

    min_hourly: HourlyPrice
    max_hourly: HourlyPrice
    mean: Decimal
    record_count: int


class ChargingWindow(BaseModel):
    """The cheapest contiguous block of intervals found by the optimizer."""

    model_config = ConfigDict(frozen=True)

    records: tuple[PriceRecord, ...]
    total: Decimal

    @field_validator("records")
    @classmethod
    def records_not_empty(cls, v: tuple[PriceRecord, ...]) -> tuple[PriceRecord, ...]:
        if not v:
            raise ValueError("a charging window needs at least one record")
        return v

    @property
    def hours(self) -> int:
        return len(self.records)

    @property
    def start(self) -> datetime:
        return self.records[0].time_start

    @property
    def end(self) -> datetime:
        return self.records[-1].time_end

    @property
    def average(self) -> Decimal:
        return self.total / len(self.records)

    @property
    def wraps(self) -> bool:
        """True when the window reuses earlier records to continue past the end."""
        return any(
            later.time_start < earlier.time_start
            for earlier, later in zip(self.records, self.records[1:])
        )
