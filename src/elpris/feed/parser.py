"""Narrow parser for the elprisetjustnu.se day payload.

The feed returns one flat JSON array of flat objects per zone and day::

    [{"SEK_per_kWh":0.12229,"EUR_per_kWh":0.01112,"EXR":10.997148,
      "time_start":"2025-09-04T00:00:00+02:00","time_end":"2025-09-04T01:00:00+02:00"}, ...]

This is not a JSON parser. It only understands that exact shape, splitting on
object and pair boundaries, so that one broken object costs one record rather
than the whole day.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import ClassVar

from pydantic import ValidationError

from elpris.core.exceptions import ParsingError
from elpris.core.models import PriceRecord

logger = logging.getLogger(__name__)

_OBJECT_BOUNDARY = re.compile(r"}\s*,\s*{")


class FeedParser:
    """Turns one day's raw payload into an ordered list of PriceRecord.

    Anything that is not wrapped in ``[...]`` yields an empty list. A
    malformed object is logged and skipped; parsing continues with the
    remaining objects. ``parse`` never raises.
    """

    # Feed field name -> PriceRecord field name
    FIELD_MAP: ClassVar[dict[str, str]] = {
        "SEK_per_kWh": "sek_per_kwh",
        "EUR_per_kWh": "eur_per_kwh",
        "EXR": "exchange_rate",
        "time_start": "time_start",
        "time_end": "time_end",
    }

    DECIMAL_FIELDS: ClassVar[tuple[str, ...]] = ("SEK_per_kWh", "EUR_per_kWh", "EXR")
    TIMESTAMP_FIELDS: ClassVar[tuple[str, ...]] = ("time_start", "time_end")

    def parse(self, raw: str) -> list[PriceRecord]:
        """Parse a feed payload, keeping every well-formed entry in source order."""
        if not isinstance(raw, str):
            return []

        body = raw.strip()
        if not body.startswith("[") or not body.endswith("]"):
            return []

        content = body[1:-1].strip()
        if not content:
            return []

        records: list[PriceRecord] = []
        for chunk in _OBJECT_BOUNDARY.split(content):
            entry = chunk.replace("{", "").replace("}", "").strip()
            try:
                records.append(self._parse_entry(entry))
            except ParsingError as e:
                logger.warning(
                    "Skipping malformed price entry %r: %s",
                    e.context.get("entry"),
                    e.context.get("reason"),
                )
        return records

    def _parse_entry(self, entry: str) -> PriceRecord:
        """Build one PriceRecord from the text of a single object.

        Raises:
            ParsingError: If a field is missing or holds an unusable value.
        """
        fields = self._split_pairs(entry)

        missing = [name for name in self.FIELD_MAP if name not in fields]
        if missing:
            raise ParsingError(
                f"Missing fields: {', '.join(missing)}",
                context={"entry": entry, "reason": f"missing {', '.join(missing)}"},
            )

        values: dict[str, object] = {}
        try:
            for name in self.DECIMAL_FIELDS:
                number = Decimal(fields[name])
                if not number.is_finite():
                    raise ValueError(f"{name} is not a finite number: {fields[name]!r}")
                values[self.FIELD_MAP[name]] = number
            for name in self.TIMESTAMP_FIELDS:
                values[self.FIELD_MAP[name]] = datetime.fromisoformat(fields[name])
            return PriceRecord.model_validate(values)
        except (InvalidOperation, ValueError, ValidationError) as e:
            raise ParsingError(
                f"Invalid price entry: {e}",
                context={"entry": entry, "reason": str(e).splitlines()[0]},
            ) from e

    @staticmethod
    def _split_pairs(entry: str) -> dict[str, str]:
        """Split ``"key":value,"key":value`` into a dict with quotes stripped."""
        fields: dict[str, str] = {}
        for pair in entry.split(","):
            key, sep, value = pair.partition(":")
            if not sep:
                raise ParsingError(
                    f"Expected key:value pair, got {pair.strip()!r}",
                    context={"entry": entry, "reason": f"bad pair {pair.strip()!r}"},
                )
            fields[key.strip().replace('"', "")] = value.strip().replace('"', "")
        return fields
