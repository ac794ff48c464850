#!filepath: minclock/core/units.py
from __future__ import annotations

from enum import Enum
from typing import Union

from minclock.core.constants import (
    US_PER_SECOND,
    US_PER_MINUTE,
    US_PER_HOUR,
    US_PER_DAY,
    US_PER_WEEK,
)


class Unit(str, Enum):
    MICROSECOND = "microsecond"
    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @classmethod
    def parse(cls, value: Union[str, "Unit"]) -> "Unit":
        """
        Accepts the enum itself, singular/plural names and short aliases:
            "days", "Day", "d", "mins", "hrs", "µs"
        One-letter aliases take no plural "s": "ms" is rejected, not read as minutes.
        """
        if isinstance(value, Unit):
            return value
        key = str(value).strip().lower()
        unit = _ALIASES.get(key)
        if unit is None and key.endswith("s") and len(key) > 2:
            unit = _ALIASES.get(key[:-1])
        if unit is None:
            raise ValueError(f"Unknown time unit: {value!r}")
        return unit

    @property
    def is_calendar(self) -> bool:
        """Variable-length unit, subject to day clamping."""
        return self in (Unit.MONTH, Unit.YEAR)

    @property
    def microseconds(self) -> int:
        if self.is_calendar:
            raise ValueError(f"{self.value} has no fixed length")
        return FIXED_UNIT_US[self]


FIXED_UNIT_US = {
    Unit.MICROSECOND: 1,
    Unit.SECOND: US_PER_SECOND,
    Unit.MINUTE: US_PER_MINUTE,
    Unit.HOUR: US_PER_HOUR,
    Unit.DAY: US_PER_DAY,
    Unit.WEEK: US_PER_WEEK,
}

_ALIASES = {
    "microsecond": Unit.MICROSECOND,
    "micro": Unit.MICROSECOND,
    "us": Unit.MICROSECOND,
    "µs": Unit.MICROSECOND,
    "second": Unit.SECOND,
    "sec": Unit.SECOND,
    "s": Unit.SECOND,
    "minute": Unit.MINUTE,
    "min": Unit.MINUTE,
    "m": Unit.MINUTE,
    "hour": Unit.HOUR,
    "hr": Unit.HOUR,
    "h": Unit.HOUR,
    "day": Unit.DAY,
    "d": Unit.DAY,
    "week": Unit.WEEK,
    "wk": Unit.WEEK,
    "w": Unit.WEEK,
    "month": Unit.MONTH,
    "mon": Unit.MONTH,
    "mo": Unit.MONTH,
    "year": Unit.YEAR,
    "yr": Unit.YEAR,
    "y": Unit.YEAR,
}
