#!filepath: minclock/core/coerce.py
from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from minclock.core.instant import Instant
from minclock.tz.resolver import TimezoneResolver


def to_instant(
    value,
    timezone: Optional[str] = None,
    resolver: Optional[TimezoneResolver] = None,
    clock=None,
) -> Instant:
    """
    Normalise any accepted time representation into an Instant.

        Instant            returned as is
        datetime           aware: same absolute instant; naive: wall time in `timezone`
        date               midnight in `timezone`
        str                Instant.parse(value, timezone)

    `timezone` defaults to UTC.  Anything else raises TypeError.
    """
    if isinstance(value, Instant):
        return value
    if isinstance(value, datetime):
        return Instant.from_datetime(value, timezone=timezone, resolver=resolver)
    if isinstance(value, date):
        return Instant.create(
            value.year, value.month, value.day,
            timezone=timezone or "UTC",
            resolver=resolver,
        )
    if isinstance(value, str):
        return Instant.parse(value, timezone=timezone, clock=clock, resolver=resolver)
    raise TypeError(f"Cannot convert {type(value).__name__} to Instant")
