#!filepath: minclock/core/calendar.py
"""
Calendar math engine
---------------------------------------
Pure, timezone-unaware arithmetic over proleptic Gregorian civil fields.

- epoch microseconds <-> CalendarFields for a given UTC offset
- year / month arithmetic with day clamping (Jan 31 + 1 month -> Feb 28/29)
- fixed-length arithmetic (day and finer) on the linear count
- start / end of unit

Every day has exactly 86_400 seconds; leap seconds are not modelled.
Supported span is years 1-9999, anything outside raises UnsupportedRange.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Tuple

from minclock.core.constants import (
    DAYS_IN_MONTH,
    MAX_YEAR,
    MIN_YEAR,
    MONDAY,
    THURSDAY,
    WEDNESDAY,
    US_PER_DAY,
    US_PER_HOUR,
    US_PER_MINUTE,
    US_PER_SECOND,
)
from minclock.core.units import Unit, FIXED_UNIT_US
from minclock.utils.errors import InvalidCalendarField, UnsupportedRange


@dataclass(frozen=True)
class CalendarFields:
    year: int
    month: int = 1
    day: int = 1
    hour: int = 0
    minute: int = 0
    second: int = 0
    microsecond: int = 0

    def as_tuple(self) -> Tuple[int, int, int, int, int, int, int]:
        return (
            self.year, self.month, self.day,
            self.hour, self.minute, self.second, self.microsecond,
        )


# ================================================================
# day-number primitives
# ================================================================
def is_leap_year(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_month(year: int, month: int) -> int:
    if month == 2 and is_leap_year(year):
        return 29
    return DAYS_IN_MONTH[month]


def days_from_civil(year: int, month: int, day: int) -> int:
    """Days since 1970-01-01 (negative before the epoch)."""
    y = year - 1 if month <= 2 else year
    era = y // 400
    yoe = y - era * 400
    mp = month - 3 if month > 2 else month + 9
    doy = (153 * mp + 2) // 5 + day - 1
    doe = yoe * 365 + yoe // 4 - yoe // 100 + doy
    return era * 146097 + doe - 719468


def civil_from_days(days: int) -> Tuple[int, int, int]:
    """Inverse of days_from_civil -> (year, month, day)."""
    z = days + 719468
    era = z // 146097
    doe = z - era * 146097
    yoe = (doe - doe // 1460 + doe // 36524 - doe // 146096) // 365
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)
    mp = (5 * doy + 2) // 153
    day = doy - (153 * mp + 2) // 5 + 1
    month = mp + 3 if mp < 10 else mp - 9
    year = yoe + era * 400 + (1 if month <= 2 else 0)
    return year, month, day


def day_of_week(year: int, month: int, day: int) -> int:
    """ISO weekday, Monday=1 .. Sunday=7."""
    return (days_from_civil(year, month, day) + 3) % 7 + 1


def day_of_year(year: int, month: int, day: int) -> int:
    """1-based ordinal day."""
    return days_from_civil(year, month, day) - days_from_civil(year, 1, 1) + 1


def _iso_weeks_in_year(year: int) -> int:
    jan1 = day_of_week(year, 1, 1)
    if jan1 == THURSDAY or (jan1 == WEDNESDAY and is_leap_year(year)):
        return 53
    return 52


def iso_week(year: int, month: int, day: int) -> Tuple[int, int]:
    """(ISO week-numbering year, ISO week number)."""
    week = (day_of_year(year, month, day) - day_of_week(year, month, day) + 10) // 7
    if week < 1:
        return year - 1, _iso_weeks_in_year(year - 1)
    if week > _iso_weeks_in_year(year):
        return year + 1, 1
    return year, week


def _check_year(year: int) -> None:
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise UnsupportedRange(
            f"Year {year} outside supported range {MIN_YEAR}-{MAX_YEAR}"
        )


# ================================================================
# epoch <-> fields
# ================================================================
def to_fields(epoch_us: int, utc_offset_seconds: int = 0) -> CalendarFields:
    local = epoch_us + utc_offset_seconds * US_PER_SECOND
    days, rem = divmod(local, US_PER_DAY)
    year, month, day = civil_from_days(days)
    _check_year(year)

    hour, rem = divmod(rem, US_PER_HOUR)
    minute, rem = divmod(rem, US_PER_MINUTE)
    second, micro = divmod(rem, US_PER_SECOND)
    return CalendarFields(year, month, day, hour, minute, second, micro)


def from_fields(
    fields: CalendarFields,
    utc_offset_seconds: int = 0,
    clamp: bool = False,
) -> int:
    """
    CalendarFields -> epoch microseconds.

    clamp=False: any out-of-range field raises InvalidCalendarField.
    clamp=True : each field is pulled into its natural range
                 (day into 1..days_in_month after the month is fixed).
    """
    _check_year(fields.year)
    fields = _clamp(fields) if clamp else _validate(fields)

    days = days_from_civil(fields.year, fields.month, fields.day)
    local = (
        days * US_PER_DAY
        + fields.hour * US_PER_HOUR
        + fields.minute * US_PER_MINUTE
        + fields.second * US_PER_SECOND
        + fields.microsecond
    )
    return local - utc_offset_seconds * US_PER_SECOND


def _validate(f: CalendarFields) -> CalendarFields:
    if not 1 <= f.month <= 12:
        raise InvalidCalendarField(f"month={f.month} not in 1..12")
    dim = days_in_month(f.year, f.month)
    if not 1 <= f.day <= dim:
        raise InvalidCalendarField(
            f"day={f.day} not in 1..{dim} for {f.year:04d}-{f.month:02d}"
        )
    for name, hi in (("hour", 23), ("minute", 59), ("second", 59), ("microsecond", 999_999)):
        value = getattr(f, name)
        if not 0 <= value <= hi:
            raise InvalidCalendarField(f"{name}={value} not in 0..{hi}")
    return f


def _clamp(f: CalendarFields) -> CalendarFields:
    month = min(max(f.month, 1), 12)
    return CalendarFields(
        year=f.year,
        month=month,
        day=min(max(f.day, 1), days_in_month(f.year, month)),
        hour=min(max(f.hour, 0), 23),
        minute=min(max(f.minute, 0), 59),
        second=min(max(f.second, 0), 59),
        microsecond=min(max(f.microsecond, 0), 999_999),
    )


# ================================================================
# arithmetic
# ================================================================
def add_months(fields: CalendarFields, months: int) -> CalendarFields:
    total = fields.year * 12 + (fields.month - 1) + months
    year, month0 = divmod(total, 12)
    month = month0 + 1
    _check_year(year)
    return replace(
        fields,
        year=year,
        month=month,
        day=min(fields.day, days_in_month(year, month)),
    )


def add_calendar_unit(fields: CalendarFields, unit, amount: int) -> CalendarFields:
    """
    YEAR / MONTH: bump the field, clamp the day to the resulting month.
    Anything finer is fixed-length: linear add on the wall-clock count.
    """
    unit = Unit.parse(unit)
    if unit is Unit.YEAR:
        return add_months(fields, amount * 12)
    if unit is Unit.MONTH:
        return add_months(fields, amount)

    local = from_fields(fields) + amount * FIXED_UNIT_US[unit]
    return to_fields(local)


# ================================================================
# boundaries
# ================================================================
def _start_of_day(f: CalendarFields) -> CalendarFields:
    return replace(f, hour=0, minute=0, second=0, microsecond=0)


def _end_of_day(f: CalendarFields) -> CalendarFields:
    return replace(f, hour=23, minute=59, second=59, microsecond=999_999)


def start_of_unit(fields: CalendarFields, unit, week_start: int = MONDAY) -> CalendarFields:
    """
    Zero every field finer than unit.
    week: the preceding (or same) week_start day, Monday unless configured.
    """
    unit = Unit.parse(unit)
    if unit is Unit.MICROSECOND:
        return fields
    if unit is Unit.SECOND:
        return replace(fields, microsecond=0)
    if unit is Unit.MINUTE:
        return replace(fields, second=0, microsecond=0)
    if unit is Unit.HOUR:
        return replace(fields, minute=0, second=0, microsecond=0)
    if unit is Unit.DAY:
        return _start_of_day(fields)
    if unit is Unit.WEEK:
        back = (day_of_week(fields.year, fields.month, fields.day) - week_start) % 7
        return add_calendar_unit(_start_of_day(fields), Unit.DAY, -back)
    if unit is Unit.MONTH:
        return _start_of_day(replace(fields, day=1))
    return _start_of_day(replace(fields, month=1, day=1))


def end_of_unit(fields: CalendarFields, unit, week_start: int = MONDAY) -> CalendarFields:
    """Maximise every field finer than unit; week ends the day before the next week_start."""
    unit = Unit.parse(unit)
    if unit is Unit.MICROSECOND:
        return fields
    if unit is Unit.SECOND:
        return replace(fields, microsecond=999_999)
    if unit is Unit.MINUTE:
        return replace(fields, second=59, microsecond=999_999)
    if unit is Unit.HOUR:
        return replace(fields, minute=59, second=59, microsecond=999_999)
    if unit is Unit.DAY:
        return _end_of_day(fields)
    if unit is Unit.WEEK:
        start = start_of_unit(fields, Unit.WEEK, week_start)
        return _end_of_day(add_calendar_unit(start, Unit.DAY, 6))
    if unit is Unit.MONTH:
        return _end_of_day(replace(fields, day=days_in_month(fields.year, fields.month)))
    return _end_of_day(replace(fields, month=12, day=31))
