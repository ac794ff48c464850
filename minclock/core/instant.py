#!filepath: minclock/core/instant.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone as dt_timezone
from functools import cached_property
from typing import Optional, Union
from zoneinfo import ZoneInfo

from minclock.core import calendar
from minclock.core.calendar import CalendarFields
from minclock.core.constants import (
    DAY_NAMES,
    MAX_YEAR,
    MIN_YEAR,
    MONDAY,
    MONTH_NAMES,
    US_PER_DAY,
    US_PER_HOUR,
    US_PER_MINUTE,
    US_PER_SECOND,
)
from minclock.core.formatter import TimeFormat, format_fields
from minclock.core.interval import Interval
from minclock.core.parser import parse_text
from minclock.core.units import FIXED_UNIT_US, Unit
from minclock.humanize.relative import RelativeFormatter, get_default_formatter
from minclock.tz.resolver import (
    TimezoneResolver,
    ZoneOffset,
    format_offset,
    get_default_resolver,
    local_to_epoch,
)
from minclock.utils.errors import (
    InvalidCalendarField,
    UnknownTimezone,
    UnparseableInstant,
    UnsupportedRange,
)
from minclock.utils.logger import logs

MIN_EPOCH_US = calendar.days_from_civil(MIN_YEAR, 1, 1) * US_PER_DAY
MAX_EPOCH_US = calendar.days_from_civil(MAX_YEAR + 1, 1, 1) * US_PER_DAY - 1

_EPOCH = datetime(1970, 1, 1, tzinfo=dt_timezone.utc)

InstantLike = Union["Instant", datetime, str]


@dataclass(frozen=True, eq=False, repr=False)
class Instant:
    """
    Immutable point in time + display timezone.

    - epoch_microseconds is the absolute instant; equality, hashing and
      ordering use it alone
    - timezone only changes the field decomposition and formatted output
    - every "mutator" returns a new Instant
    """
    epoch_microseconds: int
    timezone: str = "UTC"
    resolver: TimezoneResolver = field(default_factory=get_default_resolver)

    def __post_init__(self):
        if isinstance(self.epoch_microseconds, bool) or not isinstance(self.epoch_microseconds, int):
            raise TypeError(
                f"epoch_microseconds must be int, got {type(self.epoch_microseconds).__name__}"
            )
        if not MIN_EPOCH_US <= self.epoch_microseconds <= MAX_EPOCH_US:
            raise UnsupportedRange(
                f"Instant {self.epoch_microseconds}us outside years {MIN_YEAR}-{MAX_YEAR}"
            )
        # fails fast with UnknownTimezone
        offset = self.resolver.resolve(self.timezone, self.epoch_microseconds)
        local_us = self.epoch_microseconds + offset.offset_seconds * US_PER_SECOND
        if not MIN_EPOCH_US <= local_us <= MAX_EPOCH_US:
            raise UnsupportedRange(
                f"Instant {self.epoch_microseconds}us viewed in {self.timezone!r} "
                f"falls outside years {MIN_YEAR}-{MAX_YEAR}"
            )

    # ================================================================
    # factories
    # ================================================================
    @classmethod
    def now(cls, clock=None) -> "Instant":
        from minclock.clock import get_default_clock

        return (clock or get_default_clock()).now()

    @classmethod
    def parse(
        cls,
        text: str,
        timezone: Optional[str] = None,
        clock=None,
        resolver: Optional[TimezoneResolver] = None,
    ) -> "Instant":
        """
        Parse date-time text (grammar in minclock.core.parser).

        timezone: zone for text without an explicit offset / zone name
                  (default UTC; for relative text the clock's zone)
        """
        parsed = parse_text(text)
        resolver = resolver or get_default_resolver()

        if parsed.epoch_us is not None:
            base = cls._build(parsed.epoch_us, "UTC", resolver)
            return base.with_timezone(timezone) if timezone else base

        if parsed.is_relative:
            return cls._parse_relative(parsed, timezone, clock)

        zone = parsed.zone or timezone or "UTC"
        try:
            return cls.from_fields(parsed.fields, zone, resolver=resolver)
        except (InvalidCalendarField, UnknownTimezone, UnsupportedRange) as exc:
            logs.debug(f"[Instant.parse] rejected {text!r}: {exc}")
            raise UnparseableInstant(f"Unparseable date-time text: {text!r} ({exc})") from exc

    @classmethod
    def _parse_relative(cls, parsed, timezone: Optional[str], clock) -> "Instant":
        base = cls.now(clock)
        if timezone:
            base = base.with_timezone(timezone)

        if parsed.anchor in ("today", "midnight"):
            base = base.start_of_day()
        elif parsed.anchor == "tomorrow":
            base = base._shift_local_days(1)
        elif parsed.anchor == "yesterday":
            base = base._shift_local_days(-1)

        if parsed.interval is not None:
            base = base.add_interval(parsed.interval)
        return base

    @classmethod
    def from_timestamp(
        cls,
        seconds: Union[int, float],
        timezone: str = "UTC",
        resolver: Optional[TimezoneResolver] = None,
    ) -> "Instant":
        if isinstance(seconds, float):
            us = round(seconds * US_PER_SECOND)
        else:
            us = int(seconds) * US_PER_SECOND
        return cls._build(us, timezone, resolver)

    @classmethod
    def from_epoch_microseconds(
        cls,
        microseconds: int,
        timezone: str = "UTC",
        resolver: Optional[TimezoneResolver] = None,
    ) -> "Instant":
        return cls._build(microseconds, timezone, resolver)

    @classmethod
    def from_fields(
        cls,
        fields: CalendarFields,
        timezone: str = "UTC",
        clamp: bool = False,
        resolver: Optional[TimezoneResolver] = None,
    ) -> "Instant":
        """Wall-clock fields in `timezone` -> Instant. InvalidCalendarField unless clamp."""
        resolver = resolver or get_default_resolver()
        local_us = calendar.from_fields(fields, 0, clamp=clamp)
        return cls._build(local_to_epoch(resolver, timezone, local_us), timezone, resolver)

    @classmethod
    def create(
        cls,
        year: int,
        month: int = 1,
        day: int = 1,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        microsecond: int = 0,
        timezone: str = "UTC",
        clamp: bool = False,
        resolver: Optional[TimezoneResolver] = None,
    ) -> "Instant":
        fields = CalendarFields(year, month, day, hour, minute, second, microsecond)
        return cls.from_fields(fields, timezone, clamp=clamp, resolver=resolver)

    @classmethod
    def from_datetime(
        cls,
        value: datetime,
        timezone: Optional[str] = None,
        resolver: Optional[TimezoneResolver] = None,
    ) -> "Instant":
        """
        Aware datetime: absolute instant kept, zone taken from its tzinfo
        (ZoneInfo key, else "UTC" / fixed offset).
        Naive datetime: wall-clock time in `timezone` (default UTC).
        """
        if value.tzinfo is None or value.utcoffset() is None:
            fields = CalendarFields(
                value.year, value.month, value.day,
                value.hour, value.minute, value.second, value.microsecond,
            )
            return cls.from_fields(fields, timezone or "UTC", resolver=resolver)

        epoch_us = (value - _EPOCH) // timedelta(microseconds=1)
        if isinstance(value.tzinfo, ZoneInfo):
            zone = value.tzinfo.key
        else:
            offset = int(value.utcoffset().total_seconds())
            zone = "UTC" if offset == 0 else format_offset(offset)
        return cls._build(epoch_us, zone, resolver)

    @classmethod
    def _build(cls, epoch_us: int, timezone: str, resolver: Optional[TimezoneResolver]) -> "Instant":
        return cls(epoch_us, timezone, resolver or get_default_resolver())

    def _derive(self, epoch_us: int) -> "Instant":
        return Instant(epoch_us, self.timezone, self.resolver)

    def _from_local(self, fields: CalendarFields) -> "Instant":
        local_us = calendar.from_fields(fields)
        return self._derive(local_to_epoch(self.resolver, self.timezone, local_us))

    def _shift_local_days(self, days: int) -> "Instant":
        """Midnight `days` calendar days away, in this zone."""
        start = calendar.start_of_unit(self.fields, Unit.DAY)
        return self._from_local(calendar.add_calendar_unit(start, Unit.DAY, days))

    def _coerce(self, other: InstantLike) -> "Instant":
        from minclock.core.coerce import to_instant

        return to_instant(other, timezone=self.timezone, resolver=self.resolver)

    # ================================================================
    # accessors
    # ================================================================
    @cached_property
    def zone_offset(self) -> ZoneOffset:
        return self.resolver.resolve(self.timezone, self.epoch_microseconds)

    @cached_property
    def fields(self) -> CalendarFields:
        return calendar.to_fields(self.epoch_microseconds, self.zone_offset.offset_seconds)

    @property
    def offset_seconds(self) -> int:
        return self.zone_offset.offset_seconds

    @property
    def is_dst(self) -> bool:
        return self.zone_offset.is_dst

    @property
    def year(self) -> int:
        return self.fields.year

    @property
    def month(self) -> int:
        return self.fields.month

    @property
    def day(self) -> int:
        return self.fields.day

    @property
    def hour(self) -> int:
        return self.fields.hour

    @property
    def minute(self) -> int:
        return self.fields.minute

    @property
    def second(self) -> int:
        return self.fields.second

    @property
    def microsecond(self) -> int:
        return self.fields.microsecond

    @property
    def timestamp(self) -> int:
        """Unix seconds, floored."""
        return self.epoch_microseconds // US_PER_SECOND

    @property
    def day_of_week(self) -> int:
        """ISO weekday, Monday=1 .. Sunday=7."""
        f = self.fields
        return calendar.day_of_week(f.year, f.month, f.day)

    @property
    def day_of_year(self) -> int:
        f = self.fields
        return calendar.day_of_year(f.year, f.month, f.day)

    @property
    def day_name(self) -> str:
        return DAY_NAMES[self.day_of_week - 1]

    @property
    def month_name(self) -> str:
        return MONTH_NAMES[self.month - 1]

    def to_epoch_microseconds(self) -> int:
        return self.epoch_microseconds

    def to_timestamp(self) -> int:
        return self.timestamp

    def to_datetime(self) -> datetime:
        """Aware datetime with a fixed-offset tzinfo equal to the offset in effect."""
        tz = dt_timezone(timedelta(seconds=self.offset_seconds))
        return (_EPOCH + timedelta(microseconds=self.epoch_microseconds)).astimezone(tz)

    # ================================================================
    # comparison (absolute instant only)
    # ================================================================
    def is_before(self, other: InstantLike) -> bool:
        return self.epoch_microseconds < self._coerce(other).epoch_microseconds

    def is_after(self, other: InstantLike) -> bool:
        return self.epoch_microseconds > self._coerce(other).epoch_microseconds

    def is_before_or_equal(self, other: InstantLike) -> bool:
        return self.epoch_microseconds <= self._coerce(other).epoch_microseconds

    def is_after_or_equal(self, other: InstantLike) -> bool:
        return self.epoch_microseconds >= self._coerce(other).epoch_microseconds

    def equals(self, other: InstantLike) -> bool:
        return self.epoch_microseconds == self._coerce(other).epoch_microseconds

    def is_between(self, start: InstantLike, end: InstantLike, inclusive: bool = True) -> bool:
        lo = self._coerce(start).epoch_microseconds
        hi = self._coerce(end).epoch_microseconds
        if lo > hi:
            lo, hi = hi, lo
        if inclusive:
            return lo <= self.epoch_microseconds <= hi
        return lo < self.epoch_microseconds < hi

    def is_past(self, clock=None) -> bool:
        return self.epoch_microseconds < Instant.now(clock).epoch_microseconds

    def is_future(self, clock=None) -> bool:
        return self.epoch_microseconds > Instant.now(clock).epoch_microseconds

    def _days_from_today(self, clock) -> int:
        now = Instant.now(clock).with_timezone(self.timezone).fields
        mine = self.fields
        return (
            calendar.days_from_civil(mine.year, mine.month, mine.day)
            - calendar.days_from_civil(now.year, now.month, now.day)
        )

    def is_today(self, clock=None) -> bool:
        return self._days_from_today(clock) == 0

    def is_tomorrow(self, clock=None) -> bool:
        return self._days_from_today(clock) == 1

    def is_yesterday(self, clock=None) -> bool:
        return self._days_from_today(clock) == -1

    def __eq__(self, other):
        if not isinstance(other, Instant):
            return NotImplemented
        return self.epoch_microseconds == other.epoch_microseconds

    def __hash__(self):
        return hash(self.epoch_microseconds)

    def __lt__(self, other):
        if not isinstance(other, Instant):
            return NotImplemented
        return self.epoch_microseconds < other.epoch_microseconds

    def __le__(self, other):
        if not isinstance(other, Instant):
            return NotImplemented
        return self.epoch_microseconds <= other.epoch_microseconds

    def __gt__(self, other):
        if not isinstance(other, Instant):
            return NotImplemented
        return self.epoch_microseconds > other.epoch_microseconds

    def __ge__(self, other):
        if not isinstance(other, Instant):
            return NotImplemented
        return self.epoch_microseconds >= other.epoch_microseconds

    # ================================================================
    # arithmetic
    # ================================================================
    def add(self, unit, amount: int) -> "Instant":
        """
        months / years: local fields, day clamped (Jan 31 + 1 month -> Feb 29 in 2024)
        weeks and finer: fixed length on the absolute timeline
        """
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise TypeError(f"amount must be int, got {type(amount).__name__}")
        unit = Unit.parse(unit)
        if unit.is_calendar:
            return self._from_local(calendar.add_calendar_unit(self.fields, unit, amount))
        return self._derive(self.epoch_microseconds + amount * FIXED_UNIT_US[unit])

    def sub(self, unit, amount: int) -> "Instant":
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise TypeError(f"amount must be int, got {type(amount).__name__}")
        return self.add(unit, -amount)

    def add_seconds(self, seconds: int) -> "Instant":
        return self.add(Unit.SECOND, seconds)

    def add_minutes(self, minutes: int) -> "Instant":
        return self.add(Unit.MINUTE, minutes)

    def add_hours(self, hours: int) -> "Instant":
        return self.add(Unit.HOUR, hours)

    def add_days(self, days: int) -> "Instant":
        return self.add(Unit.DAY, days)

    def add_weeks(self, weeks: int) -> "Instant":
        return self.add(Unit.WEEK, weeks)

    def add_months(self, months: int) -> "Instant":
        return self.add(Unit.MONTH, months)

    def add_years(self, years: int) -> "Instant":
        return self.add(Unit.YEAR, years)

    def sub_seconds(self, seconds: int) -> "Instant":
        return self.sub(Unit.SECOND, seconds)

    def sub_minutes(self, minutes: int) -> "Instant":
        return self.sub(Unit.MINUTE, minutes)

    def sub_hours(self, hours: int) -> "Instant":
        return self.sub(Unit.HOUR, hours)

    def sub_days(self, days: int) -> "Instant":
        return self.sub(Unit.DAY, days)

    def sub_weeks(self, weeks: int) -> "Instant":
        return self.sub(Unit.WEEK, weeks)

    def sub_months(self, months: int) -> "Instant":
        return self.sub(Unit.MONTH, months)

    def sub_years(self, years: int) -> "Instant":
        return self.sub(Unit.YEAR, years)

    def add_interval(self, interval: Union[Interval, str]) -> "Instant":
        """
        Years + months first (local fields, clamped), then days and the
        finer components as one fixed-length shift.
        """
        iv = Interval.parse(interval)
        result = self
        if iv.total_months:
            result = result._from_local(calendar.add_months(result.fields, iv.total_months))
        if iv.fixed_microseconds:
            result = result._derive(result.epoch_microseconds + iv.fixed_microseconds)
        return result

    def sub_interval(self, interval: Union[Interval, str]) -> "Instant":
        """
        Undoes add_interval in reverse order: fixed part first, then
        years + months. Exact inverse unless a day was clamped.
        """
        iv = Interval.parse(interval)
        result = self
        if iv.fixed_microseconds:
            result = result._derive(result.epoch_microseconds - iv.fixed_microseconds)
        if iv.total_months:
            result = result._from_local(calendar.add_months(result.fields, -iv.total_months))
        return result

    def modify(self, text: str) -> "Instant":
        """Relative shift: "+1 day", "2 weeks ago", "P1M"."""
        try:
            iv = Interval.parse(text)
        except ValueError as exc:
            raise UnparseableInstant(f"Unparseable modifier: {text!r}") from exc
        return self.add_interval(iv)

    def __add__(self, other):
        if isinstance(other, Interval):
            return self.add_interval(other)
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, Interval):
            return self.sub_interval(other)
        return NotImplemented

    # ================================================================
    # boundaries
    # ================================================================
    def start_of(self, unit, week_start: int = MONDAY) -> "Instant":
        return self._from_local(calendar.start_of_unit(self.fields, unit, week_start))

    def end_of(self, unit, week_start: int = MONDAY) -> "Instant":
        return self._from_local(calendar.end_of_unit(self.fields, unit, week_start))

    def start_of_day(self) -> "Instant":
        return self.start_of(Unit.DAY)

    def end_of_day(self) -> "Instant":
        return self.end_of(Unit.DAY)

    def start_of_week(self, week_start: int = MONDAY) -> "Instant":
        return self.start_of(Unit.WEEK, week_start)

    def end_of_week(self, week_start: int = MONDAY) -> "Instant":
        return self.end_of(Unit.WEEK, week_start)

    def start_of_month(self) -> "Instant":
        return self.start_of(Unit.MONTH)

    def end_of_month(self) -> "Instant":
        return self.end_of(Unit.MONTH)

    def start_of_year(self) -> "Instant":
        return self.start_of(Unit.YEAR)

    def end_of_year(self) -> "Instant":
        return self.end_of(Unit.YEAR)

    # ================================================================
    # difference: sign follows (other - self)
    # ================================================================
    def diff(self, other: InstantLike, absolute: bool = False) -> Interval:
        """
        Calendar interval from self to other.
        Negative (every component <= 0) when other is earlier than self.
        """
        target = self._coerce(other).with_timezone(self.timezone)
        negative = target.epoch_microseconds < self.epoch_microseconds
        start, end = (target, self) if negative else (self, target)

        sf, ef = start.fields, end.fields
        months = max((ef.year - sf.year) * 12 + (ef.month - sf.month), 0)
        anchor = start._from_local(calendar.add_months(sf, months))
        while months > 0 and anchor.epoch_microseconds > end.epoch_microseconds:
            months -= 1
            anchor = start._from_local(calendar.add_months(sf, months))

        rem = end.epoch_microseconds - anchor.epoch_microseconds
        days, rem = divmod(rem, US_PER_DAY)
        hours, rem = divmod(rem, US_PER_HOUR)
        minutes, rem = divmod(rem, US_PER_MINUTE)
        seconds, micros = divmod(rem, US_PER_SECOND)

        iv = Interval(months // 12, months % 12, days, hours, minutes, seconds, micros)
        return iv.negated() if negative and not absolute else iv

    def diff_in(self, unit, other: InstantLike) -> int:
        """Whole units between self and other, truncated toward zero."""
        unit = Unit.parse(unit)
        if unit.is_calendar:
            months = self.diff(other).total_months
            whole = abs(months) // (12 if unit is Unit.YEAR else 1)
            return -whole if months < 0 else whole

        delta = self._coerce(other).epoch_microseconds - self.epoch_microseconds
        whole = abs(delta) // FIXED_UNIT_US[unit]
        return -whole if delta < 0 else whole

    def diff_in_seconds(self, other: InstantLike) -> int:
        return self.diff_in(Unit.SECOND, other)

    def diff_in_minutes(self, other: InstantLike) -> int:
        return self.diff_in(Unit.MINUTE, other)

    def diff_in_hours(self, other: InstantLike) -> int:
        return self.diff_in(Unit.HOUR, other)

    def diff_in_days(self, other: InstantLike) -> int:
        return self.diff_in(Unit.DAY, other)

    def diff_in_weeks(self, other: InstantLike) -> int:
        return self.diff_in(Unit.WEEK, other)

    def diff_in_months(self, other: InstantLike) -> int:
        return self.diff_in(Unit.MONTH, other)

    def diff_in_years(self, other: InstantLike) -> int:
        return self.diff_in(Unit.YEAR, other)

    # ================================================================
    # formatting
    # ================================================================
    def format(self, pattern: Union[TimeFormat, str] = TimeFormat.DATETIME) -> str:
        return format_fields(
            pattern, self.fields, self.zone_offset, self.timezone, self.epoch_microseconds
        )

    def to_iso_string(self) -> str:
        """RFC 3339, fraction only when non-zero: 2024-01-15T10:30:00.250000+01:00"""
        if self.microsecond:
            return self.format("Y-m-d\\TH:i:s.uP")
        return self.format("Y-m-d\\TH:i:sP")

    def to_datetime_string(self) -> str:
        return self.format(TimeFormat.DATETIME)

    def human_diff(
        self,
        other: Optional[InstantLike] = None,
        locale: Optional[str] = None,
        clock=None,
        formatter: Optional[RelativeFormatter] = None,
    ) -> str:
        """
        "2 hours ago" / "in 3 days" against now,
        "1 week before" / "2 days after" against `other`.
        """
        formatter = formatter or get_default_formatter()
        reference = Instant.now(clock) if other is None else self._coerce(other)
        delta = self.epoch_microseconds - reference.epoch_microseconds
        return formatter.human_diff(delta, locale=locale, relative_to_now=other is None)

    # ================================================================
    # timezone view
    # ================================================================
    def with_timezone(self, timezone: str) -> "Instant":
        return Instant(self.epoch_microseconds, timezone, self.resolver)

    def __str__(self) -> str:
        return self.to_iso_string()

    def __repr__(self) -> str:
        return f"Instant({self.to_iso_string()!r}, timezone={self.timezone!r})"
