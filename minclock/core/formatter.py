#!filepath: minclock/core/formatter.py
"""
Pattern formatting, PHP date() token convention.

    d  day, 2 digits              D  Mon            j  day, no padding
    l  Monday                     N  ISO weekday 1-7  w  weekday 0 (Sun)-6
    z  day of year, from 0        W  ISO week, 2 digits
    F  January   M  Jan   m  01   n  1              t  days in month
    L  leap year 1/0              o  ISO week year  Y  2024   y  24
    a  am/pm  A  AM/PM            g  12h  G  24h    h  12h, 2 digits  H  24h, 2 digits
    i  minutes   s  seconds       u  microseconds (6)  v  milliseconds (3)
    e  zone id   I  DST 1/0       O  +0200  P  +02:00  p  like P, "Z" for UTC
    T  abbreviation (falls back to P)        Z  offset in seconds
    c  ISO 8601   r  RFC 2822     U  epoch seconds

A backslash prints the next character literally: "Y-m-d\\TH:i:s".
Any other character is copied through.
"""
from __future__ import annotations

from enum import Enum
from typing import Callable, Dict

from minclock.core.calendar import (
    CalendarFields,
    day_of_week,
    day_of_year,
    days_in_month,
    is_leap_year,
    iso_week,
)
from minclock.core.constants import DAY_NAMES, MONTH_NAMES, US_PER_SECOND
from minclock.tz.resolver import ZoneOffset, format_offset


class TimeFormat(str, Enum):
    DATE = "Y-m-d"
    TIME = "H:i:s"
    DATETIME = "Y-m-d H:i:s"
    ISO8601 = "c"
    RFC2822 = "r"


class _Context:
    __slots__ = ("f", "offset", "zone_id", "epoch_us")

    def __init__(self, f: CalendarFields, offset: ZoneOffset, zone_id: str, epoch_us: int):
        self.f = f
        self.offset = offset
        self.zone_id = zone_id
        self.epoch_us = epoch_us

    @property
    def dow(self) -> int:
        return day_of_week(self.f.year, self.f.month, self.f.day)

    @property
    def hour12(self) -> int:
        return self.f.hour % 12 or 12


def _p_offset(c: _Context) -> str:
    return "Z" if c.offset.offset_seconds == 0 else format_offset(c.offset.offset_seconds)


_TOKENS: Dict[str, Callable[[_Context], str]] = {
    "d": lambda c: f"{c.f.day:02d}",
    "D": lambda c: DAY_NAMES[c.dow - 1][:3],
    "j": lambda c: str(c.f.day),
    "l": lambda c: DAY_NAMES[c.dow - 1],
    "N": lambda c: str(c.dow),
    "w": lambda c: str(c.dow % 7),
    "z": lambda c: str(day_of_year(c.f.year, c.f.month, c.f.day) - 1),
    "W": lambda c: f"{iso_week(c.f.year, c.f.month, c.f.day)[1]:02d}",
    "F": lambda c: MONTH_NAMES[c.f.month - 1],
    "M": lambda c: MONTH_NAMES[c.f.month - 1][:3],
    "m": lambda c: f"{c.f.month:02d}",
    "n": lambda c: str(c.f.month),
    "t": lambda c: str(days_in_month(c.f.year, c.f.month)),
    "L": lambda c: "1" if is_leap_year(c.f.year) else "0",
    "o": lambda c: f"{iso_week(c.f.year, c.f.month, c.f.day)[0]:04d}",
    "Y": lambda c: f"{c.f.year:04d}",
    "y": lambda c: f"{c.f.year % 100:02d}",
    "a": lambda c: "am" if c.f.hour < 12 else "pm",
    "A": lambda c: "AM" if c.f.hour < 12 else "PM",
    "g": lambda c: str(c.hour12),
    "G": lambda c: str(c.f.hour),
    "h": lambda c: f"{c.hour12:02d}",
    "H": lambda c: f"{c.f.hour:02d}",
    "i": lambda c: f"{c.f.minute:02d}",
    "s": lambda c: f"{c.f.second:02d}",
    "u": lambda c: f"{c.f.microsecond:06d}",
    "v": lambda c: f"{c.f.microsecond // 1000:03d}",
    "e": lambda c: c.zone_id,
    "I": lambda c: "1" if c.offset.is_dst else "0",
    "O": lambda c: format_offset(c.offset.offset_seconds, colon=False),
    "P": lambda c: format_offset(c.offset.offset_seconds),
    "p": _p_offset,
    "T": lambda c: c.offset.abbreviation or format_offset(c.offset.offset_seconds),
    "Z": lambda c: str(c.offset.offset_seconds),
    "U": lambda c: str(c.epoch_us // US_PER_SECOND),
}

_COMPOUND = {
    "c": "Y-m-d\\TH:i:sP",
    "r": "D, d M Y H:i:s O",
}


def format_fields(
    pattern,
    fields: CalendarFields,
    offset: ZoneOffset,
    zone_id: str,
    epoch_us: int,
) -> str:
    if isinstance(pattern, TimeFormat):
        pattern = pattern.value
    ctx = _Context(fields, offset, zone_id, epoch_us)
    return _render(pattern, ctx)


def _render(pattern: str, ctx: _Context) -> str:
    out = []
    escaped = False
    for ch in pattern:
        if escaped:
            out.append(ch)
            escaped = False
        elif ch == "\\":
            escaped = True
        elif ch in _COMPOUND:
            out.append(_render(_COMPOUND[ch], ctx))
        elif ch in _TOKENS:
            out.append(_TOKENS[ch](ctx))
        else:
            out.append(ch)
    if escaped:
        out.append("\\")
    return "".join(out)
