#!filepath: minclock/core/parser.py
"""
Text -> ParsedText (pure, no clock / zone lookups).

Absolute forms
    "2024-01-15"                      date only, 00:00:00
    "2024-01-15 10:30:00"             space or "T" separator
    "2024/01/15 10:30:00.040"         fraction up to 9 digits, truncated to µs
    "2024-01-15T10:30:00Z"            Z / +02:00 / +0200 / +02, optionally after a space
    "2024-01-15 12:30:00 UTC"         trailing zone name ("Europe/Warsaw")
    "20240115", "20240115103000", "20240115T103000"
    "@1700000000"                     unix seconds, UTC

Relative forms (resolved by Instant.parse against a clock)
    "now", "today", "midnight", "tomorrow", "yesterday"
    "+1 day", "3 hours ago", "in 2 weeks", "1 day 2 hours"
    "tomorrow +2 hours"
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from minclock.core.calendar import CalendarFields
from minclock.core.interval import Interval
from minclock.utils.errors import UnparseableInstant

_ISO_RE = re.compile(
    r"""^
    (?P<year>\d{4})[-/](?P<month>\d{1,2})[-/](?P<day>\d{1,2})
    (?:[T\s]+
        (?P<hour>\d{1,2}):(?P<minute>\d{2})
        (?::(?P<second>\d{2})(?:[.,](?P<fraction>\d{1,9}))?)?
    )?
    (?:
        \s*(?P<offset>Z|[+-]\d{2}(?::?\d{2})?)
        |\s+(?P<zone>[A-Za-z][A-Za-z0-9_/+\-]*)
    )?
    $""",
    re.VERBOSE,
)

_COMPACT_RE = re.compile(
    r"^(?P<year>\d{4})(?P<month>\d{2})(?P<day>\d{2})"
    r"(?:T?(?P<hour>\d{2})(?P<minute>\d{2})(?P<second>\d{2})?)?"
    r"(?P<offset>Z)?$"
)

_EPOCH_RE = re.compile(r"^@(?P<seconds>-?\d+)(?:\.(?P<fraction>\d{1,6}))?$")

_ANCHOR_RE = re.compile(
    r"^(?P<anchor>now|today|midnight|tomorrow|yesterday)(?:\s+(?P<rest>.+))?$",
    re.IGNORECASE,
)

ANCHORS = ("now", "today", "midnight", "tomorrow", "yesterday")


@dataclass(frozen=True)
class ParsedText:
    """
    One of:
      - fields (+ optional zone)    absolute wall-clock time
      - epoch_us                    absolute instant, UTC
      - anchor / interval           relative to "now"
    """
    text: str
    fields: Optional[CalendarFields] = None
    zone: Optional[str] = None
    epoch_us: Optional[int] = None
    anchor: Optional[str] = None
    interval: Optional[Interval] = None

    @property
    def is_relative(self) -> bool:
        return self.fields is None and self.epoch_us is None


def parse_text(text: str) -> ParsedText:
    if not isinstance(text, str):
        raise UnparseableInstant(f"Expected text, got {type(text).__name__}")
    s = text.strip()
    if not s:
        raise UnparseableInstant("Empty date-time text")

    m = _ISO_RE.match(s) or _COMPACT_RE.match(s)
    if m:
        return _from_match(s, m)

    m = _EPOCH_RE.match(s)
    if m:
        fraction = m.group("fraction") or ""
        micros = int(fraction.ljust(6, "0")) if fraction else 0
        seconds = int(m.group("seconds"))
        epoch_us = seconds * 1_000_000 + (-micros if seconds < 0 else micros)
        return ParsedText(text=s, epoch_us=epoch_us, zone="UTC")

    return _parse_relative(s)


def _from_match(s: str, m: "re.Match") -> ParsedText:
    g = m.groupdict()
    fraction = g.get("fraction") or ""
    fields = CalendarFields(
        year=int(g["year"]),
        month=int(g["month"]),
        day=int(g["day"]),
        hour=int(g["hour"] or 0),
        minute=int(g["minute"] or 0),
        second=int(g.get("second") or 0),
        microsecond=int(fraction[:6].ljust(6, "0")) if fraction else 0,
    )
    zone = g.get("offset") or g.get("zone")
    if zone == "Z":
        zone = "UTC"
    return ParsedText(text=s, fields=fields, zone=zone)


def _parse_relative(s: str) -> ParsedText:
    anchor, rest = "now", s
    m = _ANCHOR_RE.match(s)
    if m:
        anchor, rest = m.group("anchor").lower(), m.group("rest")

    interval = None
    if rest:
        try:
            interval = Interval.parse(rest)
        except ValueError as exc:
            raise UnparseableInstant(f"Unparseable date-time text: {s!r}") from exc

    return ParsedText(text=s, anchor=anchor, interval=interval)
