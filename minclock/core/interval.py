#!filepath: minclock/core/interval.py
from __future__ import annotations

import re
from dataclasses import dataclass, fields as dc_fields
from typing import Union

from minclock.core.constants import (
    US_PER_DAY,
    US_PER_HOUR,
    US_PER_MINUTE,
    US_PER_SECOND,
)
from minclock.core.units import Unit


@dataclass(frozen=True)
class Interval:
    """
    Compound, calendar-aware duration.

    - years / months are calendar components (day clamping applies)
    - days and finer are fixed-length
    - weeks are folded into days on construction (Interval.of(weeks=2))
    - components are independently signed; diff() results share one sign
    """
    years: int = 0
    months: int = 0
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0
    microseconds: int = 0

    @classmethod
    def of(
        cls,
        years: int = 0,
        months: int = 0,
        weeks: int = 0,
        days: int = 0,
        hours: int = 0,
        minutes: int = 0,
        seconds: int = 0,
        microseconds: int = 0,
    ) -> "Interval":
        return cls(years, months, weeks * 7 + days, hours, minutes, seconds, microseconds)

    @classmethod
    def of_unit(cls, unit, amount: int) -> "Interval":
        unit = Unit.parse(unit)
        return cls.of(**{unit.value + "s": amount})

    # ---------- derived ----------
    @property
    def total_months(self) -> int:
        return self.years * 12 + self.months

    @property
    def fixed_microseconds(self) -> int:
        """Length of the fixed part (days and finer)."""
        return (
            self.days * US_PER_DAY
            + self.hours * US_PER_HOUR
            + self.minutes * US_PER_MINUTE
            + self.seconds * US_PER_SECOND
            + self.microseconds
        )

    @property
    def is_zero(self) -> bool:
        return not any(getattr(self, f.name) for f in dc_fields(self))

    @property
    def is_negative(self) -> bool:
        values = [getattr(self, f.name) for f in dc_fields(self)]
        return any(v < 0 for v in values) and not any(v > 0 for v in values)

    def negated(self) -> "Interval":
        return Interval(*(-getattr(self, f.name) for f in dc_fields(self)))

    def __neg__(self) -> "Interval":
        return self.negated()

    def __add__(self, other):
        if not isinstance(other, Interval):
            return NotImplemented
        return Interval(*(
            getattr(self, f.name) + getattr(other, f.name) for f in dc_fields(self)
        ))

    def __sub__(self, other):
        if not isinstance(other, Interval):
            return NotImplemented
        return self + other.negated()

    def abs(self) -> "Interval":
        return self.negated() if self.is_negative else self

    def __str__(self) -> str:
        return self.to_iso()

    def to_iso(self) -> str:
        """ISO 8601 duration, e.g. P1Y2M3DT4H5M6.000007S, -P1D."""
        iv = self.negated() if self.is_negative else self
        sign = "-" if self.is_negative else ""

        date_part = "".join(
            f"{v}{s}" for v, s in ((iv.years, "Y"), (iv.months, "M"), (iv.days, "D")) if v
        )
        secs = ""
        if iv.seconds or iv.microseconds:
            if iv.microseconds:
                total = iv.seconds * US_PER_SECOND + iv.microseconds
                whole, frac = divmod(abs(total), US_PER_SECOND)
                secs = f"{'-' if total < 0 else ''}{whole}.{frac:06d}".rstrip("0") + "S"
            else:
                secs = f"{iv.seconds}S"
        time_part = "".join(
            f"{v}{s}" for v, s in ((iv.hours, "H"), (iv.minutes, "M")) if v
        ) + secs

        if not date_part and not time_part:
            return "PT0S"
        return f"{sign}P{date_part}" + (f"T{time_part}" if time_part else "")

    # ---------- parsing ----------
    @classmethod
    def parse(cls, text: Union[str, "Interval"]) -> "Interval":
        """
        Accepted forms:
            "P1Y2M3DT4H5M6.5S"        ISO 8601 duration (optional leading sign)
            "1 day", "+2 weeks"       relative text
            "3 hours ago"             negated
            "in 2 days"               positive
            "1 year, 2 months and 3 days"
        Raises ValueError on anything else.
        """
        if isinstance(text, Interval):
            return text
        raw = str(text).strip()
        if not raw:
            raise ValueError("Empty interval text")

        iso = _ISO_DURATION_RE.match(raw.upper())
        if iso:
            return _from_iso_match(iso)
        return _from_relative_text(raw)


_ISO_DURATION_RE = re.compile(
    r"^(?P<sign>[+-])?P"
    r"(?:(?P<years>\d+)Y)?(?:(?P<months>\d+)M)?(?:(?P<weeks>\d+)W)?(?:(?P<days>\d+)D)?"
    r"(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?"
    r"(?:(?P<seconds>\d+)(?:[.,](?P<fraction>\d{1,6}))?S)?)?$"
)

_PART_RE = re.compile(r"(?P<num>[+-]?\d+|an?)\s*(?P<unit>[a-zµ]+)")
_SEP_RE = re.compile(r"\s*(?:,|\band\b)?\s*")


def _from_iso_match(m: "re.Match") -> Interval:
    groups = m.groupdict()
    if not any(groups[k] for k in ("years", "months", "weeks", "days", "hours", "minutes", "seconds")):
        raise ValueError(f"Empty ISO duration: {m.string!r}")
    if m.string.endswith("T"):
        raise ValueError(f"Dangling 'T' in ISO duration: {m.string!r}")

    fraction = groups["fraction"] or ""
    iv = Interval.of(
        years=int(groups["years"] or 0),
        months=int(groups["months"] or 0),
        weeks=int(groups["weeks"] or 0),
        days=int(groups["days"] or 0),
        hours=int(groups["hours"] or 0),
        minutes=int(groups["minutes"] or 0),
        seconds=int(groups["seconds"] or 0),
        microseconds=int(fraction.ljust(6, "0")) if fraction else 0,
    )
    return iv.negated() if groups["sign"] == "-" else iv


def _from_relative_text(raw: str) -> Interval:
    body = raw.lower()
    negate = False
    if body.endswith(" ago"):
        body, negate = body[:-4].strip(), True
    elif body.startswith("in "):
        body = body[3:].strip()

    total = Interval()
    pos, matched = 0, False
    while pos < len(body):
        sep = _SEP_RE.match(body, pos)
        pos = sep.end()
        if pos >= len(body):
            break
        part = _PART_RE.match(body, pos)
        if part is None:
            raise ValueError(f"Unparseable interval text: {raw!r}")
        num = part.group("num")
        amount = 1 if num in ("a", "an") else int(num)
        total = total + Interval.of_unit(Unit.parse(part.group("unit")), amount)
        pos, matched = part.end(), True

    if not matched:
        raise ValueError(f"Unparseable interval text: {raw!r}")
    return total.negated() if negate else total
