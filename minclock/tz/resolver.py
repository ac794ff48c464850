#!filepath: minclock/tz/resolver.py
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional, Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from minclock.core.calendar import days_from_civil
from minclock.core.constants import MAX_YEAR, MIN_YEAR, US_PER_DAY, US_PER_SECOND
from minclock.utils.errors import UnknownTimezone

UTC_NAMES = frozenset({"UTC", "Z", "GMT", "ETC/UTC", "ETC/GMT", "UNIVERSAL", "ZULU"})

_OFFSET_RE = re.compile(r"^(?:UTC|GMT)?(?P<sign>[+-])(?P<hh>\d{1,2})(?::?(?P<mm>\d{2}))?$")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# zoneinfo lookups stay one year inside datetime's own range
_LOOKUP_MIN_US = days_from_civil(MIN_YEAR + 1, 1, 1) * US_PER_DAY
_LOOKUP_MAX_US = days_from_civil(MAX_YEAR - 1, 12, 31) * US_PER_DAY


@dataclass(frozen=True)
class ZoneOffset:
    offset_seconds: int
    is_dst: bool = False
    abbreviation: Optional[str] = None


class TimezoneResolver(Protocol):
    """
    TimezoneResolver Contract

    唯一职责：
      - (zone_id, absolute instant) -> UTC offset in effect

    Raises
    ------
    UnknownTimezone
        zone_id is not recognised
    """

    def resolve(self, zone_id: str, epoch_us: int) -> ZoneOffset:
        ...


# ================================================================
# fixed offsets
# ================================================================
def parse_fixed_offset(text: str) -> Optional[int]:
    """
    "+02:00" / "-0530" / "+2" / "UTC+01:00" -> seconds east of UTC.
    "UTC" / "Z" -> 0.  Anything else -> None.
    """
    s = text.strip()
    if s.upper() in UTC_NAMES:
        return 0
    m = _OFFSET_RE.match(s.upper())
    if not m:
        return None
    hh, mm = int(m.group("hh")), int(m.group("mm") or 0)
    if hh > 23 or mm > 59:
        return None
    seconds = hh * 3600 + mm * 60
    return -seconds if m.group("sign") == "-" else seconds


def format_offset(seconds: int, colon: bool = True) -> str:
    sign = "-" if seconds < 0 else "+"
    hh, rem = divmod(abs(seconds), 3600)
    mm = rem // 60
    return f"{sign}{hh:02d}:{mm:02d}" if colon else f"{sign}{hh:02d}{mm:02d}"


# ================================================================
# zoneinfo-backed resolver
# ================================================================
@lru_cache(maxsize=256)
def _load_zone(zone_id: str) -> ZoneInfo:
    try:
        return ZoneInfo(zone_id)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise UnknownTimezone(f"Unknown timezone: {zone_id!r}") from exc


class ZoneInfoResolver:
    """
    Default resolver:
      - UTC aliases and fixed offsets are answered directly
      - IANA names go through zoneinfo (tzdata wheel when the OS has no database)
    """

    def resolve(self, zone_id: str, epoch_us: int) -> ZoneOffset:
        if not isinstance(zone_id, str) or not zone_id.strip():
            raise UnknownTimezone(f"Unknown timezone: {zone_id!r}")

        fixed = parse_fixed_offset(zone_id)
        if fixed is not None:
            return ZoneOffset(fixed, False, "UTC" if fixed == 0 else None)

        zone = _load_zone(zone_id.strip())
        clamped = min(max(epoch_us, _LOOKUP_MIN_US), _LOOKUP_MAX_US)
        local = (_EPOCH + timedelta(microseconds=clamped)).astimezone(zone)

        offset = local.utcoffset() or timedelta(0)
        dst = local.dst() or timedelta(0)
        return ZoneOffset(
            offset_seconds=int(offset.total_seconds()),
            is_dst=dst != timedelta(0),
            abbreviation=local.tzname(),
        )


def local_to_epoch(resolver: TimezoneResolver, zone_id: str, local_us: int) -> int:
    """
    Wall-clock microseconds in zone_id -> absolute epoch microseconds.

    Two-pass lookup:
      - unambiguous times map exactly
      - in a fold (clocks set back) the earlier instant wins
      - in a gap (clocks set forward) the pre-transition offset is applied,
        which lands after the gap
    """
    first = resolver.resolve(zone_id, local_us).offset_seconds
    guess = local_us - first * US_PER_SECOND
    second = resolver.resolve(zone_id, guess).offset_seconds
    if second == first:
        # fold: an earlier candidate may also read as this wall time
        earlier = resolver.resolve(zone_id, guess - US_PER_DAY // 8).offset_seconds
        if earlier > first:
            candidate = local_us - earlier * US_PER_SECOND
            if resolver.resolve(zone_id, candidate).offset_seconds == earlier:
                return candidate
        return guess

    candidate = local_us - second * US_PER_SECOND
    if resolver.resolve(zone_id, candidate).offset_seconds == second:
        return candidate
    # gap: neither offset round-trips
    return local_us - min(first, second) * US_PER_SECOND


# ================================================================
# process default
# ================================================================
_default_resolver: TimezoneResolver = ZoneInfoResolver()


def get_default_resolver() -> TimezoneResolver:
    return _default_resolver


def set_default_resolver(resolver: TimezoneResolver) -> None:
    """Swap the process default resolver (tests, custom zone data)."""
    global _default_resolver
    _default_resolver = resolver
