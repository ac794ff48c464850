#!filepath: minclock/clock.py
"""
Clock
---------------------------------------
Provider of "the current Instant".

States:
    Live            now() reads the time source at call time
    Frozen(Instant) now() returns the frozen Instant

    freeze(at) -> Frozen,  unfreeze() / reset() -> Live,  initial: Live

The freeze state is instance state guarded by a lock, so each transition
and each now() read is atomic across threads.  Code that needs "now"
should receive a Clock; get_default_clock() exists for convenience.
"""
from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from typing import Iterator, Optional, Protocol, Union

from minclock.core.constants import US_PER_MILLISECOND, US_PER_SECOND
from minclock.core.formatter import TimeFormat
from minclock.core.instant import Instant, InstantLike
from minclock.tz.resolver import TimezoneResolver, get_default_resolver
from minclock.utils.logger import logs


class TimeSource(Protocol):
    def current_epoch_microseconds(self) -> int:
        """Wall-clock microseconds since epoch (UTC)."""
        ...


class SystemTimeSource:
    """Real system time via time.time_ns()."""

    def current_epoch_microseconds(self) -> int:
        return time.time_ns() // 1000


class ManualTimeSource:
    """
    Settable time source for deterministic tests.

    Unlike a frozen clock it can be advanced between reads.
    """

    def __init__(self, epoch_us: int = 0):
        self._lock = threading.Lock()
        self._now = epoch_us

    def current_epoch_microseconds(self) -> int:
        with self._lock:
            return self._now

    def set(self, epoch_us: int) -> None:
        with self._lock:
            self._now = epoch_us

    def advance(self, seconds: float = 0, microseconds: int = 0) -> None:
        with self._lock:
            self._now += round(seconds * US_PER_SECOND) + microseconds


class Clock:
    def __init__(
        self,
        timezone: str = "UTC",
        time_source: Optional[TimeSource] = None,
        resolver: Optional[TimezoneResolver] = None,
        week_start: int = 1,
    ):
        self.resolver = resolver or get_default_resolver()
        # UnknownTimezone now rather than on first now()
        self.resolver.resolve(timezone, 0)
        self.timezone = timezone
        self.time_source = time_source or SystemTimeSource()
        self.week_start = week_start

        self._lock = threading.Lock()
        self._frozen: Optional[Instant] = None

    @classmethod
    def from_config(cls, config) -> "Clock":
        """ClockConfig -> live clock."""
        return cls(timezone=config.timezone, week_start=config.week_start)

    @classmethod
    def fixed(cls, value: InstantLike, timezone: str = "UTC") -> "Clock":
        """Clock already frozen at `value` (text is read in `timezone`)."""
        clock = cls(timezone=timezone)
        clock.freeze(value)
        return clock

    # ---------- state ----------
    @property
    def is_frozen(self) -> bool:
        with self._lock:
            return self._frozen is not None

    def now(self) -> Instant:
        with self._lock:
            frozen = self._frozen
        if frozen is not None:
            return frozen
        return self._live_now()

    def freeze(self, at: Optional[InstantLike] = None) -> Instant:
        """
        Freeze at `at` (Instant, datetime or text), or at the current live time.
        Returns the frozen Instant.
        """
        if at is None:
            with self._lock:
                frozen = self._frozen
            instant = frozen or self._live_now()
        else:
            instant = self._coerce(at)

        with self._lock:
            self._frozen = instant
        logs.debug(f"[Clock] frozen at {instant.to_iso_string()}")
        return instant

    def unfreeze(self) -> None:
        with self._lock:
            self._frozen = None
        logs.debug("[Clock] live")

    reset = unfreeze

    @contextmanager
    def frozen(self, at: Optional[InstantLike] = None) -> Iterator[Instant]:
        """
        with clock.frozen("2024-06-15 14:30:00") as now:
            ...
        Restores the previous state (Live or the earlier frozen Instant) on exit.
        """
        with self._lock:
            previous = self._frozen
        instant = self.freeze(at)
        try:
            yield instant
        finally:
            with self._lock:
                self._frozen = previous

    def _live_now(self) -> Instant:
        return Instant(self.time_source.current_epoch_microseconds(), self.timezone, self.resolver)

    def _coerce(self, value: InstantLike) -> Instant:
        from minclock.core.coerce import to_instant

        return to_instant(value, timezone=self.timezone, resolver=self.resolver, clock=self)

    # ---------- conveniences ----------
    def timestamp(self) -> int:
        return self.now().timestamp

    def milliseconds(self) -> int:
        return self.now().epoch_microseconds // US_PER_MILLISECOND

    def microseconds(self) -> int:
        return self.now().epoch_microseconds

    def today(self) -> Instant:
        return self.now().start_of_day()

    def start_of_week(self) -> Instant:
        return self.now().start_of_week(self.week_start)

    def format(self, pattern: Union[TimeFormat, str] = TimeFormat.DATETIME) -> str:
        return self.now().format(pattern)

    def __repr__(self) -> str:
        state = f"Frozen({self._frozen})" if self._frozen is not None else "Live"
        return f"Clock(timezone={self.timezone!r}, state={state})"


# 默认全局 clock（可被 set_default_clock 替换）
_default_clock: Clock = Clock()
_default_lock = threading.Lock()


def get_default_clock() -> Clock:
    with _default_lock:
        return _default_clock


def set_default_clock(clock: Clock) -> Clock:
    """Install `clock` as the process default; returns the previous one."""
    global _default_clock
    with _default_lock:
        previous, _default_clock = _default_clock, clock
    return previous
