#!filepath: minclock/__init__.py

from .utils.logger import Logging, logs, init_logging
from .utils.errors import (
    MinClockError,
    UnparseableInstant,
    InvalidCalendarField,
    UnsupportedRange,
    UnknownTimezone,
)
from .core.units import Unit
from .core.calendar import CalendarFields
from .core.interval import Interval
from .core.formatter import TimeFormat
from .core.instant import Instant
from .core.coerce import to_instant
from .clock import Clock, ManualTimeSource, SystemTimeSource, get_default_clock, set_default_clock
from .config.app_config import AppConfig

__version__ = "0.1.0"

__all__ = [
    "logs", "Logging", "init_logging",
    "MinClockError", "UnparseableInstant", "InvalidCalendarField",
    "UnsupportedRange", "UnknownTimezone",
    "Unit", "CalendarFields", "Interval", "TimeFormat",
    "Instant", "to_instant",
    "Clock", "ManualTimeSource", "SystemTimeSource",
    "get_default_clock", "set_default_clock",
    "AppConfig",
]
