#!filepath: minclock/utils/errors.py
class MinClockError(ValueError):
    """
    Base class of every recoverable minclock error.
    Subclasses ValueError so callers treating bad input generically still catch it.
    """


class UnparseableInstant(MinClockError):
    """Malformed date-time text."""


class InvalidCalendarField(MinClockError):
    """
    A calendar field is outside its natural range
    (month 13, Feb 30, hour 24 ...) and clamp mode was not requested.
    """


class UnsupportedRange(MinClockError):
    """Year or epoch value outside the supported span (years 1-9999)."""


class UnknownTimezone(MinClockError):
    """The timezone resolver cannot map the identifier."""
