#!filepath: minclock/core/constants.py
from __future__ import annotations

US_PER_MILLISECOND = 1_000
US_PER_SECOND = 1_000_000
US_PER_MINUTE = 60 * US_PER_SECOND
US_PER_HOUR = 60 * US_PER_MINUTE
US_PER_DAY = 24 * US_PER_HOUR          # 86_400_000_000, no leap seconds
US_PER_WEEK = 7 * US_PER_DAY

SECONDS_PER_DAY = 86_400

# supported span (proleptic Gregorian)
MIN_YEAR = 1
MAX_YEAR = 9999

# non-leap table, index 0 unused
DAYS_IN_MONTH = (0, 31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)

# ISO weekday numbers
MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY, SUNDAY = range(1, 8)

DAY_NAMES = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
