"""
Core value model

Invariants:
- Time is represented as epoch microseconds (int), never floats.
- Instant is immutable; every operation returns a new value.
- Calendar math is proleptic Gregorian, years 1-9999, no leap seconds.
- Timezones only change how an instant is decomposed and printed.
"""
