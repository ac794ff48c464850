# tests/conftest.py
from __future__ import annotations

import os

import pytest
from loguru import logger

from minclock.clock import Clock, get_default_clock, set_default_clock
from minclock.humanize.relative import get_default_formatter, set_default_formatter
from minclock.tz.resolver import get_default_resolver, set_default_resolver


@pytest.fixture(autouse=True)
def disable_file_logger():
    logger.remove()
    logger.add(lambda msg: None)  # or sys.stderr
    yield
    logger.remove()


@pytest.fixture(autouse=True)
def restore_defaults():
    """Tests may install a clock / formatter / resolver; put the originals back."""
    clock = get_default_clock()
    formatter = get_default_formatter()
    resolver = get_default_resolver()
    yield
    set_default_clock(clock)
    set_default_formatter(formatter)
    set_default_resolver(resolver)
    for var in ("MINCLOCK_TIMEZONE", "MINCLOCK_WEEK_START", "MINCLOCK_LOCALE", "MINCLOCK_LOG_LEVEL"):
        os.environ.pop(var, None)


@pytest.fixture
def clock() -> Clock:
    """Clock frozen at 2024-06-15 14:30:00 UTC (a Saturday)."""
    return Clock.fixed("2024-06-15 14:30:00")


@pytest.fixture
def default_clock(clock: Clock) -> Clock:
    """Same frozen clock, installed as the process default."""
    set_default_clock(clock)
    return clock
