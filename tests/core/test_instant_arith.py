#!filepath: tests/core/test_instant_arith.py
import pytest

from minclock.core.constants import SUNDAY
from minclock.core.instant import Instant
from minclock.core.interval import Interval
from minclock.core.units import Unit
from minclock.utils.errors import UnparseableInstant, UnsupportedRange

FMT = "Y-m-d H:i:s"


def at(text: str, tz: str = "UTC") -> Instant:
    return Instant.parse(text, timezone=tz)


# ================================================================
# add / sub
# ================================================================
@pytest.mark.parametrize(
    "start, unit, amount, expected",
    [
        ("2024-01-31", Unit.MONTH, 1, "2024-02-29 00:00:00"),
        ("2023-01-31", "months", 1, "2023-02-28 00:00:00"),
        ("2024-03-31", "month", -1, "2024-02-29 00:00:00"),
        ("2024-02-29", Unit.YEAR, 1, "2025-02-28 00:00:00"),
        ("2024-01-15 10:00", "hours", 36, "2024-01-16 22:00:00"),
        ("2024-01-15 10:00", "minutes", -61, "2024-01-15 08:59:00"),
        ("2024-01-15 10:00", "seconds", 3600, "2024-01-15 11:00:00"),
        ("2024-01-15 10:00", "weeks", 2, "2024-01-29 10:00:00"),
        ("2024-12-31 23:59:59", "microsecond", 1_000_000, "2025-01-01 00:00:00"),
    ],
)
def test_add(start, unit, amount, expected):
    assert at(start).add(unit, amount).format(FMT) == expected


def test_named_add_and_sub_helpers():
    t = at("2024-01-15 10:00")
    assert t.add_seconds(30).second == 30
    assert t.add_minutes(5).minute == 5
    assert t.add_hours(1).hour == 11
    assert t.add_days(1).day == 16
    assert t.add_weeks(1).day == 22
    assert t.add_months(1).month == 2
    assert t.add_years(1).year == 2025
    assert t.sub_seconds(1).format("H:i:s") == "09:59:59"
    assert t.sub_minutes(1).format("H:i") == "09:59"
    assert t.sub_hours(11).format(FMT) == "2024-01-14 23:00:00"
    assert t.sub_days(15).format("Y-m-d") == "2023-12-31"
    assert t.sub_weeks(1).day == 8
    assert t.sub_months(1).format("Y-m") == "2023-12"
    assert t.sub_years(24).year == 2000


def test_add_returns_new_instant():
    t = at("2024-01-15")
    shifted = t.add_days(1)
    assert shifted is not t
    assert t.day == 15
    assert shifted.timezone == t.timezone


@pytest.mark.parametrize("amount", [1.5, "1", True])
def test_add_requires_int_amount(amount):
    with pytest.raises(TypeError):
        at("2024-01-15").add(Unit.DAY, amount)


def test_unknown_unit():
    with pytest.raises(ValueError):
        at("2024-01-15").add("fortnight", 1)


def test_fixed_units_are_inverse():
    t = at("2024-03-30 12:00", "Europe/Warsaw")
    for unit in ("seconds", "minutes", "hours", "days", "weeks"):
        assert t.add(unit, 7).sub(unit, 7) == t


def test_month_add_is_not_always_inverse():
    t = at("2024-01-31")
    assert t.add_months(1).sub_months(1).format("Y-m-d") == "2024-01-29"


def test_day_is_24_hours_across_dst():
    t = at("2024-03-30 12:00", "Europe/Warsaw")
    nxt = t.add_days(1)
    assert nxt.format("Y-m-d H:i P") == "2024-03-31 13:00 +02:00"
    assert nxt.epoch_microseconds - t.epoch_microseconds == 86_400_000_000


def test_month_keeps_wall_clock_across_dst():
    t = at("2024-03-15 12:00", "Europe/Warsaw")
    assert t.add_months(1).format("Y-m-d H:i P") == "2024-04-15 12:00 +02:00"


def test_add_beyond_supported_range():
    with pytest.raises(UnsupportedRange):
        at("9999-12-31").add_days(1)
    with pytest.raises(UnsupportedRange):
        at("9999-06-01").add_years(1)
    with pytest.raises(UnsupportedRange):
        at("0001-01-01").sub_seconds(1)


# ================================================================
# intervals
# ================================================================
def test_add_interval_months_before_days():
    t = at("2024-01-31")
    assert t.add_interval(Interval(months=1, days=1)).format("Y-m-d") == "2024-03-01"
    assert t.add_interval("P1M").format("Y-m-d") == "2024-02-29"
    assert t.add_interval(Interval()) == t


def test_sub_interval_undoes_add_in_reverse_order():
    t = at("2024-01-15")
    iv = Interval(months=1, days=20)
    assert t.add_interval(iv).format("Y-m-d") == "2024-03-06"
    assert t.add_interval(iv).sub_interval(iv) == t
    # days first, then months (clamped): 03-31 -> 03-30 -> 02-29
    assert at("2024-03-31").sub_interval(Interval(months=1, days=1)).format("Y-m-d") == "2024-02-29"


def test_interval_operators():
    t = at("2024-01-15 10:00")
    assert (t + Interval(days=1)).format(FMT) == "2024-01-16 10:00:00"
    assert (t - Interval(hours=1)).format(FMT) == "2024-01-15 09:00:00"
    with pytest.raises(TypeError):
        t + 1


def test_modify():
    t = at("2024-01-15 10:00")
    assert t.modify("+1 day").format(FMT) == "2024-01-16 10:00:00"
    assert t.modify("2 weeks ago").format("Y-m-d") == "2024-01-01"
    assert t.modify("1 year, 2 months and 3 days").format("Y-m-d") == "2025-03-18"
    with pytest.raises(UnparseableInstant):
        t.modify("banana")
    with pytest.raises(UnparseableInstant):
        t.modify("+500 ms")


# ================================================================
# boundaries
# ================================================================
@pytest.fixture
def wednesday():
    return Instant.create(2024, 1, 17, 14, 30, 45, 500_000)


@pytest.mark.parametrize(
    "method, expected",
    [
        ("start_of_day", "2024-01-17 00:00:00.000000"),
        ("end_of_day", "2024-01-17 23:59:59.999999"),
        ("start_of_week", "2024-01-15 00:00:00.000000"),
        ("end_of_week", "2024-01-21 23:59:59.999999"),
        ("start_of_month", "2024-01-01 00:00:00.000000"),
        ("end_of_month", "2024-01-31 23:59:59.999999"),
        ("start_of_year", "2024-01-01 00:00:00.000000"),
        ("end_of_year", "2024-12-31 23:59:59.999999"),
    ],
)
def test_boundaries(wednesday, method, expected):
    assert getattr(wednesday, method)().format("Y-m-d H:i:s.u") == expected


def test_generic_boundaries(wednesday):
    assert wednesday.start_of("hour").format("H:i:s.u") == "14:00:00.000000"
    assert wednesday.end_of(Unit.MINUTE).format("H:i:s.u") == "14:30:59.999999"
    assert wednesday.start_of("second").microsecond == 0


def test_week_start_is_configurable(wednesday):
    assert wednesday.start_of_week(SUNDAY).format("Y-m-d") == "2024-01-14"
    assert wednesday.end_of_week(SUNDAY).format("Y-m-d") == "2024-01-20"


def test_boundaries_are_local_to_the_zone():
    t = at("2024-01-15 23:30", "UTC").with_timezone("Asia/Tokyo")
    # 2024-01-16 08:30 in Tokyo
    assert t.start_of_day().format("Y-m-d H:i P") == "2024-01-16 00:00 +09:00"
    assert t.start_of_day().with_timezone("UTC").format(FMT) == "2024-01-15 15:00:00"


def test_dst_day_is_23_hours():
    t = at("2024-03-31 12:00", "Europe/Warsaw")
    start, end = t.start_of_day(), t.end_of_day()
    assert start.format("H:i P") == "00:00 +01:00"
    assert end.format("H:i:s.u P") == "23:59:59.999999 +02:00"
    assert end.epoch_microseconds - start.epoch_microseconds == 82_799_999_999


# ================================================================
# DST wall-clock resolution
# ================================================================
def test_time_in_spring_gap_moves_forward():
    t = Instant.create(2024, 3, 31, 2, 30, timezone="Europe/Warsaw")
    assert t.format("H:i P") == "03:30 +02:00"
    assert t.with_timezone("UTC").format("H:i") == "01:30"


def test_time_in_autumn_fold_takes_earlier_instant():
    t = Instant.create(2024, 10, 27, 2, 30, timezone="Europe/Warsaw")
    assert t.format("H:i P") == "02:30 +02:00"
    assert t.with_timezone("UTC").format("H:i") == "00:30"
