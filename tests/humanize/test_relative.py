#!filepath: tests/humanize/test_relative.py
import pytest
import yaml

from minclock.core.instant import Instant
from minclock.humanize.relative import (
    Direction,
    RelativeFormatter,
    TemplateCatalog,
    bucket,
    get_default_formatter,
    set_default_formatter,
)

SECOND = 1_000_000
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE
DAY = 24 * HOUR

DE = {
    "now": "gerade eben",
    "units": {
        "second": ["Sekunde", "Sekunden"],
        "minute": ["Minute", "Minuten"],
        "hour": ["Stunde", "Stunden"],
        "day": ["Tag", "Tagen"],
        "week": ["Woche", "Wochen"],
        "month": ["Monat", "Monaten"],
        "year": ["Jahr", "Jahren"],
    },
    "past": "vor {count} {unit}",
    "future": "in {count} {unit}",
    "before": "{count} {unit} vorher",
    "after": "{count} {unit} danach",
}


# ---------- bucketing ----------
@pytest.mark.parametrize(
    "delta, expected",
    [
        (0, ("now", 0)),
        (999_999, ("now", 0)),
        (-SECOND, ("second", 1)),
        (59 * SECOND, ("second", 59)),
        (MINUTE, ("minute", 1)),
        (-(2 * HOUR + 59 * MINUTE), ("hour", 2)),
        (DAY, ("day", 1)),
        (6 * DAY, ("day", 6)),
        (7 * DAY, ("week", 1)),
        (29 * DAY, ("week", 4)),
        (30 * DAY, ("month", 1)),
        (364 * DAY, ("month", 12)),
        (365 * DAY, ("year", 1)),
        (-800 * DAY, ("year", 2)),
    ],
)
def test_bucket(delta, expected):
    assert bucket(delta) == expected


# ---------- english phrases ----------
@pytest.mark.parametrize(
    "delta, relative_to_now, text",
    [
        (0, True, "just now"),
        (-30 * SECOND, True, "30 seconds ago"),
        (-SECOND, True, "1 second ago"),
        (5 * MINUTE, True, "in 5 minutes"),
        (-DAY, True, "1 day ago"),
        (-7 * DAY, False, "1 week before"),
        (2 * DAY, False, "2 days after"),
        (61 * DAY, True, "in 2 months"),
    ],
)
def test_formatter_english(delta, relative_to_now, text):
    assert RelativeFormatter().human_diff(delta, relative_to_now=relative_to_now) == text


# ---------- catalog ----------
def test_catalog_locale_fallback():
    catalog = TemplateCatalog({"de": DE})
    assert catalog.locales == ("de", "en")
    assert catalog.resolve_locale("de-AT") == "de"
    assert catalog.resolve_locale("DE_de") == "de"
    assert catalog.resolve_locale("fr") == "en"
    assert catalog.resolve_locale(None) == "en"


def test_catalog_templates():
    catalog = TemplateCatalog({"de": DE})
    assert catalog.template("day", 3, Direction.PAST, "de") == "vor 3 Tagen"
    assert catalog.template("day", 1, Direction.AFTER, "de") == "1 Tag danach"
    assert catalog.template("now", 0, Direction.FUTURE, "de") == "gerade eben"
    assert catalog.template("hour", 2, "future", "fr") == "in 2 hours"


def test_catalog_default_locale_must_exist():
    with pytest.raises(ValueError):
        TemplateCatalog(default_locale="de")
    assert TemplateCatalog({"de": DE}, default_locale="de").resolve_locale("fr") == "de"


def test_catalog_merge_is_non_destructive():
    base = TemplateCatalog()
    merged = base.merge("de", DE)
    assert base.locales == ("en",)
    assert merged.locales == ("de", "en")


def test_catalog_from_yaml(tmp_path):
    path = tmp_path / "locales.yml"
    path.write_text(yaml.safe_dump({"de": DE}, allow_unicode=True), encoding="utf-8")
    catalog = TemplateCatalog.from_yaml(path)
    formatter = RelativeFormatter(catalog, default_locale="de")
    assert formatter.human_diff(-2 * HOUR) == "vor 2 Stunden"
    assert formatter.human_diff(-2 * HOUR, locale="en") == "2 hours ago"


def test_catalog_from_yaml_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        TemplateCatalog.from_yaml(tmp_path / "missing.yml")
    bad = tmp_path / "bad.yml"
    bad.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError):
        TemplateCatalog.from_yaml(bad)


def test_catalog_from_yaml_rejects_partial_table(tmp_path):
    partial = {k: v for k, v in DE.items() if k != "before"}
    partial["units"] = {k: v for k, v in DE["units"].items() if k != "week"}
    path = tmp_path / "partial.yml"
    path.write_text(yaml.safe_dump({"de": partial}, allow_unicode=True), encoding="utf-8")

    with pytest.raises(ValueError, match="'de'") as exc:
        TemplateCatalog.from_yaml(path)
    assert "before" in str(exc.value)
    assert "units.week" in str(exc.value)


@pytest.mark.parametrize("table", [{"now": "jetzt"}, ["not", "a", "mapping"], {**DE, "units": None}])
def test_catalog_rejects_incomplete_tables(table):
    with pytest.raises(ValueError):
        TemplateCatalog({"de": table})
    with pytest.raises(ValueError):
        TemplateCatalog().merge("de", table)


class ShoutingProvider:
    def template(self, unit, magnitude, direction, locale):
        return f"{magnitude} {unit.upper()} {Direction(direction).value.upper()}"


def test_custom_provider():
    formatter = RelativeFormatter(ShoutingProvider())
    assert formatter.human_diff(-3 * DAY) == "3 DAY PAST"


# ---------- Instant.human_diff ----------
@pytest.mark.parametrize(
    "text, expected",
    [
        ("2024-06-15 14:30:00.5", "just now"),
        ("2024-06-15 14:29:30", "30 seconds ago"),
        ("2024-06-14 14:30", "1 day ago"),
        ("2024-06-18 14:30", "in 3 days"),
        ("2024-04-15 14:30", "2 months ago"),
        ("2023-06-15 14:30", "1 year ago"),
    ],
)
def test_instant_human_diff_against_now(clock, text, expected):
    assert Instant.parse(text).human_diff(clock=clock) == expected


def test_instant_human_diff_against_other():
    assert Instant.parse("2024-01-01").human_diff("2024-01-08") == "1 week before"
    assert Instant.parse("2024-01-08").human_diff("2024-01-01") == "1 week after"


def test_instant_human_diff_uses_default_formatter(default_clock):
    set_default_formatter(RelativeFormatter(TemplateCatalog({"de": DE}), default_locale="de"))
    assert Instant.parse("2024-06-14 14:30").human_diff() == "vor 1 Tag"
    assert Instant.parse("2024-06-14 14:30").human_diff(locale="en") == "1 day ago"
    assert get_default_formatter().default_locale == "de"
