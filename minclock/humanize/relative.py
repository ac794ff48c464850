#!filepath: minclock/humanize/relative.py
"""
Relative ("human") difference formatting.

The formatter owns the bucketing only; the phrases come from a
LocaleTemplateProvider so that languages can be swapped or injected.

Buckets (|delta|, truncating):
    < 1 s      -> now
    < 60 s     -> seconds
    < 60 min   -> minutes
    < 24 h     -> hours
    < 7 d      -> days
    < 30 d     -> weeks
    < 365 d    -> months (30-day months)
    otherwise  -> years  (365-day years)
"""
from __future__ import annotations

from copy import deepcopy
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Tuple, Union

import yaml

from minclock.core.constants import US_PER_DAY, US_PER_HOUR, US_PER_MINUTE, US_PER_SECOND
from minclock.utils.logger import logs


class Direction(str, Enum):
    PAST = "past"        # relative to now, earlier
    FUTURE = "future"    # relative to now, later
    BEFORE = "before"    # relative to another instant, earlier
    AFTER = "after"      # relative to another instant, later


BUCKETS = ("now", "second", "minute", "hour", "day", "week", "month", "year")


def bucket(delta_us: int) -> Tuple[str, int]:
    """|delta| -> (coarsest sensible unit, truncated magnitude)."""
    d = abs(delta_us)
    if d < US_PER_SECOND:
        return "now", 0
    if d < US_PER_MINUTE:
        return "second", d // US_PER_SECOND
    if d < US_PER_HOUR:
        return "minute", d // US_PER_MINUTE
    if d < US_PER_DAY:
        return "hour", d // US_PER_HOUR
    days = d // US_PER_DAY
    if days < 7:
        return "day", days
    if days < 30:
        return "week", days // 7
    if days < 365:
        return "month", days // 30
    return "year", days // 365


class LocaleTemplateProvider(Protocol):
    def template(self, unit: str, magnitude: int, direction: Direction, locale: str) -> str:
        ...


EN_TEMPLATES: Dict[str, Any] = {
    "now": "just now",
    "units": {
        "second": ["second", "seconds"],
        "minute": ["minute", "minutes"],
        "hour": ["hour", "hours"],
        "day": ["day", "days"],
        "week": ["week", "weeks"],
        "month": ["month", "months"],
        "year": ["year", "years"],
    },
    "past": "{count} {unit} ago",
    "future": "in {count} {unit}",
    "before": "{count} {unit} before",
    "after": "{count} {unit} after",
}


class TemplateCatalog:
    """
    Dictionary-backed LocaleTemplateProvider.

    Locale table layout (YAML or dict):
        now: "just now"
        units:
          day: [day, days]         # [singular, plural]
        past: "{count} {unit} ago"
        future: "in {count} {unit}"
        before: "{count} {unit} before"
        after: "{count} {unit} after"

    Lookup falls back "de_AT" -> "de" -> default_locale.
    Plural rule is the simple one/other split.
    """

    def __init__(self, tables: Optional[Dict[str, Dict[str, Any]]] = None, default_locale: str = "en"):
        self.tables: Dict[str, Dict[str, Any]] = {"en": deepcopy(EN_TEMPLATES)}
        for locale, table in (tables or {}).items():
            _validate_table(locale, table)
            self.tables[_normalize(locale)] = deepcopy(table)
        self.default_locale = _normalize(default_locale)
        if self.default_locale not in self.tables:
            raise ValueError(f"Default locale {default_locale!r} has no template table")

    @classmethod
    def from_yaml(cls, path: Union[str, Path], default_locale: str = "en") -> "TemplateCatalog":
        """YAML file mapping locale -> table."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Locale catalog not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Locale catalog must be a mapping: {path}")
        logs.info(f"[TemplateCatalog] loaded locales {sorted(raw)} from {path}")
        return cls(raw, default_locale)

    def merge(self, locale: str, table: Dict[str, Any]) -> "TemplateCatalog":
        tables = {k: v for k, v in self.tables.items()}
        tables[_normalize(locale)] = table
        return TemplateCatalog(tables, self.default_locale)

    @property
    def locales(self) -> Tuple[str, ...]:
        return tuple(sorted(self.tables))

    def resolve_locale(self, locale: Optional[str]) -> str:
        if not locale:
            return self.default_locale
        key = _normalize(locale)
        if key in self.tables:
            return key
        lang = key.split("_", 1)[0]
        if lang in self.tables:
            return lang
        logs.warning(
            f"[TemplateCatalog] no templates for locale {locale!r}, "
            f"falling back to {self.default_locale!r}"
        )
        return self.default_locale

    def template(self, unit: str, magnitude: int, direction: Direction, locale: str) -> str:
        table = self.tables[self.resolve_locale(locale)]
        if unit == "now":
            return table["now"]
        forms = table["units"][unit]
        word = forms[0] if magnitude == 1 else forms[-1]
        return table[Direction(direction).value].format(count=magnitude, unit=word)


def _normalize(locale: str) -> str:
    return locale.strip().replace("-", "_").lower()


def _validate_table(locale: str, table: Any) -> None:
    """Reject incomplete tables on load, naming every missing key."""
    if not isinstance(table, dict):
        raise ValueError(f"Locale {locale!r}: template table must be a mapping")
    missing = [key for key in ("now", *(d.value for d in Direction)) if key not in table]
    units = table.get("units")
    if not isinstance(units, dict):
        missing.append("units")
    else:
        missing += [
            f"units.{unit}" for unit in BUCKETS[1:]
            if not isinstance(units.get(unit), (list, tuple)) or not units.get(unit)
        ]
    if missing:
        raise ValueError(f"Locale {locale!r}: template table is missing {', '.join(missing)}")


class RelativeFormatter:
    def __init__(self, provider: Optional[LocaleTemplateProvider] = None, default_locale: str = "en"):
        self.provider = provider or TemplateCatalog()
        self.default_locale = default_locale

    def human_diff(self, delta_us: int, locale: Optional[str] = None, relative_to_now: bool = True) -> str:
        """
        delta_us = subject - reference
          < 0 -> past / before
          > 0 -> future / after
        """
        unit, magnitude = bucket(delta_us)
        if relative_to_now:
            direction = Direction.PAST if delta_us < 0 else Direction.FUTURE
        else:
            direction = Direction.BEFORE if delta_us < 0 else Direction.AFTER
        return self.provider.template(unit, magnitude, direction, locale or self.default_locale)


_default_formatter = RelativeFormatter()


def get_default_formatter() -> RelativeFormatter:
    return _default_formatter


def set_default_formatter(formatter: RelativeFormatter) -> None:
    global _default_formatter
    _default_formatter = formatter
