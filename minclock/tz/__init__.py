from .resolver import (
    TimezoneResolver,
    ZoneInfoResolver,
    ZoneOffset,
    format_offset,
    get_default_resolver,
    local_to_epoch,
    parse_fixed_offset,
    set_default_resolver,
)

__all__ = [
    "TimezoneResolver",
    "ZoneInfoResolver",
    "ZoneOffset",
    "format_offset",
    "get_default_resolver",
    "local_to_epoch",
    "parse_fixed_offset",
    "set_default_resolver",
]
