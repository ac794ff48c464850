#!filepath: minclock/config/clock_config.py
from pydantic import BaseModel, Field, field_validator

from minclock.tz.resolver import get_default_resolver


class ClockConfig(BaseModel):
    timezone: str = "UTC"
    week_start: int = Field(default=1, ge=1, le=7)  # ISO weekday, Monday=1

    @field_validator("timezone")
    @classmethod
    def _known_zone(cls, value: str) -> str:
        # UnknownTimezone is a ValueError -> surfaces as ValidationError
        get_default_resolver().resolve(value, 0)
        return value
