#!filepath: minclock/config/humanize_config.py
from typing import Optional

from pydantic import BaseModel


class HumanizeConfig(BaseModel):
    locale: str = "en"
    catalog: Optional[str] = None   # YAML locale tables, merged over the built-in "en"
