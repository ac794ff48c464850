#!filepath: minclock/config/app_config.py
import os
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel

from .clock_config import ClockConfig
from .humanize_config import HumanizeConfig
from .log_config import LogConfig
from minclock.utils.logger import logs

ENV_OVERRIDES = {
    "MINCLOCK_TIMEZONE": ("clock", "timezone"),
    "MINCLOCK_WEEK_START": ("clock", "week_start"),
    "MINCLOCK_LOCALE": ("humanize", "locale"),
    "MINCLOCK_LOG_LEVEL": ("log", "level"),
}


def project_root() -> str:
    """
    Directory holding the packaged defaults:
    minclock/config/app_config.py → minclock/config
    """
    return os.path.abspath(os.path.dirname(__file__))


class AppConfig(BaseModel):
    log: LogConfig
    clock: ClockConfig
    humanize: HumanizeConfig

    @classmethod
    def load(cls, path: Optional[str] = None, env_file: Optional[str] = None) -> "AppConfig":
        """
        加载 YAML 配置 + .env
        - 默认使用 minclock/config/base.yml
        - .env 默认取当前工作目录，MINCLOCK_* 变量覆盖 YAML
        """
        # 1) .env first, real environment variables still win
        load_dotenv(env_file or os.path.join(os.getcwd(), ".env"))

        # 2) 决定配置文件路径
        if path is None:
            path = os.path.join(project_root(), "base.yml")

        if not os.path.exists(path):
            raise FileNotFoundError(f"Config file not found: {path}")

        # 3) 读取 YAML
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        # 4) env overrides
        for var, (section, key) in ENV_OVERRIDES.items():
            value = os.getenv(var)
            if value:
                raw.setdefault(section, {})[key] = value

        cfg = cls(**raw)
        logs.info(f"[AppConfig] loaded {path} (timezone={cfg.clock.timezone}, locale={cfg.humanize.locale})")
        return cfg

    def build_clock(self):
        from minclock.clock import Clock

        return Clock.from_config(self.clock)

    def build_formatter(self):
        from minclock.humanize.relative import RelativeFormatter, TemplateCatalog

        if self.humanize.catalog:
            catalog = TemplateCatalog.from_yaml(self.humanize.catalog)
        else:
            catalog = TemplateCatalog()
        return RelativeFormatter(catalog, default_locale=self.humanize.locale)

    def apply(self) -> None:
        """Install logging, default clock and default relative formatter process-wide."""
        from minclock.clock import set_default_clock
        from minclock.humanize.relative import set_default_formatter
        from minclock.utils.logger import init_logging

        init_logging(self.log)
        set_default_clock(self.build_clock())
        set_default_formatter(self.build_formatter())
