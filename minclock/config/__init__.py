from .app_config import AppConfig, project_root
from .clock_config import ClockConfig
from .humanize_config import HumanizeConfig
from .log_config import LogConfig

__all__ = ["AppConfig", "ClockConfig", "HumanizeConfig", "LogConfig", "project_root"]
