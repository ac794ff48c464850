#!filepath: minclock/utils/logger.py
import os
import sys
from contextlib import suppress
from functools import wraps
from time import perf_counter
from typing import Callable, List, Optional

from loguru import logger


class Logging:
    """
    Library logger (loguru)
    ---------------------------------------
    - installs nothing on import; loguru's own defaults (or the host's sinks) apply
    - configure(): stderr sink (WARNING) + optional file sink with rotation / retention
    - only handlers added here are ever removed
    - catch() decorator for entry points
    ---------------------------------------
    """

    # handler ids owned by the library, shared across instances
    _handler_ids: List[int] = []

    def __init__(
        self,
        log_dir: Optional[str] = None,
        rotation: str = "1 day",
        retention: str = "30 days",
        log_level: str = "WARNING",
        configure: bool = True,
    ):
        self.log_dir = log_dir
        self.rotation = rotation
        self.retention = retention
        self.level = log_level

        if configure:
            self._configure()

    @classmethod
    def _remove_own_handlers(cls) -> None:
        while cls._handler_ids:
            handler_id = cls._handler_ids.pop()
            # the host may already have called logger.remove()
            with suppress(ValueError):
                logger.remove(handler_id)

    def _configure(self) -> None:
        """
        Replace the handlers this library installed earlier with this instance's sinks.
        """
        self._remove_own_handlers()

        self._handler_ids.append(logger.add(
            sink=sys.stderr,
            level=self.level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}",
        ))

        if self.log_dir:
            os.makedirs(self.log_dir, exist_ok=True)
            self._handler_ids.append(logger.add(
                sink=f"{self.log_dir}/{{time:YYYY-MM-DD}}.log",
                rotation=self.rotation,
                retention=self.retention,
                level=self.level,
                format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}",
                enqueue=True,  # 多进程安全
                backtrace=True,
                diagnose=True,
            ))
            logger.info(f"[Logging] file sink at {self.log_dir}")

    # ---------- 基础接口封装 ----------
    def debug(self, msg: str, *args, **kwargs):
        logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        logger.error(msg, *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs):
        logger.exception(msg, *args, **kwargs)

    # ---------- 日志装饰器 ----------
    def catch(
        self,
        msg: str = "Exception occurred",
        log_inputs: bool = False,
        log_time: bool = False,
    ) -> Callable:

        def decorator(func: Callable):
            @wraps(func)
            def wrapper(*args, **kwargs):

                if log_inputs:
                    logger.debug(f"[CALL] {func.__name__} args={args}, kwargs={kwargs}")

                start = perf_counter()

                try:
                    result = func(*args, **kwargs)
                except Exception:
                    logger.exception(f"[ERROR] {func.__name__}: {msg}")
                    raise

                if log_time:
                    cost = perf_counter() - start
                    logger.debug(f"[TIME] {func.__name__} took {cost:.4f}s")

                return result

            return wrapper

        return decorator


# 默认全局 logs：导入时不改动任何 handler（可被 init_logging 替换）
logs = Logging(configure=False)


def init_logging(config) -> Logging:
    """
    Reconfigure the library's sinks from a LogConfig.
    Sinks added by the host application are left alone.
    The module-level `logs` object keeps working: it forwards to loguru.
    """
    global logs
    logs = Logging(
        log_dir=config.dir if config.to_file else None,
        rotation=config.rotation,
        retention=config.retention,
        log_level=config.level,
    )
    return logs
