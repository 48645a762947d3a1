import sys
from typing import Optional

from loguru import logger

from haven.config import get_config

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


class AppLogger:
    """Global logger configuration for the application.

    Sets the log level from get_config().log_level. The stderr sink is
    reinstalled only when that level changes.
    """
    _level: Optional[str] = None
    _sink_id: Optional[int] = None

    def __init__(self) -> None:
        log_level = get_config().log_level.upper()
        if AppLogger._level != log_level:
            if AppLogger._sink_id is None:
                logger.remove()
            else:
                logger.remove(AppLogger._sink_id)
            # Records logged without bind() still render {extra[name]}
            logger.configure(extra={"name": "haven"})
            AppLogger._sink_id = logger.add(sink=sys.stderr, level=log_level, format=LOG_FORMAT)
            AppLogger._level = log_level
        self.logger = logger

    def get_logger(self, name: Optional[str] = None):
        """Get the configured logger instance.

        Args:
            name (str, optional): Name for the logger context. Defaults to None.
        Returns:
            loguru.Logger: The configured logger instance.
        """
        if name:
            return self.logger.bind(name=name)
        return self.logger


def get_logger(name: Optional[str] = None):
    """Get a new application logger using the latest config."""
    return AppLogger().get_logger(name)
