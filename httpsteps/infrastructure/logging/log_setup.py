from typing import Optional

from loguru import logger

from httpsteps.infrastructure.config.settings import load_settings


def setup_console_logging(level: Optional[str] = None) -> None:
    """
    Route httpsteps logs to stdout. Without ``level`` the HTTPSTEPS_LOG_LEVEL
    setting is used.
    """
    if level is None:
        level = load_settings().log_level
    logger.remove()
    logger.add(lambda msg: print(msg, end=""), level=level)
    logger.enable("httpsteps")
