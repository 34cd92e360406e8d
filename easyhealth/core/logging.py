"""Application logging."""

import logging
import sys

from easyhealth.config import settings


LOGGER_NAME = "easyhealth"

# Third-party loggers that are chatty at INFO
QUIET_LOGGERS = ("pymongo", "passlib", "multipart")


def _resolve_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging() -> logging.Logger:
    """
    Attach a stdout handler to the "easyhealth" logger.

    Feature modules share this one logger; every line carries the level and
    a timestamp, and in production the logger name is dropped.
    """
    level = _resolve_level(settings.LOG_LEVEL)

    app_logger = logging.getLogger(LOGGER_NAME)
    app_logger.setLevel(level)
    app_logger.propagate = False

    if not app_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        if settings.ENVIRONMENT == "production":
            fmt = "%(asctime)s %(levelname)s %(message)s"
        else:
            fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        handler.setFormatter(logging.Formatter(fmt, datefmt="%Y-%m-%d %H:%M:%S"))
        app_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    app_logger.debug(f"Logging ready at {logging.getLevelName(level)} ({settings.ENVIRONMENT})")
    return app_logger


logger = setup_logging()
