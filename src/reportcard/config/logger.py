"""Package-wide logging.

Every module logs through a child of the ``reportcard`` logger so one call to
:func:`set_level` tunes the whole app and the CLI together.
"""

import logging
import sys

from reportcard.config.settings import settings

PACKAGE_LOGGER = "reportcard"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _level(name: str) -> int:
    value = logging.getLevelName(name.upper())
    return value if isinstance(value, int) else logging.INFO


def _package_logger() -> logging.Logger:
    logger = logging.getLogger(PACKAGE_LOGGER)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(_level(settings.log_level))
    return logger


def set_level(name: str) -> None:
    _package_logger().setLevel(_level(name))


def get_logger(name: str | None = None) -> logging.Logger:
    logger = _package_logger()
    return logger.getChild(name) if name else logger
