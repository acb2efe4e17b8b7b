"""
Logging setup for Butiki.

Diagnostics go to stderr through the "butiki" logger hierarchy, with an
optional rotating log file. Command results stay on stdout via print().
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional, Union

from constants import DEFAULT_LOG_LEVEL, LOG_BACKUP_COUNT, LOG_LEVELS, LOG_MAX_BYTES

LOGGER_NAME = "butiki"


def parse_level(level: Union[str, int, None]) -> int:
    if isinstance(level, int):
        return level
    name = (level or DEFAULT_LOG_LEVEL).upper()
    if name not in LOG_LEVELS:
        name = DEFAULT_LOG_LEVEL
    return getattr(logging, name)


def init_logger(
    level: Union[str, int, None] = DEFAULT_LOG_LEVEL,
    logfile: Optional[str] = None,
) -> logging.Logger:
    """
    Initialize the butiki logger.

    Console: stderr, "[LEVEL] message", at the given level.
    File (optional): rotating, UTF-8, DEBUG with timestamps.
    """
    level = parse_level(level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    for handler in [h for h in logger.handlers if type(h) is logging.StreamHandler]:
        logger.removeHandler(handler)

    console = logging.StreamHandler(stream=sys.stderr)
    console.setLevel(level)
    console.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    logger.addHandler(console)

    if logfile and not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        try:
            file_handler = RotatingFileHandler(
                logfile, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8"
            )
        except OSError as e:
            logger.warning("Could not open log file %s: %s", logfile, e)
        else:
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(
                logging.Formatter(
                    "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                )
            )
            logger.addHandler(file_handler)

    return logger
