"""Process-wide logging for the availability engine."""

from __future__ import annotations

import logging
import sys
from typing import Optional

from dept_scheduler.utils.config import get_settings


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
PACKAGE_LOGGER = "dept_scheduler"

_LOGGER_INITIALIZED = False


def configure_logging(level: Optional[str] = None) -> None:
    """Install the stdout handler once, then only retune the package level.

    Skipped commitments log at DEBUG, so ``configure_logging("DEBUG")`` after
    startup is how an operator sees why rows were dropped.
    """

    global _LOGGER_INITIALIZED
    if _LOGGER_INITIALIZED:
        if level:
            logging.getLogger(PACKAGE_LOGGER).setLevel(level.upper())
        return

    resolved_level = (level or get_settings().log_level).upper()
    logging.basicConfig(level=resolved_level, format=LOG_FORMAT, stream=sys.stdout)
    logging.getLogger(PACKAGE_LOGGER).setLevel(resolved_level)
    _LOGGER_INITIALIZED = True


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(name)
