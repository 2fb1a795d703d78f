"""
Logging Configuration
=====================
Routes the `transientview.*` loggers to the console and, on request, to a
log file.

Why is this file needed?
------------------------
Every module logs through `logging.getLogger(__name__)`. The loader reports
each observable it builds or skips, so a user can see from the log why a plot
is missing. This module is the single place where those records get handlers
and a format; it is called once from `main()` with the level chosen on the
command line.
"""
from __future__ import annotations

import logging
from pathlib import Path
import sys
from typing import Optional

LOGGER_NAME = "transientview"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATEFMT = "%H:%M:%S"


def _attach(logger: logging.Logger, handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
    logger.addHandler(handler)


def setup_logging(level: int | str = logging.INFO, log_file: Optional[str | Path] = None) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        level: A logging level, as a number or a name such as "DEBUG".
        log_file: Also write the log to this file (overwritten on each run).

    Returns:
        The `transientview` logger.
    """
    if isinstance(level, str):
        name, level = level, logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {name!r}")

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # a second call replaces the handlers of the first
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    _attach(logger, logging.StreamHandler(sys.stdout), level)
    if log_file is not None:
        _attach(logger, logging.FileHandler(log_file, mode="w", encoding="utf-8"), level)

    logger.debug(f"Logging at level {logging.getLevelName(level)}" + (f", file {log_file}" if log_file else ""))
    return logger
