"""Logging setup for tidier.

Library modules only create loggers; handlers are installed by the command
line through :func:`setup_logging`.
"""

from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "[%(levelname)s] %(message)s"
DEBUG_LOG_FORMAT = "[%(levelname)s] [%(filename)s:%(lineno)d] [%(funcName)s] %(message)s"

ENV_LOG_LEVEL = "TIDIER_LOG_LEVEL"

_LEVEL_NAMES = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
    "FATAL": logging.CRITICAL,
    "NOTSET": logging.NOTSET,
}


def resolve_env_log_level() -> int | None:
    """Return the level named by ``TIDIER_LOG_LEVEL``, or None if unset or unknown.

    Accepts level names ("DEBUG", "info", ...) and numeric strings ("10").
    """
    val = os.environ.get(ENV_LOG_LEVEL)
    if not val:
        return None
    v = val.strip().upper()
    if v.isdigit():
        return int(v)
    return _LEVEL_NAMES.get(v)


def setup_logging(level: int | None = None) -> None:
    """Configure the root logger with a single stderr handler.

    If *level* is None the environment is consulted, falling back to WARNING.
    """
    if level is None:
        level = resolve_env_log_level()
    if level is None:
        level = logging.WARNING

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Drop earlier handlers so repeated calls do not duplicate output
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(LOG_FORMAT if level >= logging.INFO else DEBUG_LOG_FORMAT)
    )
    root_logger.addHandler(handler)
