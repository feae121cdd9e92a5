#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Logging setup for bbtransform entry points.

Library modules only create module-level loggers below the ``bbtransform``
package logger. Handlers are attached to that package logger, by an entry
point, and nowhere else, so embedding applications keep full control of the
root logger.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

PACKAGE_LOGGER_NAME = "bbtransform"

_CONSOLE_HANDLER_NAME = f"{PACKAGE_LOGGER_NAME}.console"
_FILE_HANDLER_NAME = f"{PACKAGE_LOGGER_NAME}.file"
_PLAIN_FORMAT = "%(levelname)s: %(message)s"
_TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
_TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(log_level: int | str) -> int:
    if isinstance(log_level, int):
        return log_level
    level = logging.getLevelName(str(log_level).upper())
    return level if isinstance(level, int) else logging.INFO


def _remove_installed_handlers(package_logger: logging.Logger) -> None:
    """Detach and close the handlers a previous call attached."""
    for handler in list(package_logger.handlers):
        if handler.get_name() in (_CONSOLE_HANDLER_NAME, _FILE_HANDLER_NAME):
            package_logger.removeHandler(handler)
            handler.close()


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Attach console and optional file handlers to the ``bbtransform`` logger.

    Calling this again replaces the handlers installed by the previous call;
    those are closed, so repeated CLI runs in one process do not leak open
    log files. Handlers added by other code are left untouched.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or level name (e.g., "DEBUG"). Unknown names
        fall back to INFO.
    log_file : str, optional
        Path of a file that receives the same records as stderr. A file that
        cannot be opened is reported as a warning and skipped.
    trace_mode : bool, default False
        Include timestamps and logger names in every record.

    Returns
    -------
    logging.Logger
        The configured ``bbtransform`` package logger.

    """
    level = _resolve_level(log_level)
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.setLevel(level)
    _remove_installed_handlers(package_logger)

    if trace_mode:
        formatter = logging.Formatter(_TRACE_FORMAT, datefmt=_TRACE_DATE_FORMAT)
    else:
        formatter = logging.Formatter(_PLAIN_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.set_name(_CONSOLE_HANDLER_NAME)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    if not log_file:
        return package_logger

    try:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    except OSError as exc:
        package_logger.warning("Could not open log file %s: %s", log_file, exc)
        return package_logger

    file_handler.set_name(_FILE_HANDLER_NAME)
    file_handler.setFormatter(formatter)
    package_logger.addHandler(file_handler)
    package_logger.info("Logging to file: %s", log_file)
    return package_logger
