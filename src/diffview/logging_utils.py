#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Logging setup for the diffview command line entry point.

Library modules only create module-level loggers under the ``diffview``
namespace. :func:`configure_logging` attaches handlers to that package
logger, never to the root logger, so an application embedding diffview
keeps its own logging configuration untouched.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from diffview.exceptions import ValidationError

PACKAGE_LOGGER = "diffview"

LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
PLAIN_FORMAT = "%(levelname)s: %(message)s"

# Marks handlers installed here, so reconfiguring only replaces our own
_HANDLER_FLAG = "_diffview_handler"


def resolve_log_level(log_level: int | str) -> int:
    """Turn a level name such as ``"warning"`` into its numeric value.

    Raises
    ------
    ValidationError
        If the name is not one of :data:`LOG_LEVELS`

    """
    if isinstance(log_level, int):
        return log_level
    name = str(log_level).upper()
    if name not in LOG_LEVELS:
        raise ValidationError(
            f"Unknown log level {log_level!r}; expected one of {', '.join(LOG_LEVELS)}",
            parameter_name="log_level",
            parameter_value=log_level,
        )
    return getattr(logging, name)


def _install(logger: logging.Logger, handler: logging.Handler, level: int, formatter: logging.Formatter) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    setattr(handler, _HANDLER_FLAG, True)
    logger.addHandler(handler)


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Route diffview's log records to stderr and, optionally, a file.

    Calling it again replaces the handlers of the previous call. Records
    stop propagating to the root logger while diffview's own handlers are
    installed, so nothing is printed twice.

    Parameters
    ----------
    log_level : int | str
        Numeric level or one of the names in :data:`LOG_LEVELS`
    log_file : str, optional
        File that receives the same records as stderr (appended to)
    trace_mode : bool, default False
        Include timestamps and logger names in every record

    Returns
    -------
    logging.Logger
        The ``diffview`` package logger

    Raises
    ------
    ValidationError
        If ``log_level`` is an unknown name

    """
    level = resolve_log_level(log_level)
    package_logger = logging.getLogger(PACKAGE_LOGGER)

    for handler in [h for h in package_logger.handlers if getattr(h, _HANDLER_FLAG, False)]:
        package_logger.removeHandler(handler)
        handler.close()

    package_logger.setLevel(level)
    package_logger.propagate = False

    formatter = logging.Formatter(
        TRACE_FORMAT if trace_mode else PLAIN_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S" if trace_mode else None,
    )
    _install(package_logger, logging.StreamHandler(sys.stderr), level, formatter)

    if log_file:
        try:
            _install(package_logger, logging.FileHandler(log_file, mode="a", encoding="utf-8"), level, formatter)
        except OSError as exc:
            package_logger.warning("Could not open log file %s: %s", log_file, exc)
        else:
            package_logger.info("Logging to file: %s", log_file)

    return package_logger
