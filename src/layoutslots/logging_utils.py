"""Logging setup for the ``layoutslots`` command line and embedding services.

Library modules only create ``logging.getLogger(__name__)`` loggers and
never install handlers. Entry points call :func:`configure_logging` once.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

PLAIN_FORMAT = "%(levelname)s: %(message)s"
TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Request lines from the template API client
HTTP_LOGGERS = ("httpx", "httpcore")


def resolve_log_level(log_level: int | str = "WARNING", verbose: bool = False, trace: bool = False) -> int:
    """Return the numeric level for the CLI logging flags.

    ``trace`` wins over ``verbose``, and ``verbose`` only lowers the level
    when no explicit level other than the default was requested.

    Parameters
    ----------
    log_level : int | str, default "WARNING"
        Numeric level or level name
    verbose : bool, default False
        Shortcut for DEBUG
    trace : bool, default False
        Trace mode, always DEBUG

    Returns
    -------
    int
        Numeric logging level

    Raises
    ------
    ValueError
        If ``log_level`` is not a known level name

    """
    if trace:
        return logging.DEBUG
    if isinstance(log_level, int):
        level = log_level
    else:
        level = logging.getLevelName(log_level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {log_level!r}")
    if verbose and level == logging.WARNING:
        return logging.DEBUG
    return level


def _attach(root_logger: logging.Logger, handler: logging.Handler, level: int, formatter: logging.Formatter) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Install the stderr handler (and optional file tee) on the root logger.

    Existing root handlers are replaced, so calling this again reconfigures
    logging rather than duplicating output.

    Parameters
    ----------
    log_level : int | str
        Numeric level or level name
    log_file : str, optional
        File that receives a copy of every record
    trace_mode : bool, default False
        Add timestamps and logger names, and keep HTTP client request logs

    Returns
    -------
    logging.Logger
        The root logger

    """
    level = resolve_log_level(log_level, trace=trace_mode)
    if trace_mode:
        formatter = logging.Formatter(TRACE_FORMAT, datefmt=TRACE_DATE_FORMAT)
    else:
        formatter = logging.Formatter(PLAIN_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    _attach(root_logger, logging.StreamHandler(sys.stderr), level, formatter)

    if log_file:
        try:
            _attach(root_logger, logging.FileHandler(log_file, mode="a", encoding="utf-8"), level, formatter)
        except OSError as exc:
            root_logger.warning("Could not open log file %s: %s", log_file, exc)
        else:
            root_logger.info("Logging to file: %s", log_file)

    http_level = level if trace_mode else max(level, logging.WARNING)
    for name in HTTP_LOGGERS:
        logging.getLogger(name).setLevel(http_level)

    return root_logger
