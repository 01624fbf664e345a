#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Logging setup for the unlatex command.

Library modules only create loggers below the ``unlatex`` namespace and never
install handlers. :func:`configure_logging` attaches the command's handlers to
that namespace logger, leaving the root logger of a host application alone.

Parse degradations are reported at DEBUG level with a line and column but no
file name. While an input is processed inside :func:`logging_input`, every
record carries an ``input_name`` attribute, and the trace format prints it so
that a degradation can be traced back to its file.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

PACKAGE_LOGGER_NAME = "unlatex"
NO_INPUT = "-"

DEFAULT_FORMAT = "%(levelname)s: %(message)s"
TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] [%(input_name)s] %(message)s"
TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Handlers installed here carry this name so a second call can replace them
_HANDLER_NAME = "unlatex.cli"

_current_input: ContextVar[str] = ContextVar("unlatex_current_input", default=NO_INPUT)


class InputNameFilter(logging.Filter):
    """Stamp each record with the name of the input being processed."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.input_name = _current_input.get()
        return True


@contextmanager
def logging_input(name: str) -> Iterator[None]:
    """Attribute log records emitted inside the block to input ``name``."""
    token = _current_input.set(name)
    try:
        yield
    finally:
        _current_input.reset(token)


def _resolve_level(log_level: int | str) -> int:
    if isinstance(log_level, int):
        return log_level
    level = logging.getLevelName(str(log_level).upper())
    return level if isinstance(level, int) else logging.INFO


def _make_handler(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.set_name(_HANDLER_NAME)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    handler.addFilter(InputNameFilter())
    return handler


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Send unlatex log records to stderr and optionally to a file.

    Calling this again replaces the handlers of the previous call. Records do
    not propagate to the root logger while the command's handlers are
    installed.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or level name (e.g., "INFO"); unknown names
        fall back to INFO
    log_file : str, optional
        Path of a file that receives a copy of the log output
    trace_mode : bool, default False
        Use the trace format with timestamps, logger and input names

    Returns
    -------
    logging.Logger
        The configured ``unlatex`` logger

    """
    resolved_level = _resolve_level(log_level)
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)

    for handler in list(package_logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            package_logger.removeHandler(handler)
            handler.close()

    package_logger.setLevel(resolved_level)
    package_logger.propagate = False

    if trace_mode:
        formatter = logging.Formatter(TRACE_FORMAT, datefmt=TRACE_DATE_FORMAT)
    else:
        formatter = logging.Formatter(DEFAULT_FORMAT)
    package_logger.addHandler(_make_handler(logging.StreamHandler(sys.stderr), resolved_level, formatter))

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            package_logger.warning("Could not create log file %s: %s", log_file, exc)
        else:
            package_logger.addHandler(_make_handler(file_handler, resolved_level, formatter))
            package_logger.info("Logging to file: %s", log_file)

    return package_logger
