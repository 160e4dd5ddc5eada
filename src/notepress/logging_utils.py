#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/notepress/logging_utils.py
"""Logging setup for applications embedding notepress.

Every notepress module logs through ``logging.getLogger(__name__)``. The
builder reports the selected stages and the runner reports each stage (with
its duration) at DEBUG. :func:`configure_logging` installs handlers on the
root logger and can turn that stage trace on without lowering the level of
everything else.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

PIPELINE_LOGGER_NAMES = ("notepress.pipeline.builder", "notepress.pipeline.runner")

DEFAULT_FORMAT = "%(levelname)s: %(message)s"
TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(log_level: int | str) -> int:
    """Return the numeric level for ``log_level``; unknown names give INFO."""
    if isinstance(log_level, int):
        return log_level
    level = getattr(logging, str(log_level).upper(), logging.INFO)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
    trace_stages: bool = False,
) -> logging.Logger:
    """Configure root logging handlers.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or string name (e.g., "INFO").
    log_file : str, optional
        Also append log output to this file.
    trace_mode : bool, default False
        Emit timestamps and logger names.
    trace_stages : bool, default False
        Log pipeline construction and every stage run at DEBUG, whatever
        ``log_level`` is.

    Returns
    -------
    logging.Logger
        The configured root logger.

    """
    resolved_level = resolve_level(log_level)
    handler_level = min(resolved_level, logging.DEBUG) if trace_stages else resolved_level

    root_logger = logging.getLogger()
    root_logger.setLevel(resolved_level)
    root_logger.handlers.clear()

    if trace_mode:
        formatter = logging.Formatter(TRACE_FORMAT, datefmt=TRACE_DATE_FORMAT)
    else:
        formatter = logging.Formatter(DEFAULT_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(handler_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            root_logger.warning("Could not create log file %s: %s", log_file, exc)
        else:
            file_handler.setLevel(handler_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
            root_logger.info("Logging to file: %s", log_file)

    for name in PIPELINE_LOGGER_NAMES:
        logging.getLogger(name).setLevel(logging.DEBUG if trace_stages else logging.NOTSET)

    return root_logger
