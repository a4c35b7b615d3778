"""Logging setup for applications that display maestromd notes."""

from __future__ import annotations

import logging
import sys
from typing import Optional

# Loggers of the HTTP stack used by the image loader
HTTP_LOGGERS = ("httpx", "httpcore")


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).upper(), logging.INFO)


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
    http_log_level: int | str = logging.WARNING,
) -> logging.Logger:
    """Install root handlers for a host application.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or name (e.g., "DEBUG" to see parse and
        render timings).
    log_file : str, optional
        Path of a file that receives a copy of the log output.
    trace_mode : bool, default False
        Add timestamps and logger names to each line.
    http_log_level : int | str, default logging.WARNING
        Level of the httpx and httpcore loggers. httpx logs every image
        request at INFO.

    Returns
    -------
    logging.Logger
        The root logger.

    """
    resolved_level = _resolve_level(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(resolved_level)
    root_logger.handlers.clear()

    if trace_mode:
        formatter = logging.Formatter(
            "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
        )
    else:
        formatter = logging.Formatter("%(levelname)s: %(message)s")

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    file_error: Optional[OSError] = None
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))
        except OSError as exc:
            file_error = exc

    for handler in handlers:
        handler.setLevel(resolved_level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for name in HTTP_LOGGERS:
        logging.getLogger(name).setLevel(_resolve_level(http_log_level))

    if file_error is not None:
        root_logger.warning("Could not open log file %s: %s", log_file, file_error)
    elif log_file:
        root_logger.info("Logging to file: %s", log_file)
    return root_logger
