"""
Logging Configuration Module
============================

Centralized logging configuration for runcost.

Console output goes through Rich on stderr so it never interleaves with the
report table on stdout. An optional plain-text file log can be added for
troubleshooting.

Example
-------
>>> from runcost.core.logging import setup_logging
>>>
>>> setup_logging(level="WARNING", log_file="runcost.log")
>>> logger = logging.getLogger(__name__)
>>> logger.warning("Failed to get price for i-0abc")
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

DEFAULT_FORMAT = "%(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

NOISY_LOGGERS = ("boto3", "botocore", "urllib3")


def setup_logging(
    level: Union[str, int] = "WARNING",
    log_file: Optional[str] = None,
    console: Optional[Console] = None,
) -> None:
    """
    Configure application-wide logging.

    Parameters
    ----------
    level : str or int, default="WARNING"
        Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    log_file : str, optional
        Path to a log file. Records are appended with timestamps.
    console : Console, optional
        Rich Console for the handler. Defaults to a stderr console.

    Notes
    -----
    Replaces any handlers already installed on the root logger, so calling
    it twice does not duplicate output.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    rich_console = console or Console(stderr=True)
    console_handler = RichHandler(
        console=rich_console,
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
        markup=False,
    )
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT)
        )
        root_logger.addHandler(file_handler)

    # Third-party libraries are chatty at INFO/DEBUG
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root_logger.debug(
        f"Logging configured: level={logging.getLevelName(level)}, "
        f"file={log_file or 'None'}"
    )
