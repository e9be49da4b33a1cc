"""
Logging configuration for dbroad.

Provides standardized logging setup for the library and the command-line tool.
"""

import logging
import sys
from typing import Optional

DEFAULT_FORMAT = "[%(asctime)s] %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str = "INFO",
    format_string: Optional[str] = None,
    stream: Optional[object] = None,
    capture_warnings: bool = True,
) -> None:
    """
    Configure logging for dbroad.

    Parameters
    ----------
    level : str
        Logging level: 'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'
    format_string : str, optional
        Custom format string. If None, uses default format.
    stream : file-like object, optional
        Stream to write logs to. If None, uses sys.stderr.
    capture_warnings : bool
        Route ``warnings.warn`` output (e.g. DomainWarning) through the
        ``py.warnings`` logger so it shares the same handler and format.
    """
    if format_string is None:
        format_string = DEFAULT_FORMAT

    if stream is None:
        stream = sys.stderr

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=format_string,
        stream=stream,
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    logging.captureWarnings(capture_warnings)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Parameters
    ----------
    name : str
        Logger name relative to the package, e.g. ``"kinematics.broadening"``

    Returns
    -------
    logging.Logger
        Logger instance named ``dbroad.<name>``
    """
    return logging.getLogger(f"dbroad.{name}")
