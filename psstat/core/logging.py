"""
Logging configuration for psstat.

Metric lines go to stdout, so every diagnostic is routed to stderr.
"""
from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

_FORMAT = "%(levelname).1s! %(message)s"


def setup_logger(
    name: str = "psstat",
    level: int = logging.WARNING,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configure and return the package logger.

    Args:
        name: Logger name (the package root so module loggers inherit it)
        level: Logging level (default: WARNING)
        stream: Output stream (default: stderr)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=_FORMAT))
    logger.addHandler(handler)

    logger.propagate = False
    return logger
