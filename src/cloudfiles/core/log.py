"""Logging setup for cloudfiles commands."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: int = logging.WARNING) -> None:
    """Configure the cloudfiles logger to write to stderr.

    Command output goes to stdout, so log records never mix with it.

    Args:
        level: Logging level for the cloudfiles logger.
    """
    root_logger = logging.getLogger("cloudfiles")
    root_logger.setLevel(level)

    if not root_logger.handlers:
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(stderr_handler)
