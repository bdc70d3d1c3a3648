"""
Logging configuration helpers.
Release progress is reported through the standard `logging` module so it can be silenced or made verbose.
"""

from __future__ import annotations

import logging

_LOGGING_CONFIGURED = False

PLAIN_FORMAT = "%(message)s"
VERBOSE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level_name: str = "INFO", *, verbose: bool = False) -> None:
    """Configure process-wide logging once."""

    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    level = logging.DEBUG if verbose else getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format=VERBOSE_FORMAT if verbose else PLAIN_FORMAT,
    )
    _LOGGING_CONFIGURED = True
