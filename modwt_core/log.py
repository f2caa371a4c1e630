# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Logging setup for scripts built on the MODWT engine.

The library itself only creates named loggers; handlers are installed by
the application, e.g. via configure_logging().
"""

import os
import logging
from typing import Optional, Union

ENV_LOG_LEVEL = "MODWT_LOG_LEVEL"

_LEVEL_ALIASES = {
    "TRACE": logging.DEBUG,
    "FINEST": logging.DEBUG,
    "FINER": logging.DEBUG,
    "FINE": logging.DEBUG,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "SEVERE": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
    "OFF": logging.CRITICAL + 10,
}


def parse_level(level: Optional[Union[str, int]]) -> int:
    """Translate a textual or numeric level; unknown names map to INFO."""
    if level is None:
        return logging.INFO
    if isinstance(level, int):
        return level
    return _LEVEL_ALIASES.get(level.strip().upper(), logging.INFO)


def configure_logging(level: Optional[Union[str, int]] = None) -> int:
    """
    Configure root logging for a script.

    Args:
        level: Explicit level; when omitted MODWT_LOG_LEVEL is consulted

    Returns:
        int: The numeric level applied
    """
    if level is None:
        level = os.environ.get(ENV_LOG_LEVEL)
    numeric = parse_level(level)
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger().setLevel(numeric)
    return numeric
