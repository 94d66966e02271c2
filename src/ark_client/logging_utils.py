"""
Logging helpers for ark-client.

Defines the package logger and a setup function for console logging.
"""

from __future__ import annotations

import logging
import sys

LOG = logging.getLogger("ark_client")

# Verbosity levels
VERBOSITY_QUIET = 0    # Warnings and errors only (default)
VERBOSITY_NORMAL = 1   # Progress messages
VERBOSITY_VERBOSE = 2  # HTTP request detail

_LEVEL_NAMES = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def resolve_level(verbosity: int, log_level: str | None = None) -> int:
    """
    Map a ``-v`` count and an optional configured level name to a level.

    The more verbose of the two wins.
    """
    if verbosity >= VERBOSITY_VERBOSE:
        level = logging.DEBUG
    elif verbosity >= VERBOSITY_NORMAL:
        level = logging.INFO
    else:
        level = logging.WARNING
    if log_level:
        level = min(level, _LEVEL_NAMES.get(log_level.lower(), level))
    return level


def setup_logging(verbosity: int = VERBOSITY_QUIET, log_level: str | None = None, stream=None) -> None:
    level = resolve_level(verbosity, log_level)
    LOG.setLevel(level)

    # Replace our own handler on repeated calls (tests call main() many times)
    for handler in list(LOG.handlers):
        if getattr(handler, "_ark_client", False):
            LOG.removeHandler(handler)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(level)
    if level <= logging.DEBUG:
        handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    handler._ark_client = True  # type: ignore[attr-defined]
    LOG.addHandler(handler)
