"""Logging utilities for ts-metrics runs."""

from __future__ import annotations

import logging
import sys
from typing import IO

_LOGGER_NAME = "tsmetrics"
_PREFIX = "[ts-metrics]"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the tsmetrics hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(*, verbose: bool = False, stream: IO[str] | None = None) -> logging.Logger:
    """Send tsmetrics diagnostics to ``stream`` (stderr by default).

    Reports are written to stdout, so diagnostics stay on a separate stream and
    ``--json`` output remains parseable. Verbose runs also show the emitting
    component.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers so repeated CLI invocations in one process do not duplicate output.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(level)
    if verbose:
        fmt = f"{_PREFIX} %(levelname)s %(name)s: %(message)s"
    else:
        fmt = f"{_PREFIX} %(levelname)s %(message)s"
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)
    return logger


__all__ = ["configure_logging", "get_logger"]
