"""Tests for tsmetrics logging setup."""

from __future__ import annotations

import io

from tsmetrics.logging import configure_logging, get_logger


def test_info_level_hides_debug_and_omits_component() -> None:
    stream = io.StringIO()
    configure_logging(stream=stream)

    get_logger("engine.tsg").debug("hidden")
    get_logger("engine.tsg").warning("tsconfig not found: %s", "web/tsconfig.json")

    assert stream.getvalue() == "[ts-metrics] WARNING tsconfig not found: web/tsconfig.json\n"


def test_verbose_shows_debug_with_component() -> None:
    stream = io.StringIO()
    configure_logging(verbose=True, stream=stream)

    get_logger("config").debug("Loading configuration from %s", ".ts-metrics.rc")

    assert stream.getvalue() == "[ts-metrics] DEBUG tsmetrics.config: Loading configuration from .ts-metrics.rc\n"


def test_reconfiguring_does_not_duplicate_output() -> None:
    stream = io.StringIO()
    configure_logging(stream=stream)
    logger = configure_logging(stream=stream)

    get_logger("git").info("once")

    assert len(logger.handlers) == 1
    assert stream.getvalue().count("once") == 1
