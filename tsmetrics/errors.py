"""Base exception for ts-metrics failures that abort a run."""

from __future__ import annotations


class TsMetricsError(RuntimeError):
    """Raised for fatal conditions; the CLI maps these to exit status 1."""


__all__ = ["TsMetricsError"]
