"""Metrics engine adapters."""

from .base import EngineError, EngineUnavailableError, MetricsEngine
from .tsg import EngineRun, TsgEngine

__all__ = ["EngineError", "EngineRun", "EngineUnavailableError", "MetricsEngine", "TsgEngine"]
