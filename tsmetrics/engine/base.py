"""Base classes for metrics engine adapters."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Sequence

from ..errors import TsMetricsError
from ..models import FileMetrics


class EngineError(TsMetricsError):
    """Raised when the engine fails or returns output that cannot be parsed."""


class EngineUnavailableError(EngineError):
    """Raised when the engine executable is not installed."""


class MetricsEngine(ABC):
    """Contract for tools that compute per-file complexity metrics."""

    name: str = "engine"

    @abstractmethod
    def ensure_available(self) -> None:
        """Raise EngineUnavailableError when the engine cannot be invoked."""

    @abstractmethod
    def compute(
        self,
        root: Path,
        configs: Sequence[str],
        includes: Sequence[str],
        excludes: Sequence[str] = (),
    ) -> List[FileMetrics]:
        """Return metrics for ``includes`` analysed under the given tsconfig refs."""
