"""Core data models shared across ts-metrics components."""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Dict, List, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class Zone(Enum):
    """Health zone of a file; values are the labels used in rendered output."""

    GREEN = "GRN"
    YELLOW = "YLW"
    RED = "RED"


class ExitStatus(IntEnum):
    """Process exit codes understood by CI pipelines."""

    SUCCESS = 0
    ERROR = 1
    RED_ZONE = 2


class FileMetrics(BaseModel):
    """Metrics reported by the external engine for a single file."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    file_path: str = Field(alias="filePath")
    maintainability_index: Union[int, float] = Field(alias="maintainabilityIndex")
    cyclomatic_complexity: int = Field(alias="cyclomaticComplexity", ge=0)
    cognitive_complexity: int = Field(alias="cognitiveComplexity", ge=0)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class MetricsDocument(BaseModel):
    """Top-level document emitted by the engine (`{"metrics": [...]}`)."""

    metrics: List[FileMetrics] = Field(default_factory=list)


@dataclass(frozen=True)
class ZonedMetrics:
    """A file's metrics paired with the zone derived from them."""

    metrics: FileMetrics
    zone: Zone

    def to_document(self) -> Dict[str, Any]:
        document = self.metrics.to_document()
        document["zone"] = self.zone.value
        return document


@dataclass(frozen=True)
class RunOptions:
    """Per-invocation flags parsed from the command line."""

    show_all: bool = False
    json_output: bool = False
    red_only: bool = False
    explicit_paths: Tuple[str, ...] = ()

    @property
    def diff_mode(self) -> bool:
        return not self.explicit_paths
