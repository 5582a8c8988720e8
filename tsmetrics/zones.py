"""Zone classification policy: metrics + thresholds -> GREEN / YELLOW / RED.

This module is the single source of truth for zoning. Table colouring, JSON
zone tags, display filtering and the exit status all derive from it.
"""

from __future__ import annotations

from typing import Callable, Iterable, List

from .config import Number, ThresholdConfig
from .models import ExitStatus, FileMetrics, RunOptions, Zone, ZonedMetrics

Predicate = Callable[[ZonedMetrics], bool]

_SEVERITY = {Zone.GREEN: 0, Zone.YELLOW: 1, Zone.RED: 2}


def mi_band(mi: Number, thresholds: ThresholdConfig) -> Zone:
    """Maintainability index: lower is worse, bounds are inclusive."""
    if mi <= thresholds.mi_red_max:
        return Zone.RED
    if mi <= thresholds.mi_yellow_max:
        return Zone.YELLOW
    return Zone.GREEN


def cc_band(cc: Number, thresholds: ThresholdConfig) -> Zone:
    """Cyclomatic complexity: higher is worse, bounds are inclusive."""
    if cc >= thresholds.cc_red_min:
        return Zone.RED
    if cc >= thresholds.cc_yellow_min:
        return Zone.YELLOW
    return Zone.GREEN


def coc_band(coc: Number, thresholds: ThresholdConfig) -> Zone:
    """Cognitive complexity: higher is worse, bounds are inclusive."""
    if coc >= thresholds.coc_red_min:
        return Zone.RED
    if coc >= thresholds.coc_yellow_min:
        return Zone.YELLOW
    return Zone.GREEN


def worst(zones: Iterable[Zone]) -> Zone:
    return max(zones, key=_SEVERITY.__getitem__, default=Zone.GREEN)


def classify(mi: Number, cc: Number, coc: Number, thresholds: ThresholdConfig) -> Zone:
    """Return the zone of a metric triple; the worst single metric wins."""
    return worst(
        (
            mi_band(mi, thresholds),
            cc_band(cc, thresholds),
            coc_band(coc, thresholds),
        )
    )


def zone_metrics(metrics: FileMetrics, thresholds: ThresholdConfig) -> ZonedMetrics:
    zone = classify(
        metrics.maintainability_index,
        metrics.cyclomatic_complexity,
        metrics.cognitive_complexity,
        thresholds,
    )
    return ZonedMetrics(metrics=metrics, zone=zone)


def zone_all(metrics: Iterable[FileMetrics], thresholds: ThresholdConfig) -> List[ZonedMetrics]:
    return [zone_metrics(item, thresholds) for item in metrics]


def select_predicate(options: RunOptions) -> Predicate:
    """Pick the display filter for a run; ``--all`` overrides ``--red``."""
    if options.show_all:
        return _show_everything
    if options.red_only:
        return _is_red
    return _is_flagged


def exit_status(records: Iterable[ZonedMetrics]) -> ExitStatus:
    """Exit status over the full, unfiltered record set."""
    if any(record.zone is Zone.RED for record in records):
        return ExitStatus.RED_ZONE
    return ExitStatus.SUCCESS


def _show_everything(record: ZonedMetrics) -> bool:
    return True


def _is_red(record: ZonedMetrics) -> bool:
    return record.zone is Zone.RED


def _is_flagged(record: ZonedMetrics) -> bool:
    return record.zone is not Zone.GREEN


__all__ = [
    "Predicate",
    "cc_band",
    "classify",
    "coc_band",
    "exit_status",
    "mi_band",
    "select_predicate",
    "zone_all",
    "zone_metrics",
]
