"""Table and JSON rendering of zoned metrics."""

from __future__ import annotations

import json
from typing import IO, Callable, List, Sequence

from .config import Number, ThresholdConfig
from .models import ExitStatus, Zone, ZonedMetrics
from .zones import Predicate, cc_band, coc_band, exit_status, mi_band

NO_METRICS_NOTICE = "No metrics found."
NO_CHANGES_NOTICE = "No TypeScript files changed."

FILE_COLUMN_WIDTH = 60
_ROW_FORMAT = f"{{file:<{FILE_COLUMN_WIDTH}}}  {{mi}}  {{cc}}  {{coc}}  {{status}}"

_RESET = "\033[0m"
_COLORS = {
    Zone.RED: "\033[31m",
    Zone.YELLOW: "\033[33m",
    Zone.GREEN: "\033[32m",
}


def format_json(records: Sequence[ZonedMetrics]) -> str:
    """Render the ``{"metrics": [...]}`` document for already-filtered records."""
    return json.dumps({"metrics": [record.to_document() for record in records]}, indent=2)


def format_table(
    records: Sequence[ZonedMetrics],
    thresholds: ThresholdConfig,
    *,
    color: bool = False,
) -> str:
    """Render filtered records as a fixed-width table."""
    if not records:
        return NO_METRICS_NOTICE

    lines = [
        f"{'FILE':<{FILE_COLUMN_WIDTH}}  {'MI':>5}  {'CC':>2}  {'CoC':>3}  {'Sts':>3}",
        f"{'----':<{FILE_COLUMN_WIDTH}}  {'--':>5}  {'--':>2}  {'---':>3}  {'---':>3}",
    ]
    paint = _painter(color)
    for record in records:
        metrics = record.metrics
        lines.append(
            _ROW_FORMAT.format(
                file=_truncate(metrics.file_path),
                mi=paint(
                    f"{format_number(metrics.maintainability_index):>5}",
                    mi_band(metrics.maintainability_index, thresholds),
                ),
                cc=paint(
                    f"{metrics.cyclomatic_complexity:>2}",
                    cc_band(metrics.cyclomatic_complexity, thresholds),
                ),
                coc=paint(
                    f"{metrics.cognitive_complexity:>3}",
                    coc_band(metrics.cognitive_complexity, thresholds),
                ),
                status=paint(record.zone.value, record.zone, status=True),
            )
        )
    return "\n".join(lines)


def emit_results(
    records: Sequence[ZonedMetrics],
    predicate: Predicate,
    stream: IO[str],
    *,
    json_output: bool,
    thresholds: ThresholdConfig,
    color: bool = False,
) -> ExitStatus:
    """Write the filtered view of ``records`` and return the status of the full set."""
    visible = filter_records(records, predicate)
    if json_output:
        rendered = format_json(visible)
    else:
        rendered = format_table(visible, thresholds, color=color)
    stream.write(rendered + "\n")
    return exit_status(records)


def emit_no_changes(stream: IO[str], *, json_output: bool) -> ExitStatus:
    """Write the diff-mode "nothing changed" output."""
    stream.write((format_json([]) if json_output else NO_CHANGES_NOTICE) + "\n")
    return ExitStatus.SUCCESS


def filter_records(records: Sequence[ZonedMetrics], predicate: Predicate) -> List[ZonedMetrics]:
    return [record for record in records if predicate(record)]


def format_number(value: Number) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _truncate(path: str) -> str:
    if len(path) > FILE_COLUMN_WIDTH:
        return "..." + path[-(FILE_COLUMN_WIDTH - 3):]
    return path


def _painter(enabled: bool) -> Callable[..., str]:
    def paint(text: str, zone: Zone, *, status: bool = False) -> str:
        if not enabled:
            return text
        # Green metric cells stay uncoloured; only the status column shows green.
        if zone is Zone.GREEN and not status:
            return text
        return f"{_COLORS[zone]}{text}{_RESET}"

    return paint


__all__ = [
    "NO_CHANGES_NOTICE",
    "NO_METRICS_NOTICE",
    "emit_no_changes",
    "emit_results",
    "filter_records",
    "format_json",
    "format_table",
]
