"""Pipeline orchestration for a single ts-metrics run."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import IO

from .config import resolve_config
from .engine import MetricsEngine, TsgEngine
from .fileset import resolve_file_set
from .git.changes import ChangeDetector
from .logging import get_logger
from .models import ExitStatus, RunOptions
from .project import locate_root
from .report import emit_no_changes, emit_results
from .zones import select_predicate, zone_all


class Orchestrator:
    """Runs locate -> configure -> resolve files -> measure -> classify -> report."""

    def __init__(
        self,
        engine: MetricsEngine | None = None,
        change_detector: ChangeDetector | None = None,
    ) -> None:
        self.engine = engine or TsgEngine()
        self.change_detector = change_detector or ChangeDetector()
        self.logger = get_logger("orchestrator")

    def run(
        self,
        options: RunOptions,
        *,
        cwd: Path | None = None,
        home: Path | None = None,
        stream: IO[str] | None = None,
        color: bool | None = None,
    ) -> ExitStatus:
        """Execute one analysis run and return the process exit status.

        Fatal problems (missing engine, no project root, invalid config, missing
        path, engine failure) propagate as ``TsMetricsError`` subclasses before
        anything is written to ``stream``.
        """
        cwd = Path(cwd) if cwd is not None else Path.cwd()
        home = Path(home) if home is not None else Path.home()
        out = stream if stream is not None else sys.stdout
        if color is None:
            color = bool(getattr(out, "isatty", lambda: False)())

        self.engine.ensure_available()
        root = locate_root(cwd)
        config = resolve_config(root, home, cwd)
        self.logger.debug(
            "Using %s with tsconfigs: %s",
            config.source or "built-in defaults",
            ", ".join(config.configs),
        )

        changed = self.change_detector.changed_files(root) if options.diff_mode else []
        file_set = resolve_file_set(options, root, config.configs, changed)
        if file_set.is_empty:
            self.logger.debug("No source files to analyse; skipping %s", self.engine.name)
            return emit_no_changes(out, json_output=options.json_output)

        raw = self.engine.compute(
            root,
            file_set.configs,
            file_set.includes,
            excludes=file_set.excludes,
        )
        records = zone_all(file_set.rewrite_results(raw), config.thresholds)
        self.logger.debug("Classified %d files", len(records))

        return emit_results(
            records,
            select_predicate(options),
            out,
            json_output=options.json_output,
            thresholds=config.thresholds,
            color=color,
        )


__all__ = ["Orchestrator"]
