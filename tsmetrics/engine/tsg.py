"""Adapter around the typescript-graph CLI (``tsg``)."""

from __future__ import annotations

import re
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from pydantic import ValidationError

from ..logging import get_logger
from ..models import FileMetrics, MetricsDocument
from ..project import TSCONFIG_FILENAME, normalize_config_ref
from .base import EngineError, EngineUnavailableError, MetricsEngine

_MISSING_TSCONFIG = re.compile(r"Cannot find tsconfig (\S+)")
_BANNER_PREFIX = "==="

logger = get_logger("engine.tsg")


@dataclass
class EngineRun:
    """Captured result of one engine process."""

    returncode: int
    stdout: str
    stderr: str = ""

    @property
    def diagnostics(self) -> str:
        return f"{self.stdout}\n{self.stderr}"


class TsgEngine(MetricsEngine):
    """Runs ``tsg --stdout metrics`` and parses its JSON document."""

    name = "tsg"
    INSTALL_HINT = "Install it with: npm install -g typescript-graph"

    def __init__(
        self,
        executable: str = "tsg",
        *,
        runner: Callable[[Sequence[str], Path], EngineRun] | None = None,
        which: Callable[[str], Optional[str]] = shutil.which,
    ) -> None:
        self.executable = executable
        self._runner = runner or self._subprocess_runner
        self._which = which

    def ensure_available(self) -> None:
        if self._which(self.executable) is None:
            raise EngineUnavailableError(
                f"{self.executable} CLI is required but not installed. {self.INSTALL_HINT}"
            )

    def compute(
        self,
        root: Path,
        configs: Sequence[str],
        includes: Sequence[str],
        excludes: Sequence[str] = (),
    ) -> List[FileMetrics]:
        root = Path(root)
        run = self._runner(self.build_command(configs, includes, excludes), root)

        missing = self.missing_configs(run.diagnostics)
        if missing:
            for tsconfig in missing:
                logger.warning("tsconfig not found: %s", tsconfig)
            remaining = self._remaining_configs(root, configs, missing)
            if not remaining:
                logger.warning("No usable tsconfig remains; skipping metrics collection")
                return []
            logger.debug("Retrying %s with %d tsconfig(s)", self.executable, len(remaining))
            run = self._runner(self.build_command(remaining, includes, excludes), root)
            still_missing = self.missing_configs(run.diagnostics)
            if still_missing:
                raise EngineError(
                    f"{self.executable} still cannot find tsconfig: {', '.join(still_missing)}"
                )

        if run.returncode != 0:
            detail = run.stderr.strip() or run.stdout.strip()
            raise EngineError(
                f"{self.executable} failed with exit code {run.returncode}: {detail}"
            )
        return self.parse_output(run.stdout)

    def build_command(
        self,
        configs: Sequence[str],
        includes: Sequence[str],
        excludes: Sequence[str] = (),
    ) -> List[str]:
        args = [self.executable]
        for ref in configs:
            # Point at the file itself so tsg does not scan the directory recursively.
            args.extend(["--tsconfig", f"{ref}/{TSCONFIG_FILENAME}"])
        args.extend(["--stdout", "metrics", "--include", *includes])
        if excludes:
            args.extend(["--exclude", *excludes])
        return args

    @staticmethod
    def missing_configs(diagnostics: str) -> List[str]:
        """Extract tsconfig paths the engine reported as missing, in first-seen order."""
        missing: List[str] = []
        for match in _MISSING_TSCONFIG.finditer(diagnostics):
            path = match.group(1)
            if path not in missing:
                missing.append(path)
        return missing

    @staticmethod
    def parse_output(stdout: str) -> List[FileMetrics]:
        payload = "\n".join(
            line for line in stdout.splitlines() if not line.startswith(_BANNER_PREFIX)
        ).strip()
        if not payload:
            logger.debug("Engine produced no output; treating as empty metrics")
            return []
        try:
            document = MetricsDocument.model_validate_json(payload)
        except ValidationError as exc:
            raise EngineError(f"Engine returned malformed metrics output: {exc}") from exc
        return list(document.metrics)

    @staticmethod
    def _remaining_configs(root: Path, configs: Sequence[str], missing: Sequence[str]) -> List[str]:
        missing_refs = {normalize_config_ref(path) for path in missing}
        return [
            ref
            for ref in configs
            if ref not in missing_refs and (root / ref / TSCONFIG_FILENAME).is_file()
        ]

    def _subprocess_runner(self, args: Sequence[str], cwd: Path) -> EngineRun:
        try:
            completed = subprocess.run(
                list(args),
                cwd=str(cwd),
                check=False,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as exc:  # pragma: no cover - depends on environment
            raise EngineUnavailableError(
                f"Unable to locate '{self.executable}'. {self.INSTALL_HINT}"
            ) from exc
        return EngineRun(
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )


__all__ = ["EngineRun", "TsgEngine"]
