"""Changed-file discovery for diff mode."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, Iterable, List

from ..logging import get_logger

logger = get_logger("git")


class ChangeDetector:
    """Lists tracked modifications and untracked files relative to the project root."""

    _COMMANDS: tuple[tuple[str, ...], ...] = (
        ("git", "diff", "--name-only", "--relative"),
        ("git", "ls-files", "--others", "--exclude-standard"),
    )

    def __init__(self, runner: Callable[..., str] | None = None) -> None:
        self._runner = runner or self._default_runner

    def changed_files(self, root: Path) -> List[str]:
        """Return changed paths (relative to ``root``) in git output order, de-duplicated."""
        files: List[str] = []
        for args in self._COMMANDS:
            try:
                output = self._run(args, cwd=Path(root))
            except (OSError, subprocess.CalledProcessError) as exc:
                logger.warning("Unable to list changed files with '%s': %s", " ".join(args), exc)
                return []
            for line in output.splitlines():
                path = line.strip()
                if path and path not in files:
                    files.append(path)
        logger.debug("Git reported %d changed files", len(files))
        return files

    def _run(self, args: Iterable[str], *, cwd: Path) -> str:
        return self._runner(list(args), cwd=cwd, capture_output=True)

    @staticmethod
    def _default_runner(
        args: Iterable[str],
        *,
        cwd: Path,
        capture_output: bool = False,
    ) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            text=True,
            capture_output=capture_output,
        )
        return completed.stdout if capture_output else ""


def git_toplevel(cwd: Path, runner: Callable[..., str] | None = None) -> Path | None:
    """Return the enclosing git work tree root, or None outside a repository."""
    run = runner or ChangeDetector._default_runner
    try:
        output = run(["git", "rev-parse", "--show-toplevel"], cwd=Path(cwd), capture_output=True)
    except (OSError, subprocess.CalledProcessError):
        return None
    top = output.strip()
    return Path(top) if top else None


__all__ = ["ChangeDetector", "git_toplevel"]
