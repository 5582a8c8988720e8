"""Resolution of the files (and tsconfigs) a run analyses."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Sequence, Tuple

from .errors import TsMetricsError
from .logging import get_logger
from .models import FileMetrics, RunOptions
from .project import ROOT_REF, TSCONFIG_FILENAME, config_ref_for

SOURCE_SUFFIXES: Tuple[str, ...] = (".ts",)
PATH_MODE_EXCLUDES: Tuple[str, ...] = ("dist", "node_modules", "**/*.test.ts", "**/*.spec.ts")

DIFF_MODE = "diff"
PATH_MODE = "path"

logger = get_logger("fileset")


class PathNotFoundError(TsMetricsError):
    """Raised when an explicit path does not exist on disk."""


@dataclass(frozen=True)
class FileSet:
    """Engine inputs for one run.

    ``includes`` are relative to ``module`` in path mode and to the project
    root in diff mode; ``rewrite_results`` maps engine output back to
    root-relative paths.
    """

    mode: str
    configs: Tuple[str, ...]
    includes: Tuple[str, ...]
    module: str = ROOT_REF
    excludes: Tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.includes

    def rewrite_results(self, metrics: Iterable[FileMetrics]) -> List[FileMetrics]:
        if self.mode != PATH_MODE or self.module == ROOT_REF:
            return list(metrics)
        return [
            item.model_copy(update={"file_path": f"{self.module}/{item.file_path}"})
            for item in metrics
        ]


def resolve_file_set(
    options: RunOptions,
    root: Path,
    configs: Sequence[str],
    changed_files: Sequence[str] = (),
) -> FileSet:
    """Build the engine inputs for diff mode or path mode."""
    if options.diff_mode:
        sources = tuple(path for path in changed_files if is_source_file(path))
        logger.debug("Diff mode: %d of %d changed files are sources", len(sources), len(changed_files))
        return FileSet(mode=DIFF_MODE, configs=tuple(configs), includes=sources)

    root = Path(root).resolve()
    paths = [_root_relative(path, root) for path in options.explicit_paths]
    # Every path is analysed under the module of the first one.
    module = detect_nearest_config(paths[0], root)
    for path in paths[1:]:
        _require_exists(path, root)
    includes = tuple(module_relative(path, module) for path in paths)
    logger.debug("Path mode: module %s, includes %s", module, " ".join(includes))
    return FileSet(
        mode=PATH_MODE,
        configs=(module,),
        includes=includes,
        module=module,
        excludes=PATH_MODE_EXCLUDES,
    )


def detect_nearest_config(path: str, root: Path) -> str:
    """Return the ref of the nearest directory at or above ``path`` holding a tsconfig.json."""
    root = Path(root).resolve()
    target = _require_exists(path, root)
    current = target if target.is_dir() else target.parent

    for candidate in (current, *current.parents):
        if (candidate / TSCONFIG_FILENAME).is_file():
            try:
                return config_ref_for(candidate, root)
            except ValueError:
                break
        if candidate == root:
            break
    return ROOT_REF


def module_relative(path: str, module: str) -> str:
    """Make a root-relative ``path`` relative to ``module``'s directory."""
    if module == ROOT_REF:
        return path
    if path == module:
        return "."
    prefix = f"{module}/"
    return path[len(prefix):] if path.startswith(prefix) else path


def is_source_file(path: str) -> bool:
    return path.endswith(SOURCE_SUFFIXES)


def _root_relative(path: str, root: Path) -> str:
    candidate = Path(path)
    absolute = candidate if candidate.is_absolute() else root / candidate
    try:
        return absolute.resolve().relative_to(root).as_posix()
    except ValueError:
        # Outside the project root; keep what the user typed.
        return _normalise(path)


def _normalise(path: str) -> str:
    return PurePosixPath(path.replace("\\", "/")).as_posix()


def _require_exists(path: str, root: Path) -> Path:
    candidate = Path(path)
    absolute = candidate if candidate.is_absolute() else root / candidate
    if not absolute.exists():
        raise PathNotFoundError(f"Path does not exist: {path}")
    return absolute.resolve()


__all__ = [
    "FileSet",
    "PATH_MODE_EXCLUDES",
    "PathNotFoundError",
    "SOURCE_SUFFIXES",
    "detect_nearest_config",
    "is_source_file",
    "module_relative",
    "resolve_file_set",
]
