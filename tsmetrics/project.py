"""Project root location and tsconfig discovery."""

from __future__ import annotations

import os
from pathlib import Path, PurePosixPath
from typing import Iterable, List

from .errors import TsMetricsError
from .logging import get_logger

TSCONFIG_FILENAME = "tsconfig.json"
ROOT_MARKERS: tuple[str, ...] = ("package.json", TSCONFIG_FILENAME)
ROOT_REF = "."

STATE_DIRNAME = ".ts-metrics"

_EXCLUDED_DIRS = {
    "node_modules",
    "dist",
    STATE_DIRNAME,
}

logger = get_logger("project")


class NoProjectRootError(TsMetricsError):
    """Raised when no package.json or tsconfig.json exists above the start directory."""


def locate_root(start_dir: Path) -> Path:
    """Return the nearest ancestor of ``start_dir`` (inclusive) holding a root marker."""
    start = Path(start_dir).expanduser().resolve()
    for candidate in (start, *start.parents):
        if any((candidate / marker).is_file() for marker in ROOT_MARKERS):
            logger.debug("Project root resolved to %s", candidate)
            return candidate
    raise NoProjectRootError(
        "Cannot find project root (no package.json or tsconfig.json found in "
        f"{start} or parent directories)"
    )


def discover_configs(root: Path) -> List[str]:
    """Return sorted config refs for every tsconfig.json under ``root``.

    Dependency caches, build output, hidden directories and the tool's own
    state directory are skipped. Never returns an empty list: a tree with no
    tsconfig.json yields the root ref.
    """
    root_path = Path(root).resolve()
    refs: List[str] = []
    for dirpath, dirnames, filenames in os.walk(root_path):
        dirnames[:] = [name for name in dirnames if not _is_excluded_dir(name)]
        if TSCONFIG_FILENAME in filenames:
            refs.append(config_ref_for(Path(dirpath), root_path))

    refs = sorted(dedupe_refs(refs))
    if not refs:
        logger.debug("No tsconfig.json found under %s; using root config", root_path)
        return [ROOT_REF]
    return refs


def config_ref_for(directory: Path, root: Path) -> str:
    """Express ``directory`` as a root-relative config ref."""
    relative = Path(directory).relative_to(root).as_posix()
    return relative if relative not in {"", "."} else ROOT_REF


def normalize_config_ref(value: str) -> str:
    """Normalise a user-supplied tsconfig location to a directory ref."""
    text = value.strip().replace("\\", "/")
    if not text:
        return ROOT_REF
    path = PurePosixPath(text)
    if path.name == TSCONFIG_FILENAME:
        path = path.parent
    normalized = path.as_posix()
    return normalized if normalized not in {"", "."} else ROOT_REF


def dedupe_refs(refs: Iterable[str]) -> List[str]:
    seen: set[str] = set()
    ordered: List[str] = []
    for ref in refs:
        if ref not in seen:
            ordered.append(ref)
            seen.add(ref)
    return ordered


def _is_excluded_dir(name: str) -> bool:
    return name in _EXCLUDED_DIRS or name.startswith(".")


__all__ = [
    "NoProjectRootError",
    "ROOT_REF",
    "TSCONFIG_FILENAME",
    "config_ref_for",
    "dedupe_refs",
    "discover_configs",
    "locate_root",
    "normalize_config_ref",
]
