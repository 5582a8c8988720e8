"""Configuration loading for ts-metrics (.ts-metrics.rc)."""

from __future__ import annotations

import math
import re
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from .errors import TsMetricsError
from .logging import get_logger
from .project import dedupe_refs, discover_configs, normalize_config_ref

CONFIG_FILENAME = ".ts-metrics.rc"

Number = Union[int, float]

_ASSIGNMENT = re.compile(r"^(?:export\s+)?([A-Za-z_][A-Za-z0-9_]*)=(.*)$")

logger = get_logger("config")


class ConfigError(TsMetricsError):
    """Raised when the configuration file is malformed or incomplete."""


@dataclass(frozen=True)
class ThresholdConfig:
    """Zone boundaries for the three metrics.

    MI bounds are "at or below" limits; CC and CoC bounds are "at or above".
    """

    mi_yellow_max: Number = 40
    mi_red_max: Number = 20
    cc_yellow_min: Number = 11
    cc_red_min: Number = 21
    coc_yellow_min: Number = 11
    coc_red_min: Number = 21


DEFAULT_THRESHOLDS = ThresholdConfig()

# rc key -> ThresholdConfig field
THRESHOLD_KEYS: Dict[str, str] = {
    "MI_YELLOW_MAX": "mi_yellow_max",
    "MI_RED_MAX": "mi_red_max",
    "CC_YELLOW_MIN": "cc_yellow_min",
    "CC_RED_MIN": "cc_red_min",
    "COC_YELLOW_MIN": "coc_yellow_min",
    "COC_RED_MIN": "coc_red_min",
}
CONFIGS_KEY = "TSCONFIGS"


@dataclass(frozen=True)
class MetricsConfig:
    """Effective configuration for one run."""

    thresholds: ThresholdConfig
    configs: Tuple[str, ...]
    source: Optional[Path] = None


@dataclass
class RcFile:
    """Raw assignments read from an rc file."""

    path: Path
    scalars: Dict[str, str] = field(default_factory=dict)
    arrays: Dict[str, List[str]] = field(default_factory=dict)


def resolve_config(root: Path, home: Path, cwd: Path | None = None) -> MetricsConfig:
    """Resolve thresholds and tsconfig refs from the first config tier that exists."""
    root = Path(root).resolve()
    start = Path(cwd).resolve() if cwd is not None else root
    config_file = find_config_file(start, root, home)

    if config_file is None:
        logger.debug("No %s found; using built-in defaults", CONFIG_FILENAME)
        return MetricsConfig(
            thresholds=DEFAULT_THRESHOLDS,
            configs=tuple(discover_configs(root)),
        )

    logger.debug("Loading configuration from %s", config_file)
    return load_config(config_file, root)


def find_config_file(cwd: Path, root: Path, home: Path) -> Optional[Path]:
    """Return the nearest rc file between ``cwd`` and ``root``, else the user-level one."""
    current = Path(cwd).resolve()
    root = Path(root).resolve()
    for candidate in (current, *current.parents):
        config_file = candidate / CONFIG_FILENAME
        if config_file.is_file():
            return config_file
        if candidate == root:
            break

    user_file = Path(home).expanduser() / CONFIG_FILENAME
    if user_file.is_file():
        return user_file
    return None


def load_config(config_path: Path, root: Path) -> MetricsConfig:
    """Load an rc file; every threshold must be set literally in the file."""
    rc = parse_rc_file(config_path)

    values: Dict[str, Number] = {}
    problems: List[str] = []
    for key, attr in THRESHOLD_KEYS.items():
        raw = rc.scalars.get(key)
        number = _as_number(raw)
        if number is None:
            problems.append(key if raw in (None, "") else f"{key} (not a number: {raw!r})")
            continue
        values[attr] = number

    if problems:
        raise ConfigError(
            f"Invalid configuration in {config_path}. Missing variables: {', '.join(problems)}"
        )

    refs = dedupe_refs(normalize_config_ref(item) for item in _config_entries(rc))
    if not refs:
        refs = discover_configs(root)

    return MetricsConfig(
        thresholds=ThresholdConfig(**values),
        configs=tuple(refs),
        source=rc.path,
    )


def parse_rc_file(path: Path) -> RcFile:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    scalars, arrays = parse_rc(text, source=str(path))
    return RcFile(path=Path(path), scalars=scalars, arrays=arrays)


def parse_rc(text: str, *, source: str = CONFIG_FILENAME) -> Tuple[Dict[str, str], Dict[str, List[str]]]:
    """Parse shell-style ``KEY=value`` and ``KEY=( ... )`` assignments."""
    scalars: Dict[str, str] = {}
    arrays: Dict[str, List[str]] = {}
    lines = text.splitlines()
    index = 0
    while index < len(lines):
        stripped = lines[index].strip()
        index += 1
        if not stripped or stripped.startswith("#"):
            continue
        match = _ASSIGNMENT.match(stripped)
        if match is None:
            continue
        key, value = match.group(1), match.group(2).strip()
        if value.startswith("("):
            body = value[1:]
            while not _closes_array(body):
                if index >= len(lines):
                    raise ConfigError(f"Unterminated array '{key}' in {source}")
                body += "\n" + lines[index]
                index += 1
            arrays[key] = _split(body[: body.rindex(")")], key, source)
            scalars.pop(key, None)
        else:
            tokens = _split(value, key, source)
            if len(tokens) > 1:
                raise ConfigError(f"Expected a single value for '{key}' in {source}, got: {value}")
            scalars[key] = tokens[0] if tokens else ""
            arrays.pop(key, None)
    return scalars, arrays


def _closes_array(body: str) -> bool:
    for line in body.splitlines() or [body]:
        uncommented = line.split("#", 1)[0]
        if ")" in uncommented:
            return True
    return False


def _split(value: str, key: str, source: str) -> List[str]:
    try:
        return shlex.split(value, comments=True)
    except ValueError as exc:
        raise ConfigError(f"Failed to parse '{key}' in {source}: {exc}") from exc


def _config_entries(rc: RcFile) -> List[str]:
    if CONFIGS_KEY in rc.arrays:
        return rc.arrays[CONFIGS_KEY]
    single = rc.scalars.get(CONFIGS_KEY)
    return [single] if single else []


def _as_number(value: Any) -> Optional[Number]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return None
        # Thresholds must be finite.
        return number if math.isfinite(number) else None
    return None


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DEFAULT_THRESHOLDS",
    "MetricsConfig",
    "ThresholdConfig",
    "find_config_file",
    "load_config",
    "parse_rc",
    "resolve_config",
]
