"""Tests for the interactive rc bootstrap."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Iterable, List

from tsmetrics.bootstrap import ConfigInitializer
from tsmetrics.config import DEFAULT_THRESHOLDS, load_config
from tsmetrics.models import ExitStatus


def _answers(values: Iterable[str]):
    queue = list(values)

    def prompt(message: str) -> str:
        if not queue:
            raise EOFError
        return queue.pop(0)

    return prompt


def _git(top: Path | None):
    def runner(args, cwd, capture_output=False):  # type: ignore[no-untyped-def]
        if top is None:
            raise subprocess.CalledProcessError(128, list(args))
        return f"{top}\n"

    return runner


def _initializer(answers: Iterable[str], top: Path | None, echoed: List[str]) -> ConfigInitializer:
    return ConfigInitializer(prompt=_answers(answers), echo=echoed.append, git_runner=_git(top))


def test_render_round_trips_through_loader(tmp_path: Path) -> None:
    rc = tmp_path / ".ts-metrics.rc"
    rc.write_text(ConfigInitializer().render(), encoding="utf-8")
    (tmp_path / "tsconfig.json").write_text("{}", encoding="utf-8")

    config = load_config(rc, tmp_path)

    assert config.thresholds == DEFAULT_THRESHOLDS
    assert config.configs == (".",)


def test_outside_git_writes_to_cwd(tmp_path: Path) -> None:
    echoed: List[str] = []

    status = _initializer([], None, echoed).run(tmp_path)

    assert status is ExitStatus.SUCCESS
    assert (tmp_path / ".ts-metrics.rc").is_file()
    assert "Not in a git repository." in echoed


def test_git_root_choice_after_invalid_answer(tmp_path: Path) -> None:
    top = tmp_path / "repo"
    cwd = top / "pkg"
    cwd.mkdir(parents=True)
    echoed: List[str] = []

    status = _initializer(["maybe", "y"], top, echoed).run(cwd)

    assert status is ExitStatus.SUCCESS
    assert (top / ".ts-metrics.rc").is_file()
    assert not (cwd / ".ts-metrics.rc").exists()
    assert "Invalid choice. Please enter y, n, h, or ." in echoed


def test_here_choice_writes_to_cwd(tmp_path: Path) -> None:
    top = tmp_path / "repo"
    cwd = top / "pkg"
    cwd.mkdir(parents=True)

    status = _initializer(["."], top, []).run(cwd)

    assert status is ExitStatus.SUCCESS
    assert (cwd / ".ts-metrics.rc").is_file()


def test_decline_creates_nothing(tmp_path: Path) -> None:
    echoed: List[str] = []

    status = _initializer(["n"], tmp_path, echoed).run(tmp_path)

    assert status is ExitStatus.SUCCESS
    assert not (tmp_path / ".ts-metrics.rc").exists()
    assert "Initialization cancelled." in echoed


def test_existing_file_is_kept_unless_confirmed(tmp_path: Path) -> None:
    rc = tmp_path / ".ts-metrics.rc"
    rc.write_text("MI_YELLOW_MAX=1\n", encoding="utf-8")

    assert _initializer(["n"], None, []).run(tmp_path) is ExitStatus.SUCCESS
    assert rc.read_text(encoding="utf-8") == "MI_YELLOW_MAX=1\n"

    assert _initializer(["y"], None, []).run(tmp_path) is ExitStatus.SUCCESS
    assert "MI_RED_MAX=20" in rc.read_text(encoding="utf-8")


def test_end_of_input_is_an_error(tmp_path: Path) -> None:
    status = _initializer([], tmp_path, []).run(tmp_path)

    assert status is ExitStatus.ERROR
    assert not (tmp_path / ".ts-metrics.rc").exists()
