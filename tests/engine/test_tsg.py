"""Tests for the tsg engine adapter."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from tsmetrics.engine import EngineError, EngineRun, EngineUnavailableError, TsgEngine

_DOCUMENT = {
    "metrics": [
        {
            "filePath": "src/a.ts",
            "maintainabilityIndex": 22.77,
            "cyclomaticComplexity": 33,
            "cognitiveComplexity": 54,
            "extra": "ignored",
        }
    ]
}


class FakeRunner:
    def __init__(self, *runs: EngineRun) -> None:
        self._runs = list(runs)
        self.calls: list[tuple[list[str], Path]] = []

    def __call__(self, args, cwd):  # type: ignore[no-untyped-def]
        self.calls.append((list(args), Path(cwd)))
        return self._runs.pop(0)


def test_build_command_points_at_tsconfig_files() -> None:
    engine = TsgEngine(runner=FakeRunner())

    args = engine.build_command([".", "shared"], ["src/a.ts"], ["dist"])

    assert args == [
        "tsg",
        "--tsconfig",
        "./tsconfig.json",
        "--tsconfig",
        "shared/tsconfig.json",
        "--stdout",
        "metrics",
        "--include",
        "src/a.ts",
        "--exclude",
        "dist",
    ]


def test_compute_parses_document_and_skips_banners(tmp_path: Path) -> None:
    stdout = "=== tsg ===\n" + json.dumps(_DOCUMENT)
    runner = FakeRunner(EngineRun(returncode=0, stdout=stdout))
    engine = TsgEngine(runner=runner)

    metrics = engine.compute(tmp_path, ["."], ["src/a.ts"])

    assert len(metrics) == 1
    assert metrics[0].file_path == "src/a.ts"
    assert metrics[0].maintainability_index == pytest.approx(22.77)
    assert metrics[0].cognitive_complexity == 54
    assert runner.calls[0][1] == tmp_path


def test_compute_raises_on_malformed_output(tmp_path: Path) -> None:
    engine = TsgEngine(runner=FakeRunner(EngineRun(returncode=0, stdout="not json")))

    with pytest.raises(EngineError, match="malformed"):
        engine.compute(tmp_path, ["."], ["src/a.ts"])


def test_compute_raises_on_invalid_metric_shape(tmp_path: Path) -> None:
    document = {"metrics": [{"filePath": "a.ts", "maintainabilityIndex": 50}]}
    engine = TsgEngine(runner=FakeRunner(EngineRun(returncode=0, stdout=json.dumps(document))))

    with pytest.raises(EngineError):
        engine.compute(tmp_path, ["."], ["a.ts"])


def test_compute_raises_on_nonzero_exit(tmp_path: Path) -> None:
    engine = TsgEngine(runner=FakeRunner(EngineRun(returncode=3, stdout="", stderr="boom")))

    with pytest.raises(EngineError, match="exit code 3: boom"):
        engine.compute(tmp_path, ["."], ["a.ts"])


def test_compute_treats_blank_output_as_empty(tmp_path: Path) -> None:
    engine = TsgEngine(runner=FakeRunner(EngineRun(returncode=0, stdout="=== banner ===\n")))

    assert engine.compute(tmp_path, ["."], ["a.ts"]) == []


def test_missing_tsconfig_is_warned_and_retried(tmp_path: Path, caplog) -> None:
    (tmp_path / "tsconfig.json").write_text("{}", encoding="utf-8")
    runner = FakeRunner(
        EngineRun(returncode=1, stdout="", stderr="Error: Cannot find tsconfig gone/tsconfig.json at /x\n"),
        EngineRun(returncode=0, stdout=json.dumps(_DOCUMENT)),
    )
    engine = TsgEngine(runner=runner)

    with caplog.at_level("WARNING", logger="tsmetrics"):
        metrics = engine.compute(tmp_path, [".", "gone"], ["src/a.ts"])

    assert [item.file_path for item in metrics] == ["src/a.ts"]
    assert len(runner.calls) == 2
    retry_args = runner.calls[1][0]
    assert "gone/tsconfig.json" not in retry_args
    assert "./tsconfig.json" in retry_args
    assert "tsconfig not found: gone/tsconfig.json" in caplog.text


def test_missing_tsconfig_with_nothing_left_returns_empty(tmp_path: Path) -> None:
    runner = FakeRunner(
        EngineRun(returncode=1, stdout="Cannot find tsconfig ./tsconfig.json at /x"),
    )
    engine = TsgEngine(runner=runner)

    assert engine.compute(tmp_path, ["."], ["a.ts"]) == []
    assert len(runner.calls) == 1


def test_retry_is_attempted_only_once(tmp_path: Path) -> None:
    (tmp_path / "a").mkdir()
    (tmp_path / "a" / "tsconfig.json").write_text("{}", encoding="utf-8")
    runner = FakeRunner(
        EngineRun(returncode=1, stdout="Cannot find tsconfig b/tsconfig.json"),
        EngineRun(returncode=1, stdout="Cannot find tsconfig a/tsconfig.json"),
    )
    engine = TsgEngine(runner=runner)

    with pytest.raises(EngineError, match="still cannot find"):
        engine.compute(tmp_path, ["a", "b"], ["x.ts"])
    assert len(runner.calls) == 2


def test_missing_configs_deduplicates() -> None:
    text = "Cannot find tsconfig a/tsconfig.json at 1\nCannot find tsconfig a/tsconfig.json at 2\n"

    assert TsgEngine.missing_configs(text) == ["a/tsconfig.json"]


def test_ensure_available_reports_install_hint() -> None:
    engine = TsgEngine(runner=FakeRunner(), which=lambda name: None)

    with pytest.raises(EngineUnavailableError, match="npm install -g typescript-graph"):
        engine.ensure_available()


def test_ensure_available_passes_when_found() -> None:
    engine = TsgEngine(runner=FakeRunner(), which=lambda name: f"/usr/bin/{name}")

    engine.ensure_available()
