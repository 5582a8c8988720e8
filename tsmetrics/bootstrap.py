"""Interactive creation of a .ts-metrics.rc file (``ts-metrics --init``)."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence

from jinja2 import Environment, FileSystemLoader

from .config import CONFIG_FILENAME, DEFAULT_THRESHOLDS, ThresholdConfig
from .git.changes import git_toplevel
from .logging import get_logger
from .models import ExitStatus

TEMPLATE_NAME = "ts-metrics.rc.j2"
EXAMPLE_CONFIGS: tuple[str, ...] = (".", "shared", "server")


class ConfigInitializer:
    """Prompts for a location and writes a commented rc file with default thresholds."""

    def __init__(
        self,
        *,
        prompt: Callable[[str], str] = input,
        echo: Callable[[str], None] = print,
        git_runner: Callable[..., str] | None = None,
        templates_dir: Path | None = None,
    ) -> None:
        self._prompt = prompt
        self._echo = echo
        self._git_runner = git_runner
        self._env = self._create_env(templates_dir)
        self.logger = get_logger("bootstrap")

    def run(self, cwd: Path) -> ExitStatus:
        cwd = Path(cwd)
        try:
            target_dir = self._choose_directory(cwd)
            if target_dir is None:
                self._echo("Initialization cancelled.")
                return ExitStatus.SUCCESS

            target_file = target_dir / CONFIG_FILENAME
            if target_file.exists() and not self._confirm_overwrite(target_file):
                self._echo("Initialization cancelled.")
                return ExitStatus.SUCCESS
        except EOFError:
            self._echo("Initialization cancelled (no input).")
            return ExitStatus.ERROR

        try:
            target_file.write_text(self.render(), encoding="utf-8")
        except OSError as exc:
            self.logger.error("Failed to create configuration file %s: %s", target_file, exc)
            return ExitStatus.ERROR

        self._echo(f"Configuration file created: {target_file}")
        self._echo("You can now customize the configuration file as needed.")
        return ExitStatus.SUCCESS

    def render(
        self,
        thresholds: ThresholdConfig = DEFAULT_THRESHOLDS,
        example_configs: Sequence[str] = EXAMPLE_CONFIGS,
    ) -> str:
        template = self._env.get_template(TEMPLATE_NAME)
        return template.render(thresholds=thresholds, example_configs=list(example_configs))

    def _choose_directory(self, cwd: Path) -> Path | None:
        git_root = git_toplevel(cwd, runner=self._git_runner)
        if git_root is None:
            self._echo("Not in a git repository.")
            self._echo(f"Creating {CONFIG_FILENAME} in current working directory: {cwd}")
            return cwd

        self._echo(f"Found git root: {git_root}")
        self._echo(f"Create {CONFIG_FILENAME} here? [y/n/h/.]")
        self._echo("  y - yes, create in git root")
        self._echo("  n - no, decline")
        self._echo("  h or . - create in current working directory instead")
        while True:
            response = self._prompt("Your choice: ").strip()
            if response in {"y", "Y"}:
                return git_root
            if response in {"n", "N"}:
                return None
            if response in {"h", "H", "."}:
                return cwd
            self._echo("Invalid choice. Please enter y, n, h, or .")

    def _confirm_overwrite(self, target_file: Path) -> bool:
        self._echo(f"Configuration file already exists: {target_file}")
        response = self._prompt("Overwrite? [y/n]: ").strip()
        if response in {"y", "Y"}:
            self._echo("Overwriting existing configuration file.")
            return True
        return False

    @staticmethod
    def _create_env(templates_dir: Path | None) -> Environment:
        directories = []
        if templates_dir:
            directories.append(str(templates_dir))
        directories.append(str(Path(__file__).with_name("templates")))
        return Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )


__all__ = ["ConfigInitializer"]
