"""CLI entrypoint for ts-metrics."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import NoReturn

from .bootstrap import ConfigInitializer
from .errors import TsMetricsError
from .logging import configure_logging
from .models import ExitStatus, RunOptions
from .orchestrator import Orchestrator

_PROG = "ts-metrics"

_EPILOG = """\
Arguments:
  PATH may be an absolute path, a path relative to the project root, a .ts
  file, or a directory containing .ts files. Without PATH, only files changed
  in git (modified or untracked) are analysed.

Configuration:
  .ts-metrics.rc is loaded from the first location that has one:
    1. the current directory or a parent, up to the project root
    2. $HOME/.ts-metrics.rc
    3. built-in defaults (MI 40/20, CC 11/21, CoC 11/21)
  Keys: MI_YELLOW_MAX, MI_RED_MAX, CC_YELLOW_MIN, CC_RED_MIN,
        COC_YELLOW_MIN, COC_RED_MIN, TSCONFIGS=( "." "shared" ... )

Exit codes:
  0  success (no red-zone files)
  1  error (invalid arguments, missing dependencies, bad configuration)
  2  red-zone files detected, regardless of which rows were displayed

Examples:
  ts-metrics                  # git diff mode
  ts-metrics src/lib          # analyse a directory
  ts-metrics --all src        # show every file
  ts-metrics --json --red src # JSON, red-zone files only
  ts-metrics --init           # create a config file
"""


class _Parser(argparse.ArgumentParser):
    """Argument parser that reports usage errors with exit status 1."""

    def error(self, message: str) -> NoReturn:
        self.exit(
            ExitStatus.ERROR,
            f"Error: {message}\nRun '{self.prog} --help' for usage.\n",
        )


def _build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog=_PROG,
        description="TypeScript code metrics analyzer using the tsg CLI.",
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )
    parser.add_argument(
        "--init",
        action="store_true",
        help="Create a .ts-metrics.rc configuration file and exit.",
    )
    parser.add_argument(
        "--all",
        dest="show_all",
        action="store_true",
        help="Show all files (disable yellow/red filtering).",
    )
    parser.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Output metrics as JSON instead of a text table.",
    )
    parser.add_argument(
        "--red",
        dest="red_only",
        action="store_true",
        help="Show only red-zone files (overridden by --all).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "paths",
        nargs="*",
        metavar="PATH",
        help="Files or directories to analyse (defaults to git diff mode).",
    )
    return parser


def _parse_args(parser: argparse.ArgumentParser, argv: list[str] | None) -> argparse.Namespace:
    args, unknown = parser.parse_known_args(argv)
    flags = [token for token in unknown if token.startswith("-")]
    if flags:
        parser.exit(
            ExitStatus.ERROR,
            f"Error: Unknown flag: {flags[0]}\nRun '{_PROG} --help' for usage.\n",
        )
    args.paths = list(args.paths) + unknown
    return args


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint for ts-metrics."""
    parser = _build_parser()
    args = _parse_args(parser, argv)

    configure_logging(verbose=bool(args.verbose))

    if args.init:
        return int(ConfigInitializer().run(Path.cwd()))

    options = RunOptions(
        show_all=bool(args.show_all),
        json_output=bool(args.json_output),
        red_only=bool(args.red_only),
        explicit_paths=tuple(args.paths),
    )

    orchestrator = Orchestrator()
    try:
        status = orchestrator.run(options)
    except TsMetricsError as exc:
        parser.exit(ExitStatus.ERROR, f"Error: {exc}\n")
    return int(status)


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
