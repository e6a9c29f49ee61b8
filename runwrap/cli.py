"""CLI entrypoint: run one executable and mirror its exit status."""

from __future__ import annotations

import argparse
import sys

from pathlib import Path
from typing import Optional

from runwrap.configuration import ExecutionSettings, load_execution_settings
from runwrap.exceptions import (
    ConfigError,
    ExecutionError,
    ExitStatusError,
    InvalidOptionsError,
    LaunchError,
)
from runwrap.execution import Executable
from runwrap.logging import (
    get_logger,
    setup_console_logging,
    setup_file_logger,
)

EXIT_USAGE = 2
EXIT_NOT_EXECUTABLE = 126
EXIT_NOT_FOUND = 127


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="runwrap",
        description=(
            "Run an external program with an optional working directory "
            "and environment, forwarding and capturing its output."
        ),
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Path to a YAML config with an 'execution' section.",
    )
    parser.add_argument(
        "--dir",
        type=str,
        help="Working directory for the program (default: inherit).",
    )
    parser.add_argument(
        "--env",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help=(
            "Environment entry for the program; repeatable. Any entry "
            "replaces the inherited environment entirely."
        ),
    )
    parser.add_argument(
        "--env-file",
        type=str,
        help="dotenv file whose entries are added to the environment.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Capture output without forwarding it to this terminal.",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        help="Write runwrap diagnostics to a rotating log file.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase diagnostic verbosity on stderr (-v, -vv).",
    )
    parser.add_argument("executable", help="Program name or path.")
    parser.add_argument(
        "args",
        nargs=argparse.REMAINDER,
        help="Arguments passed through to the program.",
    )
    return parser


def _resolve_settings(args: argparse.Namespace) -> ExecutionSettings:
    settings = (
        load_execution_settings(Path(args.config))
        if args.config
        else ExecutionSettings()
    )
    cwd = Path.cwd()
    return ExecutionSettings(
        dir=(cwd / args.dir).resolve() if args.dir else settings.dir,
        env=settings.env,
        env_file=(
            (cwd / args.env_file).resolve()
            if args.env_file
            else settings.env_file
        ),
    )


def exit_code_for(error: Optional[ExecutionError]) -> int:
    """Map an execution outcome onto a shell-style exit code."""

    if error is None:
        return 0
    if isinstance(error, ExitStatusError):
        if error.returncode < 0:
            return 128 + (-error.returncode)
        return error.returncode
    if isinstance(error, LaunchError):
        if isinstance(error.__cause__, PermissionError):
            return EXIT_NOT_EXECUTABLE
        return EXIT_NOT_FOUND
    return 1


def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    setup_console_logging(args.verbose)
    logger = (
        setup_file_logger(Path(args.log_file))
        if args.log_file
        else get_logger()
    )

    try:
        settings = _resolve_settings(args)
        options = settings.to_options(
            extra_env=args.env,
            stdout=None if args.quiet else sys.stdout,
            stderr=None if args.quiet else sys.stderr,
        )
        result = Executable(args.executable, logger=logger).execute(
            options, *args.args
        )
    except (ConfigError, InvalidOptionsError) as exc:
        print(f"runwrap: {exc}", file=sys.stderr)
        return EXIT_USAGE

    if result.error is not None and not isinstance(
        result.error, ExitStatusError
    ):
        print(f"runwrap: {result.error}", file=sys.stderr)
    return exit_code_for(result.error)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
