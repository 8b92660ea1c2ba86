"""Structured parsing helpers for CLI inputs."""

import argparse
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional

from .executor.lifecycle import KillPolicy

LOG_FILE_ENV = "CONCURRENTLY_UI_LOG_FILE"
LOG_LEVEL_ENV = "CONCURRENTLY_UI_LOG_LEVEL"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
DEFAULT_LOG_LEVEL = "INFO"


class CLIParseError(Exception):
    """Raised when CLI inputs cannot be parsed."""


@dataclass(frozen=True)
class RunOptions:
    """Validated settings for one run."""

    commands: List[str]
    kill_others: bool = False
    kill_others_on_fail: bool = False
    no_color: bool = False
    simple_log: bool = False
    log_file: Optional[Path] = None
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def kill_policy(self) -> KillPolicy:
        return KillPolicy(
            kill_others=self.kill_others,
            kill_others_on_fail=self.kill_others_on_fail,
        )


def parse_run_options(
    args: argparse.Namespace, environ: Optional[Mapping[str, str]] = None
) -> RunOptions:
    """
    Validate parsed arguments and merge environment defaults.

    Commands are kept verbatim; they are handed to the shell as-is.

    Args:
        args: Namespace produced by the parser from cli_builder.
        environ: Environment used for option defaults (defaults to os.environ).

    Returns:
        RunOptions for the supervisor.

    Raises:
        CLIParseError: If no command was given or an option value is invalid.
    """
    environ = os.environ if environ is None else environ

    commands = list(args.commands or [])
    if not commands:
        raise CLIParseError("At least one command is required")

    log_file_value = args.log_file or environ.get(LOG_FILE_ENV, "")
    log_file = Path(log_file_value).expanduser() if log_file_value.strip() else None

    log_level = (args.log_level or environ.get(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).strip().upper()
    if log_level not in LOG_LEVELS:
        raise CLIParseError(
            f"Log level '{log_level}' is invalid. Expected one of: {', '.join(LOG_LEVELS)}."
        )

    return RunOptions(
        commands=commands,
        kill_others=args.kill_others,
        kill_others_on_fail=args.kill_others_on_fail,
        no_color=args.no_color,
        simple_log=args.simple_log,
        log_file=log_file,
        log_level=log_level,
    )
