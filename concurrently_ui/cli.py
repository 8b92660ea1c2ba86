"""Command-line interface for concurrently-ui."""

import logging
import os
import sys
from typing import Optional

from .cli_args import CLIParseError, RunOptions, parse_run_options
from .cli_builder import build_arg_parser
from .executor.supervisor import Supervisor
from .formatters import OutputFormatter
from .logging_setup import setup_logging
from .ui import InteractiveUI, RawUI, UIAdapter

logger = logging.getLogger(__name__)


class CLI:
    """Command-line interface for concurrently-ui."""

    def __init__(self):
        self.parser = build_arg_parser()

    def run(self, argv: Optional[list[str]] = None) -> int:
        """Run the CLI.

        Args:
            argv: Command-line arguments (defaults to sys.argv[1:])

        Returns:
            Exit code
        """
        args = self.parser.parse_args(argv)
        output = OutputFormatter(no_color=args.no_color)

        try:
            options = parse_run_options(args, os.environ)
        except CLIParseError as e:
            output.print_error(str(e))
            return 1

        try:
            setup_logging(options.log_file, options.log_level)
        except OSError as e:
            output.print_error(f"Cannot open log file '{options.log_file}': {e}")
            return 1

        ui = self._build_ui(options, output)
        supervisor = Supervisor(
            options.commands,
            ui,
            policy=options.kill_policy,
            no_color=options.no_color,
        )
        logger.info(
            "Starting %d task(s), kill_others=%s kill_others_on_fail=%s, interactive=%s",
            len(options.commands), options.kill_others, options.kill_others_on_fail, ui.interactive,
        )

        try:
            return supervisor.run()
        except Exception as e:
            logger.exception("Supervisor stopped unexpectedly")
            output.print_error(f"Unexpected error: {e}")
            return 1

    def _build_ui(self, options: RunOptions, output: OutputFormatter) -> UIAdapter:
        """Interactive view on a terminal, plain streaming otherwise."""
        if options.simple_log or not output.console.is_terminal:
            return RawUI(output)
        return InteractiveUI(no_color=options.no_color)


def main() -> int:
    """Main entry point."""
    cli = CLI()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
