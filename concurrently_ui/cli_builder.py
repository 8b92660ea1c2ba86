"""Factory for constructing the CLI argument parser."""

import argparse

from . import __version__

EPILOG = """\
examples:
  concurrently-ui "npm run watch" "npm run serve"
  concurrently-ui -k "pytest -x" "sleep 60"

keys: j/k or arrows select a task, PgUp/PgDn/g/G scroll, m toggles mouse capture, q quits
"""


def build_arg_parser() -> argparse.ArgumentParser:
    """Construct the argparse parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="concurrently-ui",
        description="Run commands concurrently and browse their live logs",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    # Checked by parse_run_options so the error message stays ours
    parser.add_argument(
        "commands",
        nargs="*",
        metavar="COMMAND",
        help="Shell command to run; quote commands that contain spaces",
    )

    parser.add_argument(
        "-k",
        "--kill-others",
        dest="kill_others",
        action="store_true",
        help="Kill all other commands when a command exits with code 0",
    )

    parser.add_argument(
        "--kill-others-on-fail",
        dest="kill_others_on_fail",
        action="store_true",
        help="Kill all other commands when a command exits with a non-zero code",
    )

    parser.add_argument(
        "--no-color",
        dest="no_color",
        action="store_true",
        help="Disable colors and unicode glyphs in the view (commands still get FORCE_COLOR)",
    )

    parser.add_argument(
        "--simple-log",
        dest="simple_log",
        action="store_true",
        help="Stream prefixed output lines instead of the interactive view (default when stdout is not a terminal)",
    )

    parser.add_argument(
        "--log-file",
        dest="log_file",
        type=str,
        help="Write diagnostic logs to this file (env: CONCURRENTLY_UI_LOG_FILE)",
    )

    parser.add_argument(
        "--log-level",
        dest="log_level",
        type=str,
        help="Diagnostic log level: DEBUG, INFO, WARNING or ERROR (env: CONCURRENTLY_UI_LOG_LEVEL, default INFO)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser
