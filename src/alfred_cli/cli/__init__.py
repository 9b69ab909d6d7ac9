"""CLI layer for alfred-cli.

The typer application provides the root options; every configured
command is added to it as a click subcommand at startup.

Usage:
    # Pick a command interactively
    alfred

    # Run a command directly
    alfred deploy --env prod
"""

from alfred_cli.cli.app import app, build_cli, main
from alfred_cli.cli.builder import CliState, build_command
from alfred_cli.cli.options import OptionParseError, build_option, parse_flags

__all__ = [
    # App
    "app",
    "build_cli",
    "main",
    # Commands
    "CliState",
    "build_command",
    # Options
    "OptionParseError",
    "build_option",
    "parse_flags",
]
