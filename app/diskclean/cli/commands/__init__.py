"""CLI commands for diskclean.

This package contains all subcommand implementations and the helpers
they share.
"""

import typer

from diskclean.core.config import AppConfig, ConfigError, load_config
from diskclean.core.selection import SelectionSession
from diskclean.utils.formatting import print_error


def load_settings() -> AppConfig:
    """Load settings, exiting with an error message if the file is invalid."""
    try:
        return load_config()
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def exit_on_failures(session: SelectionSession | None) -> None:
    """Exit with code 1 if an interactive deletion left failed paths."""
    if session is None or session.report is None:
        return
    if not session.report.all_succeeded:
        raise typer.Exit(code=1)
